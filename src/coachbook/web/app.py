"""FastAPI application exposing availability and booking as JSON."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..backends.local import LocalBackend
from ..db.engine import get_db_path, init_db
from ..errors import CoachbookError
from .routers import booking, schedule


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    db_path = db_path or get_db_path()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the schema on startup if needed."""
        if not db_path.exists():
            await init_db(db_path)
        yield

    app = FastAPI(
        title="coachbook",
        description="Trainer availability and lesson booking",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.backend = LocalBackend(db_path)

    @app.exception_handler(CoachbookError)
    async def coachbook_error_handler(request: Request, exc: CoachbookError):
        http_exc = exc.to_http_exception()
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})

    app.include_router(schedule.router)
    app.include_router(booking.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": "0.1.0"}

    return app
