"""Request dependencies shared by the routers."""

from datetime import datetime

from fastapi import Header, Request

from ..backends.local import LocalBackend
from ..models.people import SessionContext


def get_backend(request: Request) -> LocalBackend:
    """Get the backend from app state."""
    return request.app.state.backend


def get_session(
    x_user_id: str = Header(default="anonymous"),
    x_trainer_id: str | None = Header(default=None),
    x_admin: bool = Header(default=False),
) -> SessionContext:
    """Build the caller's session from request headers."""
    return SessionContext(user_id=x_user_id, trainer_id=x_trainer_id, is_admin=x_admin)


def naive_local(value: datetime | None) -> datetime | None:
    """Convert an offset-aware time to naive local time; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
