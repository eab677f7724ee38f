"""Shared CLI utilities."""

import asyncio
from datetime import date, datetime
from functools import wraps
from pathlib import Path

import click

from ..backends.local import LocalBackend
from ..db import get_db_path
from ..models.people import SessionContext


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_db_path_from_ctx(ctx: click.Context) -> Path:
    """Database path for the data directory chosen on the command line."""
    obj = ctx.find_root().obj or {}
    return get_db_path(obj.get("data_dir"))


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_db_path_from_ctx(ctx)
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'coachbook init' first."
        )
        ctx.exit(1)


def get_backend(ctx: click.Context) -> LocalBackend:
    return LocalBackend(get_db_path_from_ctx(ctx))


def admin_context(trainer_id: str | None = None) -> SessionContext:
    """Session for the operator running the CLI."""
    return SessionContext(user_id="cli", trainer_id=trainer_id, is_admin=True)


def parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM-DD, got {value!r}")


def parse_time_on(day: date, value: str) -> datetime:
    """Parse HH:MM (or H) into a datetime on ``day``."""
    try:
        if ":" in value:
            hour, minute = (int(part) for part in value.split(":", 1))
        else:
            hour, minute = int(value), 0
        return datetime.combine(day, datetime.min.time()).replace(hour=hour, minute=minute)
    except ValueError:
        raise click.BadParameter(f"Expected HH:MM, got {value!r}")


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = []
    lines.append("".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)))
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row))
        )

    return "\n".join(lines)
