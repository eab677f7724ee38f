"""Initialize project command."""

import click

from ..db import init_db
from .base import async_command, echo_info, echo_success, get_db_path_from_ctx


@click.command()
@click.pass_context
@async_command
async def init(ctx: click.Context):
    """Initialize the coachbook database.

    Creates the data directory and the SQLite schema for trainers,
    clients, lesson packages, schedule slots and bookings.
    """
    db_path = get_db_path_from_ctx(ctx)
    echo_info(f"Initializing coachbook in {db_path.parent}")

    await init_db(db_path)
    echo_success("Database initialized")

    click.echo()
    click.echo("Next steps:")
    click.echo("  coachbook trainers add t1 'Alex Smith'")
    click.echo("  coachbook slots recur t1 --days mon,wed,fri --from-hour 9 --to-hour 17")
    click.echo("  coachbook book t1 2025-03-10 10")
