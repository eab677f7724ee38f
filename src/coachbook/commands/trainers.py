"""Trainer management commands."""

import click

from ..db import TrainerRepository
from ..models.people import Trainer
from .base import (
    async_command,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    get_db_path_from_ctx,
)


@click.group()
def trainers():
    """Manage trainers."""
    pass


@trainers.command("add")
@click.argument("trainer_id")
@click.argument("name")
@click.option("--email", default="", help="Trainer email address")
@click.option("--inactive", is_flag=True, help="Exclude from all-trainer availability")
@click.pass_context
@async_command
async def add(ctx: click.Context, trainer_id: str, name: str, email: str, inactive: bool):
    """Add a trainer."""
    ensure_initialized(ctx)

    repo = TrainerRepository(get_db_path_from_ctx(ctx))
    await repo.create(
        Trainer(id=trainer_id, display_name=name, email=email, active=not inactive)
    )
    echo_success(f"Trainer {trainer_id} added")


@trainers.command("list")
@click.pass_context
@async_command
async def list_trainers(ctx: click.Context):
    """List all trainers."""
    ensure_initialized(ctx)

    repo = TrainerRepository(get_db_path_from_ctx(ctx))
    all_trainers = await repo.list_all()

    if not all_trainers:
        echo_info("No trainers yet.")
        return

    rows = [
        [t.id, t.display_name, t.email, "yes" if t.active else "no"]
        for t in all_trainers
    ]
    click.echo(format_table(["ID", "Name", "Email", "Active"], rows))
