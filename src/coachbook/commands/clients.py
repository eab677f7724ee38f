"""Client management commands."""

from datetime import datetime

import click

from ..db import ClientRepository
from ..models.people import Client
from .base import (
    async_command,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    get_backend,
    get_db_path_from_ctx,
)


@click.group()
def clients():
    """Manage clients."""
    pass


@clients.command("add")
@click.argument("client_id")
@click.argument("first_name")
@click.argument("last_name", default="")
@click.option("--trainer", "-t", "trainer_id", help="Trainer the client belongs to")
@click.option("--email", default="", help="Client email address")
@click.option("--phone", default="", help="Client phone number")
@click.pass_context
@async_command
async def add(
    ctx: click.Context,
    client_id: str,
    first_name: str,
    last_name: str,
    trainer_id: str | None,
    email: str,
    phone: str,
):
    """Add a client."""
    ensure_initialized(ctx)

    repo = ClientRepository(get_db_path_from_ctx(ctx))
    client = Client(
        id=client_id,
        first_name=first_name,
        last_name=last_name,
        email_address=email,
        phone_number=phone,
    )
    await repo.create(client, trainer_id=trainer_id)
    echo_success(f"Client {client.full_name} added")


@clients.command("list")
@click.option("--trainer", "-t", "trainer_id", help="Only this trainer's clients")
@click.pass_context
@async_command
async def list_clients(ctx: click.Context, trainer_id: str | None):
    """List clients."""
    ensure_initialized(ctx)

    repo = ClientRepository(get_db_path_from_ctx(ctx))
    found = await repo.list_for_trainer(trainer_id)

    if not found:
        echo_info("No clients found.")
        return

    rows = [[c.id, c.full_name, c.email_address, c.phone_number] for c in found]
    click.echo(format_table(["ID", "Name", "Email", "Phone"], rows))


@clients.command("bookings")
@click.argument("client_id")
@click.pass_context
@async_command
async def list_bookings(ctx: click.Context, client_id: str):
    """List a client's booked lessons."""
    ensure_initialized(ctx)

    backend = get_backend(ctx)
    found = await backend.fetch_bookings(client_id)

    if not found:
        echo_info("No bookings found.")
        return

    rows = [
        [
            datetime.fromisoformat(b["start_time"]).strftime("%a %Y-%m-%d %H:%M"),
            b["trainer_name"] or b["trainer_id"],
            b["package_id"],
            b["status"],
        ]
        for b in found
    ]
    click.echo(format_table(["Lesson", "Trainer", "Package", "Status"], rows))
