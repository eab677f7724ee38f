"""Administrator lesson booking command."""

import click
import questionary

from ..models.packages import PackageType
from ..rules.booking_validator import lesson_window
from ..rules.package_allocation import available_package_types
from ..services.booking_flow import BookingFlow, BookingPhase
from .base import (
    admin_context,
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    get_backend,
    parse_day,
)


@click.command()
@click.argument("trainer_id")
@click.argument("day")
@click.argument("hour", type=int)
@click.option("--client", "-c", "client_id", help="Client to book (prompted if omitted)")
@click.option(
    "--type",
    "package_type",
    type=click.Choice([t.value for t in PackageType]),
    help="Package type to use (prompted if omitted)",
)
@click.pass_context
@async_command
async def book(
    ctx: click.Context,
    trainer_id: str,
    day: str,
    hour: int,
    client_id: str | None,
    package_type: str | None,
):
    """Book a one-hour lesson at HOUR on DAY with TRAINER_ID.

    The package is chosen automatically for the requested type: packages
    that expire are used first, then the oldest purchase.

    Example:
        coachbook book t1 2025-03-10 9 --client c1 --type private
    """
    ensure_initialized(ctx)

    if not 0 <= hour <= 23:
        raise click.BadParameter("Hour must be between 0 and 23", param_hint="HOUR")

    backend = get_backend(ctx)
    flow = BookingFlow(backend, backend, admin_context(trainer_id), trainer_id)

    clients = await flow.load_clients()
    if flow.error_message:
        echo_error(flow.error_message)
        ctx.exit(1)

    if client_id is None:
        if not clients:
            echo_error(f"Trainer {trainer_id} has no clients.")
            ctx.exit(1)
        client_id = await questionary.select(
            "Client:",
            choices=[questionary.Choice(c.full_name, c.id) for c in clients],
        ).ask_async()
        if client_id is None:
            return

    await flow.select_client(client_id)
    if flow.error_message:
        echo_error(flow.error_message)
        ctx.exit(1)

    if package_type is None:
        usable = available_package_types(flow.packages)
        if not usable:
            echo_error("Client has no usable lesson packages.")
            ctx.exit(1)
        package_type = await questionary.select(
            "Package type:",
            choices=[questionary.Choice(t.display_name, t.value) for t in usable],
        ).ask_async()
        if package_type is None:
            return

    flow.select_package_type(package_type)
    if flow.phase != BookingPhase.PACKAGE_SELECTED:
        echo_error(
            f"No usable {PackageType(package_type).display_name} package for this client."
        )
        ctx.exit(1)

    start, end = lesson_window(parse_day(day), hour)
    echo_info(
        f"Booking {start.strftime('%Y-%m-%d %H:%M')}-{end.strftime('%H:%M')} "
        f"with package {flow.package_id}"
    )

    if not await flow.book(start, end):
        echo_error(flow.error_message or "Booking failed")
        ctx.exit(1)

    echo_success(f"{flow.last_receipt.message} (booking {flow.last_receipt.booking_id})")
