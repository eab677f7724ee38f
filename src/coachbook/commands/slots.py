"""Availability slot commands."""

from datetime import date

import click

from ..models.recurrence import WEEKDAY_NAMES
from ..models.slots import SingleSlotDraft, SlotStatus
from ..rules.recurrence import RecurrenceRuleBuilder
from ..services.availability import AvailabilityService
from .base import (
    admin_context,
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    get_backend,
    parse_day,
    parse_time_on,
)

STATUS_CHOICES = [SlotStatus.OPEN.value, SlotStatus.UNAVAILABLE.value]

# Sunday=0, as used by recurrence rules
WEEKDAY_ABBREVIATIONS = {name[:3].lower(): i for i, name in enumerate(WEEKDAY_NAMES)}


def _service(ctx: click.Context, trainer_id: str) -> AvailabilityService:
    backend = get_backend(ctx)
    return AvailabilityService(backend, backend, admin_context(trainer_id))


def parse_weekdays(value: str) -> set[int]:
    """Parse 'mon,wed,fri' (or Sunday-based numbers) into weekday indices."""
    weekdays = set()
    for part in value.split(","):
        part = part.strip().lower()
        if not part:
            continue
        if part.isdigit():
            if int(part) > 6:
                raise click.BadParameter(f"Weekday numbers run 0 (Sun) to 6 (Sat), got {part}")
            weekdays.add(int(part))
        elif part[:3] in WEEKDAY_ABBREVIATIONS:
            weekdays.add(WEEKDAY_ABBREVIATIONS[part[:3]])
        else:
            raise click.BadParameter(f"Unknown weekday {part!r}")
    return weekdays


@click.group()
def slots():
    """Edit trainer availability."""
    pass


@slots.command("add")
@click.argument("trainer_id")
@click.argument("day")
@click.argument("start")
@click.argument("end", required=False)
@click.option("--status", type=click.Choice(STATUS_CHOICES), default="open", show_default=True)
@click.option("--all-trainers", is_flag=True, help="Apply to every active trainer")
@click.pass_context
@async_command
async def add(
    ctx: click.Context,
    trainer_id: str,
    day: str,
    start: str,
    end: str | None,
    status: str,
    all_trainers: bool,
):
    """Add a single slot (or a block split into hourly slots).

    START and END are HH:MM; they are snapped to the hour and the slot
    lasts at least one hour.

    Example:
        coachbook slots add t1 2025-03-10 09:15
    """
    ensure_initialized(ctx)

    slot_day = parse_day(day)
    start_time = parse_time_on(slot_day, start)
    draft = SingleSlotDraft.from_default(slot_day, start_time.hour, SlotStatus(status))
    if end:
        draft.set_end(parse_time_on(slot_day, end))

    service = _service(ctx, trainer_id)
    result = await service.save_single(draft, apply_to_all_trainers=all_trainers)
    if not result.ok:
        echo_error(result.message)
        ctx.exit(1)

    echo_success(
        f"{result.message}: {draft.start.strftime('%Y-%m-%d %H:%M')}"
        f"-{draft.end.strftime('%H:%M')} ({draft.status.value})"
    )


@slots.command("recur")
@click.argument("trainer_id")
@click.option("--days", required=True, help="Weekdays, e.g. mon,wed,fri")
@click.option("--from-hour", type=int, default=9, show_default=True)
@click.option("--to-hour", type=int, default=17, show_default=True)
@click.option("--start-date", help="First day (default: today)")
@click.option("--end-date", help="Last day (default: one month after start)")
@click.option("--ongoing", is_flag=True, help="No end date")
@click.option("--status", type=click.Choice(STATUS_CHOICES), default="open", show_default=True)
@click.option("--all-trainers", is_flag=True, help="Apply to every active trainer")
@click.pass_context
@async_command
async def recur(
    ctx: click.Context,
    trainer_id: str,
    days: str,
    from_hour: int,
    to_hour: int,
    start_date: str | None,
    end_date: str | None,
    ongoing: bool,
    status: str,
    all_trainers: bool,
):
    """Apply recurring weekly availability.

    Creates 60-minute slots on the selected weekdays between the daily
    hours, from the start date to the end date.
    """
    ensure_initialized(ctx)

    builder = RecurrenceRuleBuilder(anchor_day=date.today(), default_hour=from_hour)
    builder.set_weekdays(parse_weekdays(days))
    builder.set_daily_end_hour(to_hour)
    if start_date:
        builder.set_start_date(parse_day(start_date))
    if end_date:
        builder.set_end_date(parse_day(end_date))
    builder.set_ongoing(ongoing)
    builder.set_status(SlotStatus(status))
    builder.set_apply_to_all_trainers(all_trainers)

    echo_info(builder.describe())

    service = _service(ctx, trainer_id)
    result = await service.apply_recurring(builder)
    if not result.ok:
        echo_error(result.message)
        ctx.exit(1)
    echo_success(result.message)


@slots.command("list")
@click.argument("trainer_id")
@click.option("--week-of", help="Any day in the week to show (default: today)")
@click.pass_context
@async_command
async def list_slots(ctx: click.Context, trainer_id: str, week_of: str | None):
    """Show a trainer's slots for one week."""
    ensure_initialized(ctx)

    anchor = parse_day(week_of) if week_of else date.today()
    service = _service(ctx, trainer_id)
    week = await service.week_slots(anchor)

    if not week:
        echo_info("No slots this week.")
        return

    rows = [
        [
            slot.start_time.strftime("%a %Y-%m-%d"),
            f"{slot.start_time.strftime('%H:%M')}-{slot.end_time.strftime('%H:%M')}",
            slot.display_title,
        ]
        for slot in week
    ]
    click.echo(format_table(["Day", "Time", "Status"], rows))


@slots.command("clear")
@click.argument("trainer_id")
@click.argument("day")
@click.argument("hour", type=click.IntRange(0, 23))
@click.pass_context
@async_command
async def clear(ctx: click.Context, trainer_id: str, day: str, hour: int):
    """Remove the slot starting at HOUR on DAY."""
    ensure_initialized(ctx)

    service = _service(ctx, trainer_id)
    result = await service.clear_slot(parse_day(day), hour)
    if not result.ok:
        echo_error(result.message)
        ctx.exit(1)
    echo_success(result.message)
