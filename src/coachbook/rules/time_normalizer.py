"""Snapping of slot times onto hour boundaries."""

from datetime import date, datetime, timedelta

from ..models.slots import MIN_SLOT_LENGTH, SlotStatus


def truncate_to_hour(value: datetime) -> datetime:
    """Drop minutes, seconds and microseconds."""
    return value.replace(minute=0, second=0, microsecond=0)


def move_to_day(day: date, value: datetime) -> datetime:
    """Move ``value`` onto ``day`` keeping its time of day."""
    return value.replace(year=day.year, month=day.month, day=day.day)


def normalize(
    day: date,
    start: datetime,
    end: datetime,
    anchor_to_day: bool = False,
) -> tuple[datetime, datetime]:
    """Normalize a slot's start and end.

    Args:
        day: Calendar day the slot belongs to
        start: Raw start time
        end: Raw end time
        anchor_to_day: Replace the date part of start and end with ``day``

    Returns:
        (start, end) truncated to the hour with end at least one hour
        after start. Applying it again to its own output changes nothing.
    """
    if anchor_to_day:
        start = move_to_day(day, start)
        end = move_to_day(day, end)

    start = truncate_to_hour(start)
    end = truncate_to_hour(end)

    min_end = start + MIN_SLOT_LENGTH
    if end < min_end:
        end = min_end

    return start, end


def split_hourly(
    start: datetime, end: datetime, status: SlotStatus = SlotStatus.OPEN
) -> list[tuple[datetime, datetime]]:
    """Split a block into consecutive one-hour slots.

    Open availability only comes in whole hours, so a partial trailing hour
    is dropped for ``open``; other statuses keep it, clipped to ``end``.
    """
    slots = []
    current = start
    while current < end:
        next_hour = current + timedelta(hours=1)
        if next_hour > end and status == SlotStatus.OPEN:
            break
        slots.append((current, min(next_hour, end)))
        current = next_hour
    return slots
