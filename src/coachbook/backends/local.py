"""Local backend: the ports implemented on the SQLite repositories.

Plays the part of the remote data store, the scheduling processor that
expands recurrence rules and the booking function.
"""

import logging
from datetime import date, datetime, timedelta
from pathlib import Path

from ..db.engine import get_db_path
from ..db.repositories import (
    BookingRepository,
    ClientRepository,
    LessonPackageRepository,
    ScheduleSlotRepository,
    TrainerRepository,
)
from ..errors import NotFoundError, ValidationError
from ..models.booking import BookingReceipt, BookingRequest
from ..models.packages import LessonPackage
from ..models.people import Client, Trainer
from ..models.recurrence import RecurrenceRule, sunday_weekday
from ..models.slots import ScheduleSlot, SlotStatus
from ..rules.recurrence import validate_rule
from ..rules.time_normalizer import split_hourly
from .base import ProcessResult

logger = logging.getLogger(__name__)

# How far ahead an ongoing rule is expanded
ONGOING_HORIZON_DAYS = 28


def expand_rule(
    rule: RecurrenceRule, today: date | None = None
) -> list[tuple[datetime, datetime]]:
    """List the (start, end) of every slot a rule describes.

    Ongoing rules are expanded ``ONGOING_HORIZON_DAYS`` past the later of
    the start date and today.
    """
    if rule.end_date is not None:
        last_day = rule.end_date
    else:
        horizon_from = max(rule.start_date, today or date.today())
        last_day = horizon_from + timedelta(days=ONGOING_HORIZON_DAYS)

    step = timedelta(minutes=rule.slot_duration_minutes)
    slots = []
    current_day = rule.start_date
    while current_day <= last_day:
        if sunday_weekday(current_day) in rule.weekdays:
            window_start = datetime.combine(current_day, datetime.min.time()).replace(
                hour=rule.daily_start_hour
            )
            window_end = window_start + timedelta(
                hours=rule.daily_end_hour - rule.daily_start_hour
            )
            slot_start = window_start
            while slot_start + step <= window_end:
                slots.append((slot_start, slot_start + step))
                slot_start += step
        current_day += timedelta(days=1)
    return slots


class LocalBackend:
    """ScheduleStore, SchedulingProcessor and BookingGateway on SQLite."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()
        self.trainers = TrainerRepository(self.db_path)
        self.clients = ClientRepository(self.db_path)
        self.packages = LessonPackageRepository(self.db_path)
        self.slots = ScheduleSlotRepository(self.db_path)
        self.bookings = BookingRepository(self.db_path)

    # ScheduleStore

    async def fetch_trainers(self) -> list[Trainer]:
        return await self.trainers.list_all()

    async def fetch_clients(self, trainer_id: str) -> list[Client]:
        return await self.clients.list_for_trainer(trainer_id)

    async def fetch_packages(self, client_id: str) -> list[LessonPackage]:
        return await self.packages.list_for_client(client_id)

    async def fetch_bookings(self, client_id: str) -> list[dict]:
        """A client's bookings, oldest lesson first."""
        return await self.bookings.list_for_client(client_id)

    async def fetch_slots(
        self, trainer_id: str, start: datetime, end: datetime
    ) -> list[ScheduleSlot]:
        return await self.slots.list_range(trainer_id, start, end)

    async def save_single_slot(
        self,
        trainer_id: str,
        day: date,
        start: datetime,
        end: datetime,
        status: SlotStatus,
        apply_to_all_trainers: bool = False,
    ) -> int:
        if end <= start:
            raise ValidationError("Slot end must be after its start")

        trainer_ids = await self._target_trainers(trainer_id, apply_to_all_trainers)
        pieces = split_hourly(start, end, status)
        written = 0
        for target_id in trainer_ids:
            for piece_start, piece_end in pieces:
                written += await self.slots.upsert(target_id, piece_start, piece_end, status)

        logger.info(
            "Saved %d %s slot(s) on %s for %d trainer(s)",
            written,
            status.value,
            day.isoformat(),
            len(trainer_ids),
        )
        return written

    async def delete_slot(self, trainer_id: str, start: datetime) -> None:
        deleted = await self.slots.delete_at(trainer_id, start)
        if not deleted:
            raise NotFoundError(
                f"No removable slot at {start.isoformat()}",
                details={"trainer_id": trainer_id},
            )

    # SchedulingProcessor

    async def save_recurring_rule(self, trainer_id: str, payload: dict) -> ProcessResult:
        rule = RecurrenceRule.from_payload(payload)
        result = validate_rule(rule)
        if not result:
            raise ValidationError(result.reason, details=payload)

        trainer_ids = await self._target_trainers(trainer_id, rule.apply_to_all_trainers)
        slots = expand_rule(rule)

        added = 0
        for target_id in trainer_ids:
            added += await self.slots.insert_missing(target_id, slots, rule.status)

        logger.info(
            "Trainer %s availability processed. Added %d new slots.", trainer_id, added
        )
        return ProcessResult(
            message=f"Availability processed successfully! Added {added} new slots.",
            slots_added=added,
        )

    # BookingGateway

    async def book_lesson(self, trainer_id: str, payload: dict) -> BookingReceipt:
        request = BookingRequest.from_payload(payload)
        booking_id = await self.bookings.book(trainer_id, request)
        return BookingReceipt(booking_id=booking_id, committed=True)

    async def booking_committed(self, booking_id: str) -> bool:
        return await self.bookings.get(booking_id) is not None

    async def _target_trainers(self, trainer_id: str, apply_to_all: bool) -> list[str]:
        if apply_to_all:
            trainers = await self.trainers.list_all(active_only=True)
            return [t.id for t in trainers]

        trainer = await self.trainers.get(trainer_id)
        if trainer is None:
            raise NotFoundError(f"Trainer {trainer_id} not found")
        return [trainer_id]
