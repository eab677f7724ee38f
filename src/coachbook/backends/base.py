"""Ports through which the rule engine reaches the data store and backend."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol, runtime_checkable

from ..models.booking import BookingReceipt
from ..models.packages import LessonPackage
from ..models.people import Client, Trainer
from ..models.slots import ScheduleSlot, SlotStatus


@dataclass
class ProcessResult:
    """Outcome of expanding a recurrence rule into stored slots."""

    message: str
    slots_added: int = 0


@runtime_checkable
class ScheduleStore(Protocol):
    """Read and write access to trainers, clients, packages and slots."""

    async def fetch_trainers(self) -> list[Trainer]:
        ...

    async def fetch_clients(self, trainer_id: str) -> list[Client]:
        ...

    async def fetch_packages(self, client_id: str) -> list[LessonPackage]:
        ...

    async def fetch_slots(
        self, trainer_id: str, start: datetime, end: datetime
    ) -> list[ScheduleSlot]:
        ...

    async def save_single_slot(
        self,
        trainer_id: str,
        day: date,
        start: datetime,
        end: datetime,
        status: SlotStatus,
        apply_to_all_trainers: bool = False,
    ) -> int:
        """Store a slot block.

        Returns:
            Number of hourly slots written
        """
        ...

    async def delete_slot(self, trainer_id: str, start: datetime) -> None:
        ...


@runtime_checkable
class SchedulingProcessor(Protocol):
    """Expands recurrence rules into individual slots."""

    async def save_recurring_rule(self, trainer_id: str, payload: dict) -> ProcessResult:
        """Expand and store a rule.

        Args:
            trainer_id: Trainer the rule belongs to
            payload: Rule payload (see ``RecurrenceRule.to_payload``)
        """
        ...


@runtime_checkable
class BookingGateway(Protocol):
    """Books lessons and reports whether a booking has been committed."""

    async def book_lesson(self, trainer_id: str, payload: dict) -> BookingReceipt:
        """Submit a booking.

        Args:
            trainer_id: Trainer whose slot is booked
            payload: Booking payload (see ``BookingRequest.to_payload``)
        """
        ...

    async def booking_committed(self, booking_id: str) -> bool:
        ...
