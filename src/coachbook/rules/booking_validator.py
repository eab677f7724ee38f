"""Gating of save, apply and book actions."""

from datetime import date, datetime

from ..errors import BookingError
from ..models.booking import BookingRequest
from ..models.recurrence import RecurrenceRule
from ..models.slots import SingleSlotDraft
from .recurrence import validate_rule


class BookingValidator:
    """Decides whether an action may be submitted and builds its payload.

    Owns the single-flight latch for bookings: while a booking is in
    flight ``can_book`` is false.
    """

    def __init__(self):
        self._booking_in_flight = False

    @property
    def is_booking(self) -> bool:
        return self._booking_in_flight

    def begin_booking(self) -> None:
        """Latch the single-flight guard."""
        if self._booking_in_flight:
            raise BookingError("A booking is already in progress")
        self._booking_in_flight = True

    def end_booking(self) -> None:
        self._booking_in_flight = False

    def can_submit_single(self, draft: SingleSlotDraft) -> bool:
        return draft.end > draft.start

    def can_submit_recurring(self, rule: RecurrenceRule) -> bool:
        return validate_rule(rule).valid

    def can_book(
        self,
        client_id: str | None,
        package_id: str | None,
        start: datetime,
        end: datetime,
    ) -> bool:
        if not client_id or not package_id:
            return False
        if end <= start:
            return False
        return not self._booking_in_flight

    def single_slot_payload(
        self, draft: SingleSlotDraft, apply_to_all_trainers: bool = False
    ) -> dict:
        """Arguments for ``ScheduleStore.save_single_slot``."""
        return {
            "day": draft.day,
            "start": draft.start,
            "end": draft.end,
            "status": draft.status,
            "apply_to_all_trainers": apply_to_all_trainers,
        }

    def recurring_payload(self, rule: RecurrenceRule) -> dict:
        return rule.to_payload()

    def booking_request(
        self,
        client_id: str | None,
        package_id: str | None,
        start: datetime,
        end: datetime,
    ) -> BookingRequest:
        """Assemble the outbound booking request.

        Raises:
            BookingError: If the client or package is missing or the
                times are not in order
        """
        if not client_id:
            raise BookingError("Select a client before booking")
        if not package_id:
            raise BookingError("No usable lesson package for this client")
        if end <= start:
            raise BookingError("Lesson end must be after its start")
        return BookingRequest(
            client_id=client_id,
            start_time=start,
            end_time=end,
            package_id=package_id,
        )


def lesson_window(day: date, hour: int) -> tuple[datetime, datetime]:
    """Start and end of the one-hour lesson at ``hour`` on ``day``."""
    draft = SingleSlotDraft.from_default(day, hour)
    return draft.start, draft.end
