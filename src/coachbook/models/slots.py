"""Schedule slot models."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

SLOT_DURATION_MINUTES = 60
MIN_SLOT_LENGTH = timedelta(minutes=SLOT_DURATION_MINUTES)


class SlotStatus(str, Enum):
    """Availability status of a slot."""

    OPEN = "open"
    UNAVAILABLE = "unavailable"
    BOOKED = "booked"  # Set by the store once a lesson is booked


@dataclass
class SingleSlotDraft:
    """A single slot being edited before it is saved.

    Start and end are kept on hour boundaries of ``day`` and at least
    one hour apart after every edit.
    """

    day: date
    start: datetime
    end: datetime
    status: SlotStatus = SlotStatus.OPEN

    @classmethod
    def from_default(
        cls, day: date, hour: int, status: SlotStatus = SlotStatus.OPEN
    ) -> "SingleSlotDraft":
        """Create a one-hour draft starting at ``hour`` on ``day``."""
        from ..rules.time_normalizer import normalize

        hour = max(0, min(23, hour))
        start = datetime.combine(day, datetime.min.time()).replace(hour=hour)
        start, end = normalize(day, start, start, anchor_to_day=False)
        return cls(day=day, start=start, end=end, status=status)

    def set_day(self, day: date) -> None:
        """Move the draft to another day, keeping its times of day."""
        from ..rules.time_normalizer import normalize

        self.day = day
        self.start, self.end = normalize(day, self.start, self.end, anchor_to_day=True)

    def set_start(self, start: datetime) -> None:
        """Change the start; the end is pulled forward if it gets too close."""
        from ..rules.time_normalizer import normalize

        self.start, self.end = normalize(self.day, start, self.end, anchor_to_day=True)

    def set_end(self, end: datetime) -> None:
        """Change the end; values below the minimum are clamped."""
        from ..rules.time_normalizer import normalize

        self.start, self.end = normalize(self.day, self.start, end, anchor_to_day=True)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass
class ScheduleSlot:
    """A slot as stored for a trainer."""

    trainer_id: str
    start_time: datetime
    end_time: datetime
    status: SlotStatus = SlotStatus.OPEN
    client_id: str | None = None
    client_name: str | None = None
    booked_at: datetime | None = None
    id: int | None = None

    @property
    def is_booked(self) -> bool:
        """A slot counts as booked when marked so or when a client is attached."""
        return self.status == SlotStatus.BOOKED or self.client_id is not None

    @property
    def display_title(self) -> str:
        if self.is_booked:
            return self.client_name or "Booked"
        if self.status == SlotStatus.UNAVAILABLE:
            return "Unavailable"
        return "Open"

    def to_dict(self) -> dict:
        """Convert to dictionary for API output."""
        return {
            "id": self.id,
            "trainer_id": self.trainer_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "status": self.status.value,
            "client_id": self.client_id,
            "client_name": self.client_name,
            "booked_at": self.booked_at.isoformat() if self.booked_at else None,
        }

