"""Weekly recurrence rule model."""

from dataclasses import dataclass, field
from datetime import date

from .slots import SLOT_DURATION_MINUTES, SlotStatus

# Sunday-first, matching the weekday numbering of the rule (Sunday=0)
WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]


def sunday_weekday(day: date) -> int:
    """Return the weekday of ``day`` with Sunday=0 ... Saturday=6."""
    return (day.weekday() + 1) % 7


@dataclass
class RecurrenceRule:
    """A weekly availability pattern.

    Describes many hourly slots (selected weekdays, a daily hour window and
    a date range) without enumerating them. ``end_date`` of None means the
    rule is ongoing.
    """

    weekdays: frozenset[int]
    daily_start_hour: int
    daily_end_hour: int
    start_date: date
    end_date: date | None = None
    status: SlotStatus = SlotStatus.OPEN
    apply_to_all_trainers: bool = False
    slot_duration_minutes: int = field(default=SLOT_DURATION_MINUTES)

    @property
    def is_ongoing(self) -> bool:
        return self.end_date is None

    def weekday_names(self) -> list[str]:
        return [WEEKDAY_NAMES[d] for d in sorted(self.weekdays)]

    def to_payload(self) -> dict:
        """Build the payload handed to the scheduling processor."""
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "dailyStartHour": self.daily_start_hour,
            "dailyEndHour": self.daily_end_hour,
            "slotDurationMinutes": self.slot_duration_minutes,
            "daysOfWeek": sorted(self.weekdays) if self.weekdays else None,
            "status": self.status.value,
            "applyToAllTrainers": self.apply_to_all_trainers,
        }

    @classmethod
    def from_payload(cls, data: dict) -> "RecurrenceRule":
        """Create from a scheduling processor payload."""
        end_date = None
        if data.get("endDate"):
            end_date = date.fromisoformat(data["endDate"])

        return cls(
            weekdays=frozenset(data.get("daysOfWeek") or []),
            daily_start_hour=data["dailyStartHour"],
            daily_end_hour=data["dailyEndHour"],
            start_date=date.fromisoformat(data["startDate"]),
            end_date=end_date,
            status=SlotStatus(data.get("status", "open")),
            apply_to_all_trainers=data.get("applyToAllTrainers", False),
            slot_duration_minutes=data.get(
                "slotDurationMinutes", SLOT_DURATION_MINUTES
            ),
        )
