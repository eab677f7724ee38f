"""Data models for coachbook."""

from .booking import BookingReceipt, BookingRequest
from .packages import LessonPackage, PackageType
from .people import Client, SessionContext, Trainer
from .recurrence import RecurrenceRule
from .slots import ScheduleSlot, SingleSlotDraft, SlotStatus

__all__ = [
    "BookingReceipt",
    "BookingRequest",
    "Client",
    "LessonPackage",
    "PackageType",
    "RecurrenceRule",
    "ScheduleSlot",
    "SessionContext",
    "SingleSlotDraft",
    "SlotStatus",
    "Trainer",
]
