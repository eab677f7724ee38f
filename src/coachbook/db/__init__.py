"""Database layer for coachbook."""

from .engine import get_db_path, init_db
from .repositories import (
    BookingRepository,
    ClientRepository,
    LessonPackageRepository,
    ScheduleSlotRepository,
    TrainerRepository,
)

__all__ = [
    "BookingRepository",
    "ClientRepository",
    "get_db_path",
    "init_db",
    "LessonPackageRepository",
    "ScheduleSlotRepository",
    "TrainerRepository",
]
