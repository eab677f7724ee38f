"""Prepaid lesson package models."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class PackageType(str, Enum):
    """Kind of lesson a package pays for."""

    PRIVATE = "private"
    TWO_ATHLETE = "2_athlete"
    THREE_ATHLETE = "3_athlete"
    CLASS_PASS = "class_pass"

    @classmethod
    def parse(cls, value: "str | PackageType") -> "PackageType":
        """Parse a stored value, accepting the older spelled-out aliases."""
        if isinstance(value, cls):
            return value
        aliases = {
            "two_athlete": cls.TWO_ATHLETE,
            "three_athlete": cls.THREE_ATHLETE,
        }
        if value in aliases:
            return aliases[value]
        return cls(value)

    @property
    def display_name(self) -> str:
        names = {
            PackageType.PRIVATE: "Private Lesson",
            PackageType.TWO_ATHLETE: "2 Athletes",
            PackageType.THREE_ATHLETE: "3 Athletes",
            PackageType.CLASS_PASS: "Class Pass",
        }
        return names[self]


@dataclass
class LessonPackage:
    """A bundle of prepaid lessons owned by a client.

    The remaining count and expiry are derived; debiting happens in the
    store when a booking succeeds.
    """

    id: str
    package_type: PackageType
    total_lessons: int
    purchase_date: datetime
    lessons_used: int = 0
    expiration_date: datetime | None = None
    client_id: str | None = None
    transaction_id: str | None = None

    @property
    def lessons_remaining(self) -> int:
        return max(0, self.total_lessons - self.lessons_used)

    def is_expired_at(self, now: datetime) -> bool:
        """Check expiry against a given instant."""
        if self.expiration_date is None:
            return False
        return self.expiration_date < now

    @property
    def is_expired(self) -> bool:
        return self.is_expired_at(datetime.now(tz=self.purchase_date.tzinfo))

    def is_usable_at(self, now: datetime) -> bool:
        """True if the package still has lessons and has not expired."""
        return self.lessons_remaining > 0 and not self.is_expired_at(now)

    def status_text(self, now: datetime | None = None) -> str:
        """Get a human-readable status string."""
        if now is None:
            now = datetime.now(tz=self.purchase_date.tzinfo)
        if self.is_expired_at(now):
            return "Expired"
        if self.lessons_remaining == 0:
            return "Used"
        return f"{self.lessons_remaining} of {self.total_lessons} remaining"

    def to_dict(self) -> dict:
        """Convert to dictionary for storage and API output."""
        return {
            "id": self.id,
            "client_id": self.client_id,
            "package_type": self.package_type.value,
            "total_lessons": self.total_lessons,
            "lessons_used": self.lessons_used,
            "lessons_remaining": self.lessons_remaining,
            "purchase_date": self.purchase_date.isoformat(),
            "expiration_date": (
                self.expiration_date.isoformat() if self.expiration_date else None
            ),
            "is_expired": self.is_expired,
            "transaction_id": self.transaction_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LessonPackage":
        """Create from dictionary."""
        expiration_date = None
        if data.get("expiration_date"):
            expiration_date = datetime.fromisoformat(data["expiration_date"])

        return cls(
            id=data["id"],
            client_id=data.get("client_id"),
            package_type=PackageType.parse(data["package_type"]),
            total_lessons=data["total_lessons"],
            lessons_used=data.get("lessons_used", 0),
            purchase_date=datetime.fromisoformat(data["purchase_date"]),
            expiration_date=expiration_date,
            transaction_id=data.get("transaction_id"),
        )
