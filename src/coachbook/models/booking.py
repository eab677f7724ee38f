"""Booking request and acknowledgment models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class BookingRequest:
    """A lesson booking handed to the booking gateway."""

    client_id: str
    start_time: datetime
    end_time: datetime
    package_id: str

    def to_payload(self) -> dict:
        """Wire payload with times as epoch seconds."""
        return {
            "clientId": self.client_id,
            "startTime": int(self.start_time.timestamp()),
            "endTime": int(self.end_time.timestamp()),
            "packageId": self.package_id,
        }

    @classmethod
    def from_payload(cls, data: dict) -> "BookingRequest":
        return cls(
            client_id=data["clientId"],
            start_time=datetime.fromtimestamp(data["startTime"]),
            end_time=datetime.fromtimestamp(data["endTime"]),
            package_id=data["packageId"],
        )


@dataclass
class BookingReceipt:
    """What the gateway reports back after a booking write."""

    booking_id: str
    committed: bool = True
    message: str = "Lesson booked successfully!"
