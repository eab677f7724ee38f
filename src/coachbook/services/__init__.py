"""Services built on the rule engine and the backend ports."""

from .availability import ActionResult, AvailabilityService
from .booking_flow import BookingFlow, BookingPhase

__all__ = [
    "ActionResult",
    "AvailabilityService",
    "BookingFlow",
    "BookingPhase",
]
