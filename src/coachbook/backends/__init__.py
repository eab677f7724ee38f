"""Backends implementing the store, scheduling and booking ports."""

from .base import BookingGateway, ProcessResult, SchedulingProcessor, ScheduleStore
from .local import LocalBackend, expand_rule

__all__ = [
    "BookingGateway",
    "expand_rule",
    "LocalBackend",
    "ProcessResult",
    "SchedulingProcessor",
    "ScheduleStore",
]
