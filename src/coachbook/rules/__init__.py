"""Availability and booking rules."""

from .booking_validator import BookingValidator, lesson_window
from .package_allocation import (
    available_package_types,
    rank_packages,
    select_best_package,
)
from .recurrence import RecurrenceRuleBuilder, ValidationResult, add_months, validate_rule
from .time_normalizer import normalize, split_hourly, truncate_to_hour

__all__ = [
    "add_months",
    "available_package_types",
    "BookingValidator",
    "lesson_window",
    "normalize",
    "rank_packages",
    "RecurrenceRuleBuilder",
    "select_best_package",
    "split_hourly",
    "truncate_to_hour",
    "validate_rule",
    "ValidationResult",
]
