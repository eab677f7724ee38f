"""Building and validating weekly recurrence rules."""

import calendar
from dataclasses import dataclass
from datetime import date

from ..errors import ValidationError
from ..models.recurrence import WEEKDAY_NAMES, RecurrenceRule
from ..models.slots import SlotStatus

NO_WEEKDAYS = "select at least one day"
END_BEFORE_START = "end must be after start"
END_DATE_BEFORE_START_DATE = "end date precedes start date"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a rule."""

    valid: bool
    reason: str | None = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def invalid(cls, reason: str) -> "ValidationResult":
        return cls(valid=False, reason=reason)

    def __bool__(self) -> bool:
        return self.valid


def validate_rule(rule: RecurrenceRule) -> ValidationResult:
    """Validate a recurrence rule.

    An open-ended rule (no end date) is valid.
    """
    if not rule.weekdays:
        return ValidationResult.invalid(NO_WEEKDAYS)
    if rule.daily_end_hour <= rule.daily_start_hour:
        return ValidationResult.invalid(END_BEFORE_START)
    if rule.end_date is not None and rule.end_date < rule.start_date:
        return ValidationResult.invalid(END_DATE_BEFORE_START_DATE)
    return ValidationResult.ok()


def add_months(day: date, months: int) -> date:
    """Add calendar months, clamping to the last day of the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _clamp_hour(hour: int) -> int:
    return max(0, min(23, hour))


class RecurrenceRuleBuilder:
    """Incrementally edited recurrence rule.

    Every mutation keeps the daily window repaired: if the end hour would
    not be after the start hour it is moved to the next hour (capped at 23).
    The end date stays unset until ``build`` unless given explicitly.
    """

    def __init__(self, anchor_day: date, default_hour: int = 9):
        self.anchor_day = anchor_day
        self.weekdays: set[int] = set()
        self.daily_start_hour = _clamp_hour(default_hour)
        self.daily_end_hour = min(self.daily_start_hour + 1, 23)
        self.start_date: date | None = None
        self.end_date: date | None = None
        self.ongoing = False
        self.status = SlotStatus.OPEN
        self.apply_to_all_trainers = False

    def toggle_weekday(self, weekday: int) -> None:
        """Select or deselect a weekday (Sunday=0 ... Saturday=6)."""
        if not 0 <= weekday <= 6:
            raise ValueError(f"Weekday must be between 0 and 6, got {weekday}")
        if weekday in self.weekdays:
            self.weekdays.remove(weekday)
        else:
            self.weekdays.add(weekday)

    def set_weekdays(self, weekdays) -> None:
        weekdays = set(weekdays)
        for weekday in weekdays:
            if not 0 <= weekday <= 6:
                raise ValueError(f"Weekday must be between 0 and 6, got {weekday}")
        self.weekdays = weekdays

    def set_daily_start_hour(self, hour: int) -> None:
        self.daily_start_hour = _clamp_hour(hour)
        self._repair_window()

    def set_daily_end_hour(self, hour: int) -> None:
        self.daily_end_hour = _clamp_hour(hour)
        self._repair_window()

    def set_start_date(self, start_date: date) -> None:
        self.start_date = start_date

    def set_end_date(self, end_date: date | None) -> None:
        self.end_date = end_date
        if end_date is not None:
            self.ongoing = False

    def set_ongoing(self, ongoing: bool) -> None:
        self.ongoing = ongoing
        if ongoing:
            self.end_date = None

    def set_status(self, status: SlotStatus) -> None:
        self.status = status

    def set_apply_to_all_trainers(self, apply_to_all: bool) -> None:
        self.apply_to_all_trainers = apply_to_all

    def _repair_window(self) -> None:
        if self.daily_end_hour <= self.daily_start_hour:
            self.daily_end_hour = min(self.daily_start_hour + 1, 23)

    @property
    def effective_start_date(self) -> date:
        return self.start_date or self.anchor_day

    def default_end_date(self) -> date:
        """One calendar month after the effective start date."""
        return add_months(self.effective_start_date, 1)

    def current_rule(self) -> RecurrenceRule:
        """Snapshot of the rule as edited, without defaults filled in."""
        return RecurrenceRule(
            weekdays=frozenset(self.weekdays),
            daily_start_hour=self.daily_start_hour,
            daily_end_hour=self.daily_end_hour,
            start_date=self.effective_start_date,
            end_date=None if self.ongoing else self.end_date,
            status=self.status,
            apply_to_all_trainers=self.apply_to_all_trainers,
        )

    def validate(self) -> ValidationResult:
        return validate_rule(self.current_rule())

    def build(self) -> RecurrenceRule:
        """Produce the rule to submit.

        A missing end date on a rule that is not ongoing defaults to one
        month after the start date, computed now rather than when the
        builder was created.

        Raises:
            ValidationError: If the rule is not valid
        """
        rule = self.current_rule()
        if not self.ongoing and rule.end_date is None:
            rule.end_date = self.default_end_date()

        result = validate_rule(rule)
        if not result:
            raise ValidationError(result.reason, details=rule.to_payload())
        return rule

    @property
    def slots_per_week(self) -> int:
        """Hourly slots the rule produces in a full week."""
        hours = max(0, self.daily_end_hour - self.daily_start_hour)
        return hours * len(self.weekdays)

    def describe(self) -> str:
        """One-line preview of what the rule will create."""
        days = ", ".join(WEEKDAY_NAMES[d][:3] for d in sorted(self.weekdays)) or "no days"
        window = f"{self.daily_start_hour:02d}:00-{self.daily_end_hour:02d}:00"
        if self.ongoing:
            until = "ongoing"
        else:
            until = f"until {(self.end_date or self.default_end_date()).isoformat()}"
        return (
            f"{self.status.value.capitalize()} {days} {window}, "
            f"from {self.effective_start_date.isoformat()} {until} "
            f"({self.slots_per_week} slots/week)"
        )
