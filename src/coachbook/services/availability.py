"""Saving single slots and recurring availability."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..backends.base import SchedulingProcessor, ScheduleStore
from ..errors import CoachbookError, ValidationError
from ..models.people import SessionContext
from ..models.slots import ScheduleSlot, SingleSlotDraft
from ..rules.booking_validator import BookingValidator
from ..rules.recurrence import RecurrenceRuleBuilder

logger = logging.getLogger(__name__)


@dataclass
class ActionResult:
    """Outcome of a save/apply action, ready to show to the user."""

    ok: bool
    message: str
    count: int = 0


class AvailabilityService:
    """Submits availability edits for the trainer in the session context."""

    def __init__(
        self,
        store: ScheduleStore,
        processor: SchedulingProcessor,
        context: SessionContext,
        validator: BookingValidator | None = None,
    ):
        self.store = store
        self.processor = processor
        self.context = context
        self.validator = validator or BookingValidator()

    def _trainer_id(self, trainer_id: str | None) -> str:
        trainer_id = trainer_id or self.context.trainer_id
        if not trainer_id:
            raise ValidationError("No trainer selected")
        if trainer_id != self.context.trainer_id and not self.context.is_admin:
            raise ValidationError("Only administrators can edit another trainer's schedule")
        return trainer_id

    def _check_scope(self, apply_to_all_trainers: bool) -> None:
        if apply_to_all_trainers and not self.context.is_admin:
            raise ValidationError("Only administrators can apply availability to all trainers")

    async def save_single(
        self,
        draft: SingleSlotDraft,
        apply_to_all_trainers: bool = False,
        trainer_id: str | None = None,
    ) -> ActionResult:
        """Save a single slot draft."""
        if not self.validator.can_submit_single(draft):
            return ActionResult(False, "End must be after start")

        try:
            target = self._trainer_id(trainer_id)
            self._check_scope(apply_to_all_trainers)
            payload = self.validator.single_slot_payload(draft, apply_to_all_trainers)
            count = await self.store.save_single_slot(target, **payload)
        except CoachbookError as e:
            logger.warning("Saving slot failed: %s", e.message)
            return ActionResult(False, e.message)
        except Exception as e:
            logger.exception("Saving slot failed")
            return ActionResult(False, f"Failed to save slot: {e}")

        return ActionResult(True, f"Saved {count} slot(s)", count)

    async def apply_recurring(
        self, builder: RecurrenceRuleBuilder, trainer_id: str | None = None
    ) -> ActionResult:
        """Validate and submit a recurrence rule to the scheduling processor."""
        result = builder.validate()
        if not result:
            return ActionResult(False, result.reason)

        try:
            target = self._trainer_id(trainer_id)
            self._check_scope(builder.apply_to_all_trainers)
            rule = builder.build()
            if not self.validator.can_submit_recurring(rule):
                return ActionResult(False, "Recurring availability is not valid")
            processed = await self.processor.save_recurring_rule(
                target, self.validator.recurring_payload(rule)
            )
        except CoachbookError as e:
            logger.warning("Applying recurring availability failed: %s", e.message)
            return ActionResult(False, e.message)
        except Exception as e:
            logger.exception("Applying recurring availability failed")
            return ActionResult(False, f"Failed to process availability: {e}")

        return ActionResult(True, processed.message, processed.slots_added)

    async def clear_slot(
        self, day: date, hour: int, trainer_id: str | None = None
    ) -> ActionResult:
        """Remove the slot starting at ``hour`` on ``day``."""
        if not 0 <= hour <= 23:
            return ActionResult(False, "Hour must be between 0 and 23")
        start = datetime.combine(day, datetime.min.time()).replace(hour=hour)
        try:
            await self.store.delete_slot(self._trainer_id(trainer_id), start)
        except CoachbookError as e:
            return ActionResult(False, e.message)
        return ActionResult(True, "Slot removed", 1)

    async def week_slots(
        self, anchor: date, trainer_id: str | None = None
    ) -> list[ScheduleSlot]:
        """Slots of the Sunday-first week containing ``anchor``."""
        week_start = anchor - timedelta(days=(anchor.weekday() + 1) % 7)
        start = datetime.combine(week_start, datetime.min.time())
        return await self.store.fetch_slots(
            self._trainer_id(trainer_id), start, start + timedelta(days=7)
        )
