"""Trainer, client and availability routes."""

from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator

from ...backends.local import LocalBackend
from ...models.packages import PackageType
from ...models.people import SessionContext
from ...models.slots import SingleSlotDraft, SlotStatus
from ...rules.package_allocation import select_best_package
from ...rules.recurrence import RecurrenceRuleBuilder
from ...services.availability import ActionResult, AvailabilityService
from ..dependencies import get_backend, get_session, naive_local

router = APIRouter(tags=["schedule"])


class SingleSlotIn(BaseModel):
    day: date
    start: datetime
    end: datetime | None = None
    status: SlotStatus = SlotStatus.OPEN
    apply_to_all_trainers: bool = False

    local_times = field_validator("start", "end")(naive_local)


class RecurringIn(BaseModel):
    days_of_week: list[int] = Field(default_factory=list)
    daily_start_hour: int = 9
    daily_end_hour: int = 17
    start_date: date | None = None
    end_date: date | None = None
    ongoing: bool = False
    status: SlotStatus = SlotStatus.OPEN
    apply_to_all_trainers: bool = False


def _result_or_400(result: ActionResult) -> dict:
    if not result.ok:
        raise HTTPException(status_code=400, detail={"message": result.message})
    return {"message": result.message, "count": result.count}


@router.get("/trainers")
async def list_trainers(backend: LocalBackend = Depends(get_backend)):
    trainers = await backend.fetch_trainers()
    return [t.to_dict() for t in trainers]


@router.get("/trainers/{trainer_id}/clients")
async def list_clients(trainer_id: str, backend: LocalBackend = Depends(get_backend)):
    clients = await backend.fetch_clients(trainer_id)
    return [c.to_dict() for c in clients]


@router.get("/clients/{client_id}/packages")
async def list_packages(client_id: str, backend: LocalBackend = Depends(get_backend)):
    """A client's packages plus the package each type would consume next."""
    packages = await backend.fetch_packages(client_id)
    return {
        "packages": [p.to_dict() for p in packages],
        "next_package": {
            t.value: select_best_package(t, packages) for t in PackageType
        },
    }


@router.get("/clients/{client_id}/bookings")
async def list_bookings(client_id: str, backend: LocalBackend = Depends(get_backend)):
    return await backend.fetch_bookings(client_id)


@router.get("/trainers/{trainer_id}/slots")
async def week_slots(
    trainer_id: str,
    week_of: date | None = None,
    backend: LocalBackend = Depends(get_backend),
    session: SessionContext = Depends(get_session),
):
    service = AvailabilityService(backend, backend, session)
    slots = await service.week_slots(week_of or date.today(), trainer_id=trainer_id)
    return [s.to_dict() for s in slots]


@router.post("/trainers/{trainer_id}/slots")
async def save_slot(
    trainer_id: str,
    body: SingleSlotIn,
    backend: LocalBackend = Depends(get_backend),
    session: SessionContext = Depends(get_session),
):
    """Save a single slot; times are snapped to the hour."""
    draft = SingleSlotDraft.from_default(body.day, body.start.hour, body.status)
    if body.end is not None:
        draft.set_end(body.end)

    service = AvailabilityService(backend, backend, session)
    result = await service.save_single(
        draft, apply_to_all_trainers=body.apply_to_all_trainers, trainer_id=trainer_id
    )
    response = _result_or_400(result)
    response["start"] = draft.start.isoformat()
    response["end"] = draft.end.isoformat()
    return response


@router.post("/trainers/{trainer_id}/recurring")
async def apply_recurring(
    trainer_id: str,
    body: RecurringIn,
    backend: LocalBackend = Depends(get_backend),
    session: SessionContext = Depends(get_session),
):
    """Apply weekly recurring availability."""
    builder = RecurrenceRuleBuilder(
        anchor_day=body.start_date or date.today(), default_hour=body.daily_start_hour
    )
    try:
        builder.set_weekdays(body.days_of_week)
    except ValueError as e:
        raise HTTPException(status_code=422, detail={"message": str(e)})
    builder.set_daily_end_hour(body.daily_end_hour)
    if body.end_date:
        builder.set_end_date(body.end_date)
    builder.set_ongoing(body.ongoing)
    builder.set_status(body.status)
    builder.set_apply_to_all_trainers(body.apply_to_all_trainers)

    service = AvailabilityService(backend, backend, session)
    return _result_or_400(await service.apply_recurring(builder, trainer_id=trainer_id))
