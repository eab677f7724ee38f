"""Lesson booking routes."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator

from ...backends.local import LocalBackend
from ...models.packages import PackageType
from ...models.people import SessionContext
from ...models.slots import SingleSlotDraft
from ...services.booking_flow import BookingFlow, BookingPhase
from ..dependencies import get_backend, get_session, naive_local

router = APIRouter(prefix="/bookings", tags=["bookings"])


class BookingIn(BaseModel):
    trainer_id: str
    client_id: str
    start_time: datetime
    package_type: PackageType = PackageType.PRIVATE

    local_start = field_validator("start_time")(naive_local)


@router.post("")
async def create_booking(
    body: BookingIn,
    backend: LocalBackend = Depends(get_backend),
    session: SessionContext = Depends(get_session),
):
    """Book a one-hour lesson, consuming the best package of the given type."""
    if not session.is_admin:
        raise HTTPException(
            status_code=403, detail={"message": "Only administrators can book lessons"}
        )

    flow = BookingFlow(backend, backend, session, body.trainer_id, body.package_type)
    clients = await flow.load_clients()
    if flow.error_message:
        raise HTTPException(status_code=502, detail={"message": flow.error_message})
    if body.client_id not in {c.id for c in clients}:
        raise HTTPException(
            status_code=404,
            detail={"message": f"Client {body.client_id} is not a client of this trainer"},
        )

    await flow.select_client(body.client_id)
    if flow.error_message:
        raise HTTPException(status_code=502, detail={"message": flow.error_message})
    if flow.phase != BookingPhase.PACKAGE_SELECTED:
        raise HTTPException(
            status_code=409,
            detail={"message": f"No usable {body.package_type.display_name} package"},
        )

    draft = SingleSlotDraft.from_default(body.start_time.date(), body.start_time.hour)
    package_id = flow.package_id
    if not await flow.book(draft.start, draft.end):
        raise HTTPException(status_code=409, detail={"message": flow.error_message})

    return {
        "booking_id": flow.last_receipt.booking_id,
        "message": flow.last_receipt.message,
        "package_id": package_id,
        "start_time": draft.start.isoformat(),
        "end_time": draft.end.isoformat(),
    }
