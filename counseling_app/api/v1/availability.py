from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...api.deps import get_current_user, get_expected_version, get_psychologist_user
from ...services.availability_service import AvailabilityService
from ...schemas.availability import AvailabilityResponse, SetAvailabilityPayload, SlotResponse
from ...models.user import User

router = APIRouter(tags=["Availability"])


def _availability_response(psikolog_id: int, version: int, slots) -> AvailabilityResponse:
    return AvailabilityResponse(
        psikolog_id=psikolog_id,
        version=version,
        slots=[SlotResponse.model_validate(slot) for slot in slots]
    )


@router.put("/psychologist/availability", response_model=AvailabilityResponse)
def set_availability(
    payload: SetAvailabilityPayload,
    expected_version: Optional[int] = Depends(get_expected_version),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_psychologist_user)
):
    """Replace the caller's whole weekly schedule."""
    service = AvailabilityService(db)
    version = service.set_availability(current_user.id, payload.slots, expected_version)
    return _availability_response(current_user.id, version, service.get_availability(current_user.id))


@router.delete("/psychologist/availability", response_model=AvailabilityResponse)
def clear_availability(
    expected_version: Optional[int] = Depends(get_expected_version),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_psychologist_user)
):
    """Remove every slot from the caller's weekly schedule."""
    service = AvailabilityService(db)
    version = service.clear_availability(current_user.id, expected_version)
    return _availability_response(current_user.id, version, [])


@router.get("/psychologist/availability", response_model=AvailabilityResponse)
def get_own_availability(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_psychologist_user)
):
    service = AvailabilityService(db)
    slots = service.get_availability(current_user.id)
    return _availability_response(current_user.id, service.get_version(current_user.id), slots)


@router.get("/psychologists/{psikolog_id}/availability", response_model=AvailabilityResponse)
def get_availability(
    psikolog_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Weekly schedule of a psychologist, Senin first."""
    service = AvailabilityService(db)
    slots = service.get_availability(psikolog_id)
    return _availability_response(psikolog_id, service.get_version(psikolog_id), slots)


@router.get("/psychologists/{psikolog_id}/availability/{day}", response_model=AvailabilityResponse)
def get_availability_by_day(
    psikolog_id: int,
    day: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = AvailabilityService(db)
    slots = service.get_availability_by_day(psikolog_id, day)
    return _availability_response(psikolog_id, service.get_version(psikolog_id), slots)
