"""Appointment endpoints."""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from healthhub.api.deps import get_api, respond
from healthhub.api.schemas import StatusUpdate
from healthhub.services import HealthAPI

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post("/")
async def create_appointment(data: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    """Validate and book an appointment."""
    return respond(api.create_appointment(data), created=True)


@router.get("/{appointment_id}")
async def get_appointment(appointment_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_appointment(appointment_id))


@router.put("/{appointment_id}/status")
async def update_appointment_status(
    appointment_id: str,
    body: StatusUpdate,
    api: HealthAPI = Depends(get_api),
):
    return respond(api.update_appointment_status(appointment_id, body.status))
