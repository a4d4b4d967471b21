"""Medication tracking endpoints."""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from healthhub.api.deps import get_api, respond
from healthhub.api.schemas import DoseRequest, RefillRequest, StatusUpdate
from healthhub.services import HealthAPI

router = APIRouter(prefix="/medications", tags=["medications"])


@router.post("/")
async def add_medication(data: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    return respond(api.add_medication(data), created=True)


@router.get("/{medication_id}")
async def get_medication(medication_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_medication(medication_id))


@router.post("/{medication_id}/taken")
async def mark_medication_taken(
    medication_id: str,
    body: Optional[DoseRequest] = None,
    api: HealthAPI = Depends(get_api),
):
    return respond(api.mark_medication_taken(medication_id, body.at if body else None))


@router.post("/{medication_id}/skipped")
async def skip_medication_dose(
    medication_id: str,
    body: Optional[DoseRequest] = None,
    api: HealthAPI = Depends(get_api),
):
    return respond(api.skip_medication_dose(medication_id, body.at if body else None))


@router.post("/{medication_id}/refill")
async def refill_medication(
    medication_id: str,
    body: Optional[RefillRequest] = None,
    api: HealthAPI = Depends(get_api),
):
    """Top up the pill count, to the full pack when no amount is given."""
    return respond(api.refill_medication(medication_id, body.pills if body else None))


@router.put("/{medication_id}/status")
async def set_medication_status(medication_id: str, body: StatusUpdate, api: HealthAPI = Depends(get_api)):
    return respond(api.set_medication_status(medication_id, body.status))


@router.get("/{medication_id}/adherence")
async def get_medication_adherence(medication_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_medication_adherence(medication_id))
