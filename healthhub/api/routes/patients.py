"""Patient endpoints."""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from healthhub.api.deps import get_api, respond
from healthhub.services import HealthAPI

router = APIRouter(prefix="/patients", tags=["patients"])


@router.get("/")
async def list_patients(api: HealthAPI = Depends(get_api)):
    """List all patients."""
    return respond(api.get_all_patients())


@router.post("/")
async def create_patient(data: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    return respond(api.create_patient(data), created=True)


@router.get("/{patient_id}")
async def get_patient(patient_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_patient(patient_id))


@router.patch("/{patient_id}")
async def update_patient(patient_id: str, updates: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    """Shallow-merge `updates` into the stored patient."""
    return respond(api.update_patient(patient_id, updates))


@router.get("/{patient_id}/record")
async def get_patient_record(patient_id: str, api: HealthAPI = Depends(get_api)):
    """Patient plus every record stored against them."""
    return respond(api.get_patient_record(patient_id))


@router.get("/{patient_id}/appointments")
async def get_patient_appointments(patient_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_patient_appointments(patient_id))


@router.get("/{patient_id}/consultations")
async def get_patient_consultations(patient_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_patient_consultations(patient_id))


@router.get("/{patient_id}/medications")
async def list_patient_medications(patient_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.list_medications(patient_id))


@router.get("/{patient_id}/reminders")
async def get_todays_reminders(patient_id: str, api: HealthAPI = Depends(get_api)):
    """Today's doses for the patient's active medications."""
    return respond(api.get_todays_reminders(patient_id))


@router.get("/{patient_id}/medications/low-stock")
async def get_low_stock_medications(patient_id: str, threshold: int = 7, api: HealthAPI = Depends(get_api)):
    return respond(api.get_low_stock_medications(patient_id, threshold))
