"""Vital signs, lab results and health scan endpoints."""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from healthhub.api.deps import get_api, respond
from healthhub.api.schemas import HealthScanRequest, LabInterpretationRequest
from healthhub.services import HealthAPI

router = APIRouter(tags=["records"])


@router.post("/vital-signs")
async def add_vital_signs(data: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    return respond(api.add_vital_signs(data), created=True)


@router.get("/patients/{patient_id}/vital-signs")
async def get_patient_vital_signs(
    patient_id: str,
    limit: Optional[int] = Query(None, ge=1),
    api: HealthAPI = Depends(get_api),
):
    """Newest readings first."""
    return respond(api.get_patient_vital_signs(patient_id, limit))


@router.post("/lab-results")
async def add_lab_result(data: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    return respond(api.add_lab_result(data), created=True)


@router.get("/patients/{patient_id}/lab-results")
async def get_patient_lab_results(patient_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_patient_lab_results(patient_id))


@router.post("/lab-results/interpret")
async def interpret_lab_result(body: LabInterpretationRequest, api: HealthAPI = Depends(get_api)):
    return respond(api.interpret_lab_result(body.test_id, body.value))


@router.post("/health-scans")
async def process_health_scan(body: HealthScanRequest, api: HealthAPI = Depends(get_api)):
    """Score the scan data, then store the assessment."""
    return respond(api.process_health_scan(body.patient_id, body.scan_data, body.scan_type), created=True)


@router.get("/patients/{patient_id}/health-scans")
async def get_patient_health_scans(patient_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_patient_health_scans(patient_id))
