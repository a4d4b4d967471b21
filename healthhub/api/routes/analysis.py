"""Rule-based analysis, analytics and emergency endpoints."""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from healthhub.api.deps import get_api, respond
from healthhub.api.schemas import (
    EmergencyAlertRequest,
    InteractionRequest,
    SymptomRequest,
    TelemedicineRequest,
)
from healthhub.services import HealthAPI

router = APIRouter(tags=["analysis"])


@router.post("/analysis/symptoms")
async def analyze_symptoms(body: SymptomRequest, api: HealthAPI = Depends(get_api)):
    return respond(api.analyze_symptoms(body.symptoms, body.limit))


@router.post("/analysis/drug-interactions")
async def check_drug_interactions(body: InteractionRequest, api: HealthAPI = Depends(get_api)):
    return respond(api.check_drug_interactions(body.medications))


@router.post("/analysis/risks")
async def predict_health_risks(profile: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    """Estimate disease risks from a patient profile."""
    return respond(api.predict_health_risks(profile))


@router.get("/patients/{patient_id}/analytics")
async def get_health_analytics(patient_id: str, timeframe: str = "month", api: HealthAPI = Depends(get_api)):
    return respond(api.get_health_analytics(patient_id, timeframe))


@router.post("/telemedicine/sessions")
async def initiate_telemedicine_session(body: TelemedicineRequest, api: HealthAPI = Depends(get_api)):
    return respond(
        api.initiate_telemedicine_session(body.patient_id, body.provider_id, body.session_type),
        created=True,
    )


@router.post("/emergency/alerts")
async def trigger_emergency_alert(body: EmergencyAlertRequest, api: HealthAPI = Depends(get_api)):
    return respond(api.trigger_emergency_alert(
        body.patient_id,
        body.type,
        severity=body.severity,
        location=body.location,
        description=body.description,
        vital_signs=body.vital_signs,
    ), created=True)
