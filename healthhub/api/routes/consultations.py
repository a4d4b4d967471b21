"""Doctor directory and consultation lifecycle endpoints."""
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from healthhub.api.deps import get_api, respond
from healthhub.api.schemas import CancelRequest, EmergencyConsultationRequest
from healthhub.services import HealthAPI

router = APIRouter(tags=["consultations"])


@router.get("/doctors")
async def list_doctors(
    specialty: Optional[str] = None,
    min_rating: Optional[float] = None,
    min_experience: Optional[int] = None,
    consultation_type: Optional[str] = None,
    availability: Optional[str] = None,
    api: HealthAPI = Depends(get_api),
):
    """Doctors matching every given filter, best rated first."""
    return respond(api.get_doctors({
        "specialty": specialty,
        "min_rating": min_rating,
        "min_experience": min_experience,
        "consultation_type": consultation_type,
        "availability": availability,
    }))


@router.get("/doctors/{doctor_id}")
async def get_doctor(doctor_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_doctor(doctor_id))


@router.get("/doctors/{doctor_id}/availability")
async def get_doctor_availability(doctor_id: str, day: date, api: HealthAPI = Depends(get_api)):
    return respond(api.get_doctor_availability(doctor_id, day))


@router.get("/doctors/{doctor_id}/consultations")
async def get_doctor_consultations(doctor_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_doctor_consultations(doctor_id))


@router.get("/doctors/{doctor_id}/reviews")
async def get_doctor_reviews(doctor_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_doctor_reviews(doctor_id))


@router.post("/reviews")
async def add_review(review: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    return respond(api.add_review(review), created=True)


@router.post("/consultations")
async def schedule_consultation(request: Dict[str, Any] = Body(...), api: HealthAPI = Depends(get_api)):
    return respond(api.schedule_consultation(request), created=True)


@router.post("/consultations/emergency")
async def request_emergency_consultation(body: EmergencyConsultationRequest, api: HealthAPI = Depends(get_api)):
    """Connect to the first available emergency doctor, or queue."""
    return respond(api.request_emergency_consultation(
        body.patient_id,
        body.emergency_type,
        body.symptoms,
        body.vital_signs,
        body.location,
    ), created=True)


@router.get("/consultations/{consultation_id}")
async def get_consultation(consultation_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.get_consultation(consultation_id))


@router.post("/consultations/{consultation_id}/start")
async def start_consultation(consultation_id: str, api: HealthAPI = Depends(get_api)):
    return respond(api.start_consultation(consultation_id))


@router.post("/consultations/{consultation_id}/end")
async def end_consultation(
    consultation_id: str,
    summary: Optional[Dict[str, Any]] = Body(None),
    api: HealthAPI = Depends(get_api),
):
    return respond(api.end_consultation(consultation_id, summary))


@router.post("/consultations/{consultation_id}/cancel")
async def cancel_consultation(
    consultation_id: str,
    body: Optional[CancelRequest] = None,
    api: HealthAPI = Depends(get_api),
):
    return respond(api.cancel_consultation(consultation_id, body.reason if body else None))
