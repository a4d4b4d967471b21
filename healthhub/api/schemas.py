"""
Request bodies for action endpoints.

Entity payloads (patients, providers, appointments, ...) are passed through
as plain JSON objects so the facade reports their validation failures in
its own envelope.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class StatusUpdate(BaseModel):
    status: str


class HealthScanRequest(BaseModel):
    patient_id: str
    scan_data: Dict[str, Any]
    scan_type: str = "comprehensive"


class SymptomRequest(BaseModel):
    symptoms: List[str] = Field(default_factory=list)
    limit: int = Field(5, ge=1)


class InteractionRequest(BaseModel):
    medications: List[str] = Field(default_factory=list)


class LabInterpretationRequest(BaseModel):
    test_id: str
    value: float


class TelemedicineRequest(BaseModel):
    patient_id: str = ""
    provider_id: str = ""
    session_type: str = "video"


class EmergencyAlertRequest(BaseModel):
    patient_id: str
    type: str
    severity: str = "high"
    location: Optional[str] = None
    description: str = ""
    vital_signs: Optional[Dict[str, float]] = None


class EmergencyConsultationRequest(BaseModel):
    patient_id: str
    emergency_type: str
    symptoms: Optional[List[str]] = None
    vital_signs: Optional[Dict[str, Any]] = None
    location: Optional[str] = None


class CancelRequest(BaseModel):
    reason: Optional[str] = None


class DoseRequest(BaseModel):
    at: Optional[str] = Field(None, description="Scheduled time as HH:MM")


class RefillRequest(BaseModel):
    pills: Optional[int] = None


class ChatRequest(BaseModel):
    message: str
    context: Optional[Dict[str, Any]] = None
