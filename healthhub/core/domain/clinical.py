"""
Clinical records attached to a patient: appointments, vital signs, lab results
and health scans.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import Field

from healthhub.core.scoring.base import HealthAssessment
from .base import DomainModel


# ── Appointments ─────────────────────────────────────────────────────────────

class AppointmentType(str, Enum):
    CONSULTATION = "consultation"
    FOLLOW_UP = "follow-up"
    PROCEDURE = "procedure"
    EMERGENCY = "emergency"
    TELEMEDICINE = "telemedicine"


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no-show"


APPOINTMENT_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset({
        AppointmentStatus.CONFIRMED,
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.NO_SHOW,
    }),
    AppointmentStatus.CONFIRMED: frozenset({
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.NO_SHOW,
    }),
    AppointmentStatus.IN_PROGRESS: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}


class AppointmentCreate(DomainModel):
    patient_id: str
    provider_id: str
    type: AppointmentType = AppointmentType.CONSULTATION
    scheduled_date: datetime
    duration: int = Field(30, gt=0, description="Minutes")
    location: str = ""
    chief_complaint: str = ""
    notes: Optional[str] = None
    diagnosis: Optional[str] = None
    treatment: Optional[str] = None
    follow_up_required: bool = False
    follow_up_date: Optional[datetime] = None


class Appointment(AppointmentCreate):
    id: str
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    created_at: datetime
    updated_at: datetime


# ── Vital signs ──────────────────────────────────────────────────────────────

class BloodPressure(DomainModel):
    systolic: float = Field(..., gt=0)
    diastolic: float = Field(..., gt=0)


class VitalSignsCreate(DomainModel):
    patient_id: str
    timestamp: Optional[datetime] = None
    heart_rate: float = Field(..., gt=0, description="Beats per minute")
    blood_pressure: BloodPressure
    temperature: float = Field(..., description="Celsius")
    respiratory_rate: float = Field(..., gt=0, description="Breaths per minute")
    oxygen_saturation: float = Field(..., ge=0, le=100, description="Percent")
    weight: Optional[float] = None
    height: Optional[float] = None
    bmi: Optional[float] = None
    recorded_by: str = ""
    location: str = ""


class VitalSignRecord(VitalSignsCreate):
    id: str
    timestamp: datetime


# ── Lab results ──────────────────────────────────────────────────────────────

class LabStatus(str, Enum):
    NORMAL = "normal"
    ABNORMAL = "abnormal"
    CRITICAL = "critical"
    PENDING = "pending"


class LabResultCreate(DomainModel):
    patient_id: str
    test_name: str
    test_code: str = ""
    value: float
    unit: str = ""
    reference_range: str = ""
    status: LabStatus = LabStatus.PENDING
    ordered_by: str = ""
    performed_by: str = ""
    order_date: Optional[datetime] = None
    result_date: Optional[datetime] = None
    notes: Optional[str] = None


class LabResult(LabResultCreate):
    id: str
    order_date: datetime
    result_date: datetime


# ── Health scans ─────────────────────────────────────────────────────────────

class ScanType(str, Enum):
    BASIC = "basic"
    COMPREHENSIVE = "comprehensive"
    VITAL_SIGNS = "vital-signs"
    AI_ANALYSIS = "ai-analysis"


class HealthScan(DomainModel):
    id: str
    patient_id: str
    scan_type: ScanType = ScanType.COMPREHENSIVE
    timestamp: datetime
    results: HealthAssessment
    ai_confidence: float = Field(..., ge=0, le=100)
    reviewed_by: Optional[str] = None
    review_date: Optional[datetime] = None
    review_notes: Optional[str] = None


# ── Emergency alerts ─────────────────────────────────────────────────────────

class AlertSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class EmergencyAlert(DomainModel):
    """A raised alarm. Nothing is dispatched; the alert is logged and returned."""
    id: str
    patient_id: str
    type: str
    severity: AlertSeverity = AlertSeverity.HIGH
    location: Optional[str] = None
    description: str = ""
    vital_signs: Optional[Dict[str, float]] = None
    status: str = "active"
    timestamp: datetime
