"""
Consultation sessions, prescriptions, reviews and bookable time slots.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from pydantic import Field

from .base import DomainModel

# Doctor id recorded on emergency sessions that no doctor could take yet
EMERGENCY_POOL_ID = "emergency-pool"


class ConsultationKind(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    CHAT = "chat"
    EMERGENCY = "emergency"


class ConsultationStatus(str, Enum):
    SCHEDULED = "scheduled"
    WAITING = "waiting"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return not CONSULTATION_TRANSITIONS[self]


CONSULTATION_TRANSITIONS: Dict[ConsultationStatus, FrozenSet[ConsultationStatus]] = {
    ConsultationStatus.SCHEDULED: frozenset({
        ConsultationStatus.WAITING,
        ConsultationStatus.ACTIVE,
        ConsultationStatus.CANCELLED,
    }),
    ConsultationStatus.WAITING: frozenset({
        ConsultationStatus.ACTIVE,
        ConsultationStatus.CANCELLED,
    }),
    ConsultationStatus.ACTIVE: frozenset({
        ConsultationStatus.COMPLETED,
        ConsultationStatus.CANCELLED,
    }),
    ConsultationStatus.COMPLETED: frozenset(),
    ConsultationStatus.CANCELLED: frozenset(),
}


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class Intake(DomainModel):
    """What the patient reports when booking."""
    chief_complaint: str = ""
    symptoms: List[str] = Field(default_factory=list)
    current_medications: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    medical_history: List[str] = Field(default_factory=list)


class Diagnosis(DomainModel):
    primary_diagnosis: str
    secondary_diagnoses: List[str] = Field(default_factory=list)
    icd_codes: List[str] = Field(default_factory=list)
    confidence: float = Field(0.0, ge=0, le=100)


class Prescription(DomainModel):
    medication_name: str
    generic_name: str = ""
    dosage: str
    frequency: str
    duration: str = ""
    instructions: str = ""
    refills: int = Field(0, ge=0)
    side_effects: List[str] = Field(default_factory=list)


class Treatment(DomainModel):
    prescriptions: List[Prescription] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    follow_up_required: bool = False
    follow_up_date: Optional[datetime] = None
    referrals: List[str] = Field(default_factory=list)


class ConsultationNotes(DomainModel):
    doctor_notes: str = ""
    patient_notes: str = ""
    private_notes: str = ""


class SessionCredentials(DomainModel):
    """Placeholder tokens for a video-call vendor; nothing validates them."""
    session_token: str
    access_token: str
    room_id: str


class ConsultationRequest(DomainModel):
    patient_id: str
    doctor_id: str
    type: ConsultationKind = ConsultationKind.VIDEO
    scheduled_time: datetime
    intake: Intake = Field(default_factory=Intake)


class ConsultationSession(DomainModel):
    id: str
    patient_id: str
    doctor_id: str
    type: ConsultationKind
    status: ConsultationStatus = ConsultationStatus.SCHEDULED
    scheduled_time: datetime
    actual_start_time: Optional[datetime] = None
    actual_end_time: Optional[datetime] = None
    duration: int = Field(30, gt=0, description="Minutes")
    fee: float = Field(0.0, ge=0)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    intake: Intake = Field(default_factory=Intake)
    diagnosis: Optional[Diagnosis] = None
    treatment: Optional[Treatment] = None
    notes: ConsultationNotes = Field(default_factory=ConsultationNotes)
    credentials: Optional[SessionCredentials] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ConsultationSummary(DomainModel):
    """What the doctor records when ending a session."""
    diagnosis: Optional[Diagnosis] = None
    treatment: Optional[Treatment] = None
    doctor_notes: str = ""


class ReviewCategories(DomainModel):
    communication: int = Field(5, ge=1, le=5)
    expertise: int = Field(5, ge=1, le=5)
    bedside_manner: int = Field(5, ge=1, le=5)
    wait_time: int = Field(5, ge=1, le=5)
    overall_experience: int = Field(5, ge=1, le=5)


class ReviewCreate(DomainModel):
    patient_id: str
    doctor_id: str
    consultation_id: Optional[str] = None
    rating: int = Field(..., ge=1, le=5)
    review: str = ""
    categories: ReviewCategories = Field(default_factory=ReviewCategories)
    would_recommend: bool = True


class DoctorReview(ReviewCreate):
    id: str
    verified: bool = True
    created_at: datetime


class SlotType(str, Enum):
    REGULAR = "regular"
    EMERGENCY = "emergency"
    FOLLOW_UP = "follow-up"


class TimeSlot(DomainModel):
    id: str
    start_time: datetime
    end_time: datetime
    available: bool
    type: SlotType = SlotType.REGULAR
