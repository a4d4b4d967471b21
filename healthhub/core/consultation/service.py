"""
Doctor Consultation Service

Doctor search, bookable slots, the consultation lifecycle, reviews and
emergency dispatch. Status changes go through CONSULTATION_TRANSITIONS, so
ending a session that is already completed raises InvalidTransitionError
instead of silently re-completing it.
"""
from __future__ import annotations

import secrets
import string
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import TypeAdapter

from healthhub.core.domain import (
    CONSULTATION_TRANSITIONS,
    EMERGENCY_POOL_ID,
    ConsultationKind,
    ConsultationRequest,
    ConsultationSession,
    ConsultationStatus,
    ConsultationSummary,
    Doctor,
    DoctorReview,
    ReviewCreate,
    SessionCredentials,
    TimeSlot,
    check_transition,
    new_id,
)
from healthhub.core.store import HealthDatabase
from healthhub.utils import NotFoundError, get_logger

logger = get_logger(__name__)

SLOT_MINUTES = 30
AVAILABLE_NOW_WINDOW = timedelta(minutes=30)
AVAILABLE_WEEK_WINDOW = timedelta(days=7)

# Minutes until a doctor joins, by reported emergency type
EMERGENCY_WAIT_MINUTES = {
    "critical": 2,
    "urgent": 10,
    "moderate": 30,
}
DEFAULT_EMERGENCY_WAIT_MINUTES = 60

EMERGENCY_CODE_PREFIX = "EMG"
EMERGENCY_CODE_LENGTH = 6
_CODE_ALPHABET = string.ascii_uppercase + string.digits


class AvailabilityWindow(str, Enum):
    NOW = "now"
    TODAY = "today"
    WEEK = "week"


@dataclass
class DoctorFilters:
    specialty: Optional[str] = None
    min_rating: Optional[float] = None
    min_experience: Optional[int] = None
    consultation_type: Optional[str] = None
    availability: Optional[AvailabilityWindow] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DoctorFilters":
        data = {k: v for k, v in (data or {}).items() if v not in (None, "")}
        return TypeAdapter(cls).validate_python(data)


@dataclass
class EmergencyDispatch:
    """Outcome of an emergency consultation request."""
    consultation: ConsultationSession
    estimated_wait_time: int
    emergency_code: str
    available_doctors: List[Doctor] = field(default_factory=list)

    @property
    def queued(self) -> bool:
        return self.consultation.doctor_id == EMERGENCY_POOL_ID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "consultation_id": self.consultation.id,
            "status": self.consultation.status.value,
            "doctor_id": self.consultation.doctor_id,
            "estimated_wait_time": self.estimated_wait_time,
            "emergency_code": self.emergency_code,
            "available_doctors": [d.to_dict() for d in self.available_doctors],
        }


def emergency_wait_time(emergency_type: str) -> int:
    return EMERGENCY_WAIT_MINUTES.get(emergency_type, DEFAULT_EMERGENCY_WAIT_MINUTES)


def generate_emergency_code() -> str:
    suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(EMERGENCY_CODE_LENGTH))
    return f"{EMERGENCY_CODE_PREFIX}{suffix}"


def _parse_hhmm(value: str) -> time:
    hour, minute = (int(part) for part in value.split(":"))
    return time(hour, minute)


class DoctorConsultationService:
    """
    Consultation browser over the providers in a HealthDatabase.

    Args:
        db: the shared store
        clock: returns "now"; injectable so availability windows can be tested
    """

    def __init__(self, db: HealthDatabase, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self._now = clock

    # ── Doctors ──────────────────────────────────────────────────────────────

    def get_all_doctors(self, filters: Union[DoctorFilters, Dict[str, Any], None] = None) -> List[Doctor]:
        if not isinstance(filters, DoctorFilters):
            filters = DoctorFilters.from_dict(filters)

        doctors = [d for d in self.db.get_all_providers() if d.is_active]
        if filters.specialty:
            doctors = [d for d in doctors if d.matches_specialty(filters.specialty, include_sub=True)]
        if filters.min_rating is not None:
            doctors = [d for d in doctors if d.ratings.average_rating >= filters.min_rating]
        if filters.min_experience is not None:
            doctors = [d for d in doctors if d.years_of_experience >= filters.min_experience]
        if filters.consultation_type:
            doctors = [d for d in doctors if filters.consultation_type in {t.value for t in d.consultation.types}]
        if filters.availability:
            doctors = [d for d in doctors if self._available_within(d, filters.availability)]

        return sorted(doctors, key=lambda d: d.ratings.average_rating, reverse=True)

    def _available_within(self, doctor: Doctor, window: AvailabilityWindow) -> bool:
        next_available = doctor.availability.next_available
        if next_available is None:
            return False
        now = self._now()
        if window == AvailabilityWindow.NOW:
            return next_available <= now + AVAILABLE_NOW_WINDOW
        if window == AvailabilityWindow.TODAY:
            return next_available.date() == now.date()
        return next_available <= now + AVAILABLE_WEEK_WINDOW

    def get_doctor_by_id(self, doctor_id: str) -> Optional[Doctor]:
        return self.db.get_provider(doctor_id)

    def _require_doctor(self, doctor_id: str) -> Doctor:
        doctor = self.db.get_provider(doctor_id)
        if doctor is None:
            raise NotFoundError("Doctor", doctor_id)
        return doctor

    def get_doctor_availability(self, doctor_id: str, day: Union[date, datetime]) -> List[TimeSlot]:
        """30-minute slots across the doctor's working hours on `day`, skipping breaks."""
        doctor = self.db.get_provider(doctor_id)
        if doctor is None:
            return []
        if isinstance(day, datetime):
            day = day.date()

        hours = doctor.availability.hours_for(datetime.combine(day, time()))
        if hours is None or not hours.available:
            return []

        start = datetime.combine(day, _parse_hhmm(hours.start))
        end = datetime.combine(day, _parse_hhmm(hours.end))
        breaks = [
            (datetime.combine(day, _parse_hhmm(b.start)), datetime.combine(day, _parse_hhmm(b.end)))
            for b in hours.breaks
        ]

        slots = []
        step = timedelta(minutes=SLOT_MINUTES)
        current = start
        while current < end:
            if not any(b_start <= current < b_end for b_start, b_end in breaks):
                slots.append(TimeSlot(
                    id=f"{doctor_id}-{int(current.timestamp())}",
                    start_time=current,
                    end_time=current + step,
                    available=not self._is_slot_booked(doctor_id, current),
                ))
            current += step
        return slots

    def _is_slot_booked(self, doctor_id: str, at: datetime) -> bool:
        return any(
            c.scheduled_time == at and c.status != ConsultationStatus.CANCELLED
            for c in self.db.get_doctor_consultations(doctor_id)
        )

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def schedule_consultation(self, request: Union[ConsultationRequest, Dict[str, Any]]) -> ConsultationSession:
        request = ConsultationRequest.coerce(request)
        doctor = self._require_doctor(request.doctor_id)

        now = self._now()
        session = ConsultationSession(
            id=new_id(),
            patient_id=request.patient_id,
            doctor_id=doctor.id,
            type=request.type,
            scheduled_time=request.scheduled_time,
            duration=doctor.consultation.duration,
            fee=doctor.consultation.fee,
            intake=request.intake,
            created_at=now,
            updated_at=now,
        )
        self.db.save_consultation(session)
        logger.info(f"Consultation scheduled: {session.id} with doctor {doctor.id}")
        return session

    def get_consultation(self, consultation_id: str) -> Optional[ConsultationSession]:
        return self.db.get_consultation(consultation_id)

    def get_patient_consultations(self, patient_id: str) -> List[ConsultationSession]:
        return self.db.get_patient_consultations(patient_id)

    def get_doctor_consultations(self, doctor_id: str) -> List[ConsultationSession]:
        return self.db.get_doctor_consultations(doctor_id)

    def _require_consultation(self, consultation_id: str) -> ConsultationSession:
        session = self.db.get_consultation(consultation_id)
        if session is None:
            raise NotFoundError("Consultation", consultation_id)
        return session

    def _transition(self, session: ConsultationSession, target: ConsultationStatus, **changes) -> ConsultationSession:
        check_transition("consultation", session.status, target, CONSULTATION_TRANSITIONS)
        updated = session.model_copy(update={**changes, "status": target, "updated_at": self._now()})
        self.db.save_consultation(updated)
        logger.info(f"Consultation {session.id}: {session.status.value} -> {target.value}")
        return updated

    def start_consultation(self, consultation_id: str) -> SessionCredentials:
        session = self._require_consultation(consultation_id)
        credentials = SessionCredentials(
            session_token=f"session_{secrets.token_urlsafe(16)}",
            access_token=f"access_{secrets.token_urlsafe(16)}",
            room_id=f"room_{consultation_id}",
        )
        self._transition(
            session,
            ConsultationStatus.ACTIVE,
            actual_start_time=self._now(),
            credentials=credentials,
        )
        return credentials

    def end_consultation(
        self,
        consultation_id: str,
        summary: Union[ConsultationSummary, Dict[str, Any], None] = None,
    ) -> ConsultationSession:
        session = self._require_consultation(consultation_id)
        summary = ConsultationSummary.coerce(summary or {})

        ended_at = self._now()
        if session.actual_start_time and ended_at < session.actual_start_time:
            ended_at = session.actual_start_time

        notes = session.notes.model_copy(update={"doctor_notes": summary.doctor_notes})
        return self._transition(
            session,
            ConsultationStatus.COMPLETED,
            actual_end_time=ended_at,
            diagnosis=summary.diagnosis,
            treatment=summary.treatment,
            notes=notes,
        )

    def cancel_consultation(self, consultation_id: str, reason: Optional[str] = None) -> ConsultationSession:
        session = self._require_consultation(consultation_id)
        return self._transition(session, ConsultationStatus.CANCELLED, cancellation_reason=reason)

    # ── Reviews ──────────────────────────────────────────────────────────────

    def add_review(self, data: Union[ReviewCreate, Dict[str, Any]]) -> DoctorReview:
        payload = ReviewCreate.coerce(data)
        doctor = self._require_doctor(payload.doctor_id)

        review = DoctorReview(**payload.model_dump(), id=new_id(), created_at=self._now())
        self.db.add_review(review)
        self._refresh_rating(doctor)
        return review

    def get_doctor_reviews(self, doctor_id: str) -> List[DoctorReview]:
        return self.db.get_doctor_reviews(doctor_id)

    def _refresh_rating(self, doctor: Doctor):
        reviews = self.db.get_doctor_reviews(doctor.id)
        if not reviews:
            return
        average = round(sum(r.rating for r in reviews) / len(reviews), 1)
        ratings = doctor.ratings.model_copy(update={"average_rating": average, "total_reviews": len(reviews)})
        self.db.update_provider(doctor.id, {"ratings": ratings})
        logger.debug(f"Doctor {doctor.id} rating -> {average} over {len(reviews)} review(s)")

    # ── Emergency ────────────────────────────────────────────────────────────

    def request_emergency_consultation(
        self,
        patient_id: str,
        emergency_type: str,
        symptoms: Optional[List[str]] = None,
        vital_signs: Optional[Dict[str, Any]] = None,
        location: Optional[str] = None,
    ) -> EmergencyDispatch:
        """
        Route an emergency to the first emergency-capable doctor available now.

        With nobody available the session is queued as WAITING against the
        emergency pool instead of failing.
        """
        doctors = [
            d for d in self.get_all_doctors(DoctorFilters(availability=AvailabilityWindow.NOW))
            if d.consultation.emergency_available
        ]
        intake = {
            "chief_complaint": f"Emergency: {emergency_type}",
            "symptoms": list(symptoms or []),
        }
        now = self._now()

        if doctors:
            session = self.schedule_consultation({
                "patient_id": patient_id,
                "doctor_id": doctors[0].id,
                "type": ConsultationKind.EMERGENCY,
                "scheduled_time": now,
                "intake": intake,
            })
        else:
            session = self.db.save_consultation(ConsultationSession(
                id=new_id(),
                patient_id=patient_id,
                doctor_id=EMERGENCY_POOL_ID,
                type=ConsultationKind.EMERGENCY,
                status=ConsultationStatus.WAITING,
                scheduled_time=now,
                intake=intake,
                created_at=now,
                updated_at=now,
            ))
            logger.warning(f"No emergency doctor available - consultation {session.id} queued")

        if location:
            notes = session.notes.model_copy(update={"patient_notes": f"Location: {location}"})
            session = self.db.save_consultation(session.model_copy(update={"notes": notes}))
        if vital_signs:
            logger.info(f"Emergency {session.id} reported vitals: {sorted(vital_signs)}")

        return EmergencyDispatch(
            consultation=session,
            estimated_wait_time=emergency_wait_time(emergency_type),
            emergency_code=generate_emergency_code(),
            available_doctors=doctors,
        )
