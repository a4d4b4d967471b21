"""
In-Memory Health Database

One keyed collection per entity type. Reads of an unknown id return None;
queries are linear scans, which is fine at the tens-of-records scale this
store is meant for. A single instance is created per application and handed
to every service that needs it.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple, TypeVar, Union

from healthhub.core.domain import (
    APPOINTMENT_TRANSITIONS,
    Appointment,
    AppointmentCreate,
    AppointmentStatus,
    ConsultationSession,
    DoctorReview,
    DomainModel,
    HealthScan,
    LabResult,
    LabResultCreate,
    Medication,
    Patient,
    PatientCreate,
    Provider,
    ProviderCreate,
    VitalSignRecord,
    VitalSignsCreate,
    check_transition,
    new_id,
)
from healthhub.utils import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=DomainModel)

# Fields a patch may never overwrite
_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


def _merge(model: M, updates: Mapping[str, Any], now: datetime) -> M:
    """Shallow-merge `updates` into `model` and re-validate the result."""
    patch = {k: v for k, v in updates.items() if k not in _IMMUTABLE_FIELDS}
    merged = {**model.model_dump(), **patch, "updated_at": now}
    return type(model).model_validate(merged)


def _newest_first(items: List[M], attr: str) -> List[M]:
    return sorted(items, key=lambda item: getattr(item, attr), reverse=True)


class HealthDatabase:
    """Process-local store for every HealthHub entity."""

    def __init__(self):
        self.patients: Dict[str, Patient] = {}
        self.providers: Dict[str, Provider] = {}
        self.appointments: Dict[str, Appointment] = {}
        self.vital_signs: Dict[str, VitalSignRecord] = {}
        self.lab_results: Dict[str, LabResult] = {}
        self.health_scans: Dict[str, HealthScan] = {}
        self.consultations: Dict[str, ConsultationSession] = {}
        self.reviews: Dict[str, DoctorReview] = {}
        self.medications: Dict[str, Medication] = {}
        # (medication_id, ISO day, HH:MM) -> "taken" | "skipped"
        self.dose_log: Dict[Tuple[str, str, str], str] = {}

    # ── Patients ─────────────────────────────────────────────────────────────

    def create_patient(self, data: Union[PatientCreate, Mapping[str, Any]]) -> Patient:
        payload = PatientCreate.coerce(data)
        now = datetime.now()
        patient = Patient(**payload.model_dump(), id=new_id(), created_at=now, updated_at=now)
        self.patients[patient.id] = patient
        logger.info(f"Patient created: {patient.id}")
        return patient

    def get_patient(self, patient_id: str) -> Optional[Patient]:
        return self.patients.get(patient_id)

    def update_patient(self, patient_id: str, updates: Mapping[str, Any]) -> Optional[Patient]:
        patient = self.patients.get(patient_id)
        if patient is None:
            return None
        updated = _merge(patient, updates, datetime.now())
        self.patients[patient_id] = updated
        return updated

    def get_all_patients(self) -> List[Patient]:
        return list(self.patients.values())

    def get_patient_record(self, patient_id: str) -> Optional[Dict[str, Any]]:
        """The patient together with every per-type collection that references it."""
        patient = self.patients.get(patient_id)
        if patient is None:
            return None
        return {
            "patient": patient,
            "appointments": self.get_patient_appointments(patient_id),
            "vital_signs": self.get_patient_vital_signs(patient_id),
            "lab_results": self.get_patient_lab_results(patient_id),
            "health_scans": self.get_patient_health_scans(patient_id),
            "consultations": self.get_patient_consultations(patient_id),
            "medications": self.get_patient_medications(patient_id),
        }

    # ── Providers ────────────────────────────────────────────────────────────

    def create_provider(self, data: Union[ProviderCreate, Mapping[str, Any]]) -> Provider:
        payload = ProviderCreate.coerce(data)
        now = datetime.now()
        provider = Provider(**payload.model_dump(), id=new_id(), created_at=now, updated_at=now)
        self.providers[provider.id] = provider
        logger.info(f"Provider created: {provider.id} ({provider.specialty})")
        return provider

    def get_provider(self, provider_id: str) -> Optional[Provider]:
        return self.providers.get(provider_id)

    def update_provider(self, provider_id: str, updates: Mapping[str, Any]) -> Optional[Provider]:
        provider = self.providers.get(provider_id)
        if provider is None:
            return None
        updated = _merge(provider, updates, datetime.now())
        self.providers[provider_id] = updated
        return updated

    def get_all_providers(self) -> List[Provider]:
        return list(self.providers.values())

    def get_available_providers(self, specialty: Optional[str] = None) -> List[Provider]:
        providers = [p for p in self.providers.values() if p.is_active]
        if specialty:
            providers = [p for p in providers if p.matches_specialty(specialty)]
        return providers

    # ── Appointments ─────────────────────────────────────────────────────────

    def create_appointment(self, data: Union[AppointmentCreate, Mapping[str, Any]]) -> Appointment:
        payload = AppointmentCreate.coerce(data)
        now = datetime.now()
        appointment = Appointment(**payload.model_dump(), id=new_id(), created_at=now, updated_at=now)
        self.appointments[appointment.id] = appointment
        logger.info(f"Appointment created: {appointment.id} for patient {appointment.patient_id}")
        return appointment

    def get_appointment(self, appointment_id: str) -> Optional[Appointment]:
        return self.appointments.get(appointment_id)

    def update_appointment_status(
        self,
        appointment_id: str,
        status: Union[AppointmentStatus, str],
    ) -> Optional[Appointment]:
        """Move an appointment along its transition table; raises InvalidTransitionError."""
        appointment = self.appointments.get(appointment_id)
        if appointment is None:
            return None
        target = check_transition("appointment", appointment.status, AppointmentStatus(status), APPOINTMENT_TRANSITIONS)
        updated = appointment.model_copy(update={"status": target, "updated_at": datetime.now()})
        self.appointments[appointment_id] = updated
        logger.info(f"Appointment {appointment_id}: {appointment.status.value} -> {target.value}")
        return updated

    def get_patient_appointments(self, patient_id: str) -> List[Appointment]:
        return [a for a in self.appointments.values() if a.patient_id == patient_id]

    def get_provider_appointments(self, provider_id: str) -> List[Appointment]:
        return [a for a in self.appointments.values() if a.provider_id == provider_id]

    # ── Vital signs ──────────────────────────────────────────────────────────

    def add_vital_signs(self, data: Union[VitalSignsCreate, Mapping[str, Any]]) -> VitalSignRecord:
        payload = VitalSignsCreate.coerce(data).model_dump()
        payload["timestamp"] = payload.get("timestamp") or datetime.now()
        record = VitalSignRecord(**payload, id=new_id())
        self.vital_signs[record.id] = record
        return record

    def get_patient_vital_signs(self, patient_id: str, limit: Optional[int] = None) -> List[VitalSignRecord]:
        records = _newest_first(
            [v for v in self.vital_signs.values() if v.patient_id == patient_id], "timestamp"
        )
        if limit is None:
            return records
        if limit < 1:
            raise ValueError("limit must be at least 1")
        return records[:limit]

    # ── Lab results ──────────────────────────────────────────────────────────

    def add_lab_result(self, data: Union[LabResultCreate, Mapping[str, Any]]) -> LabResult:
        payload = LabResultCreate.coerce(data).model_dump()
        now = datetime.now()
        payload["order_date"] = payload.get("order_date") or now
        payload["result_date"] = payload.get("result_date") or now
        result = LabResult(**payload, id=new_id())
        self.lab_results[result.id] = result
        return result

    def get_patient_lab_results(self, patient_id: str) -> List[LabResult]:
        return _newest_first(
            [r for r in self.lab_results.values() if r.patient_id == patient_id], "result_date"
        )

    # ── Health scans ─────────────────────────────────────────────────────────

    def add_health_scan(self, scan: Union[HealthScan, Mapping[str, Any]]) -> HealthScan:
        """Store a scan; a mapping without an id gets a fresh one."""
        if not isinstance(scan, HealthScan):
            scan = HealthScan.model_validate({"id": new_id(), "timestamp": datetime.now(), **scan})
        self.health_scans[scan.id] = scan
        return scan

    def get_patient_health_scans(self, patient_id: str) -> List[HealthScan]:
        return _newest_first(
            [s for s in self.health_scans.values() if s.patient_id == patient_id], "timestamp"
        )

    # ── Consultations and reviews ────────────────────────────────────────────

    def save_consultation(self, session: ConsultationSession) -> ConsultationSession:
        self.consultations[session.id] = session
        return session

    def get_consultation(self, consultation_id: str) -> Optional[ConsultationSession]:
        return self.consultations.get(consultation_id)

    def get_patient_consultations(self, patient_id: str) -> List[ConsultationSession]:
        return _newest_first(
            [c for c in self.consultations.values() if c.patient_id == patient_id], "scheduled_time"
        )

    def get_doctor_consultations(self, doctor_id: str) -> List[ConsultationSession]:
        return _newest_first(
            [c for c in self.consultations.values() if c.doctor_id == doctor_id], "scheduled_time"
        )

    def add_review(self, review: DoctorReview) -> DoctorReview:
        self.reviews[review.id] = review
        return review

    def get_doctor_reviews(self, doctor_id: str) -> List[DoctorReview]:
        return [r for r in self.reviews.values() if r.doctor_id == doctor_id]

    # ── Medications ──────────────────────────────────────────────────────────

    def save_medication(self, medication: Medication) -> Medication:
        self.medications[medication.id] = medication
        return medication

    def get_medication(self, medication_id: str) -> Optional[Medication]:
        return self.medications.get(medication_id)

    def get_patient_medications(self, patient_id: str) -> List[Medication]:
        return [m for m in self.medications.values() if m.patient_id == patient_id]

    def record_dose(self, medication_id: str, day: date, at: str, outcome: str):
        self.dose_log[(medication_id, day.isoformat(), at)] = outcome

    def dose_outcome(self, medication_id: str, day: date, at: str) -> Optional[str]:
        return self.dose_log.get((medication_id, day.isoformat(), at))

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def seed_sample_data(self) -> Dict[str, List[str]]:
        """Load the demo providers and patient; returns the created ids."""
        from .seed import seed_sample_data
        return seed_sample_data(self)

    def clear(self):
        for collection in (
            self.patients, self.providers, self.appointments, self.vital_signs,
            self.lab_results, self.health_scans, self.consultations, self.reviews,
            self.medications, self.dose_log,
        ):
            collection.clear()

    def stats(self) -> Dict[str, int]:
        return {
            "patients": len(self.patients),
            "providers": len(self.providers),
            "appointments": len(self.appointments),
            "vital_signs": len(self.vital_signs),
            "lab_results": len(self.lab_results),
            "health_scans": len(self.health_scans),
            "consultations": len(self.consultations),
            "reviews": len(self.reviews),
            "medications": len(self.medications),
        }

