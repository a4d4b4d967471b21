"""
HealthHub API Facade

Every backend operation behind one class that never raises. Each call returns
an APIResponse envelope:

    success  – whether the operation completed
    data     – the result (domain model, dataclass, list or dict)
    error    – the failure message when success is False
    message  – optional human-readable confirmation
    code     – machine-readable error code (NOT_FOUND, VALIDATION_ERROR, ...)
"""
from __future__ import annotations

import random
from dataclasses import dataclass, is_dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from healthhub.core.consultation import DoctorConsultationService, DoctorFilters
from healthhub.core.domain import (
    AlertSeverity,
    EmergencyAlert,
    HealthScan,
    ScanType,
    new_id,
)
from healthhub.core.llm import HealthAssistant
from healthhub.core.medication import LOW_STOCK_THRESHOLD, MedicationTracker
from healthhub.core.scoring import HealthScanData, MedicalAIEngine, RiskProfile
from healthhub.core.scoring.engine import DEFAULT_DIAGNOSIS_LIMIT
from healthhub.core.store import HealthDatabase
from healthhub.utils import HealthHubError, NotFoundError, ValidationError, get_logger
from .analytics import calculate_health_analytics, parse_timeframe

logger = get_logger(__name__)

AI_CONFIDENCE_MIN = 85.0
AI_CONFIDENCE_MAX = 95.0

INTERNAL_ERROR = "INTERNAL_ERROR"


def to_jsonable(value: Any) -> Any:
    """Serialise domain models, result dataclasses and containers of them."""
    if hasattr(value, "to_dict") and (is_dataclass(value) or hasattr(value, "model_dump")):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    return value


@dataclass
class APIResponse:
    success: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None
    code: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None, message: Optional[str] = None) -> "APIResponse":
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str, code: str = INTERNAL_ERROR) -> "APIResponse":
        return cls(success=False, error=error, code=code)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": self.success}
        if self.data is not None:
            body["data"] = to_jsonable(self.data)
        if self.error is not None:
            body["error"] = self.error
            body["code"] = self.code
        if self.message is not None:
            body["message"] = self.message
        return body


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else err.get("msg", ""))
    return "; ".join(parts) or str(exc)


class HealthAPI:
    """
    Envelope-returning facade over the store, rules engine and services.

    Usage:
        db = HealthDatabase()
        api = HealthAPI(db)
        resp = api.create_patient({...})
        if resp.success:
            patient = resp.data
    """

    def __init__(
        self,
        db: HealthDatabase,
        engine: Optional[MedicalAIEngine] = None,
        consultations: Optional[DoctorConsultationService] = None,
        medications: Optional[MedicationTracker] = None,
        assistant: Optional[HealthAssistant] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.db = db
        self.engine = engine or MedicalAIEngine()
        self.consultations = consultations or DoctorConsultationService(db, clock=clock)
        self.medications = medications or MedicationTracker(db, clock=clock)
        self._assistant = assistant
        self._rng = rng or random.Random()
        self._now = clock

    @property
    def assistant(self) -> HealthAssistant:
        # Built lazily so that store-only callers never construct an LLM client
        if self._assistant is None:
            self._assistant = HealthAssistant()
        return self._assistant

    # ── Envelope plumbing ────────────────────────────────────────────────────

    def _call(
        self,
        operation: str,
        fn: Callable[[], Any],
        message: Optional[str] = None,
        missing: Optional[str] = None,
    ) -> APIResponse:
        """
        Run `fn` and wrap the outcome.

        When `missing` is given, a None result becomes a NOT_FOUND failure
        with that text as the error.
        """
        try:
            result = fn()
        except HealthHubError as e:
            logger.error(f"{operation} failed: [{e.code}] {e.message}")
            return APIResponse.fail(e.message, code=e.code)
        except PydanticValidationError as e:
            logger.error(f"{operation} failed validation: {e.error_count()} error(s)")
            return APIResponse.fail(_describe(e), code="VALIDATION_ERROR")
        except ValueError as e:
            logger.error(f"{operation} rejected input: {e}")
            return APIResponse.fail(str(e), code="VALIDATION_ERROR")
        except Exception as e:
            logger.exception(f"{operation} failed unexpectedly")
            return APIResponse.fail(str(e) or type(e).__name__)

        if result is None and missing is not None:
            logger.debug(f"{operation}: {missing}")
            return APIResponse.fail(missing, code="NOT_FOUND")
        return APIResponse.ok(result, message)

    async def _acall(self, operation: str, coro_fn: Callable[[], Any]) -> APIResponse:
        try:
            result = await coro_fn()
        except HealthHubError as e:
            logger.error(f"{operation} failed: [{e.code}] {e.message}")
            return APIResponse.fail(e.message, code=e.code)
        except Exception as e:
            logger.exception(f"{operation} failed unexpectedly")
            return APIResponse.fail(str(e) or type(e).__name__)
        return APIResponse.ok(result)

    def _require_patient(self, patient_id: str):
        patient = self.db.get_patient(patient_id)
        if patient is None:
            raise NotFoundError("Patient", patient_id)
        return patient

    # ── Patients ─────────────────────────────────────────────────────────────

    def create_patient(self, data: Mapping[str, Any]) -> APIResponse:
        return self._call("create_patient", lambda: self.db.create_patient(data), "Patient created successfully")

    def get_patient(self, patient_id: str) -> APIResponse:
        return self._call("get_patient", lambda: self.db.get_patient(patient_id), missing="Patient not found")

    def update_patient(self, patient_id: str, updates: Mapping[str, Any]) -> APIResponse:
        return self._call(
            "update_patient",
            lambda: self.db.update_patient(patient_id, updates),
            "Patient updated successfully",
            missing="Patient not found",
        )

    def get_all_patients(self) -> APIResponse:
        return self._call("get_all_patients", self.db.get_all_patients)

    def get_patient_record(self, patient_id: str) -> APIResponse:
        return self._call(
            "get_patient_record", lambda: self.db.get_patient_record(patient_id), missing="Patient not found"
        )

    # ── Providers ────────────────────────────────────────────────────────────

    def create_provider(self, data: Mapping[str, Any]) -> APIResponse:
        return self._call("create_provider", lambda: self.db.create_provider(data), "Provider created successfully")

    def get_provider(self, provider_id: str) -> APIResponse:
        return self._call("get_provider", lambda: self.db.get_provider(provider_id), missing="Provider not found")

    def get_all_providers(self) -> APIResponse:
        return self._call("get_all_providers", self.db.get_all_providers)

    def get_available_providers(self, specialty: Optional[str] = None) -> APIResponse:
        return self._call("get_available_providers", lambda: self.db.get_available_providers(specialty))

    # ── Appointments ─────────────────────────────────────────────────────────

    def validate_appointment(self, data: Mapping[str, Any]) -> APIResponse:
        """Required-field and provider checks run before an appointment is stored."""
        if not data.get("patient_id"):
            return APIResponse.fail("Patient ID is required", code="VALIDATION_ERROR")
        if not data.get("provider_id"):
            return APIResponse.fail("Provider ID is required", code="VALIDATION_ERROR")
        if not data.get("scheduled_date"):
            return APIResponse.fail("Scheduled date is required", code="VALIDATION_ERROR")

        provider = self.db.get_provider(data["provider_id"])
        if provider is None or not provider.is_active:
            return APIResponse.fail("Provider is not available", code="VALIDATION_ERROR")
        return APIResponse.ok()

    def create_appointment(self, data: Mapping[str, Any]) -> APIResponse:
        validation = self.validate_appointment(data)
        if not validation.success:
            logger.info(f"create_appointment rejected: {validation.error}")
            return validation
        return self._call(
            "create_appointment", lambda: self.db.create_appointment(data), "Appointment scheduled successfully"
        )

    def get_appointment(self, appointment_id: str) -> APIResponse:
        return self._call(
            "get_appointment", lambda: self.db.get_appointment(appointment_id), missing="Appointment not found"
        )

    def update_appointment_status(self, appointment_id: str, status: str) -> APIResponse:
        return self._call(
            "update_appointment_status",
            lambda: self.db.update_appointment_status(appointment_id, status),
            "Appointment status updated",
            missing="Appointment not found",
        )

    def get_patient_appointments(self, patient_id: str) -> APIResponse:
        return self._call("get_patient_appointments", lambda: self.db.get_patient_appointments(patient_id))

    def get_provider_appointments(self, provider_id: str) -> APIResponse:
        return self._call("get_provider_appointments", lambda: self.db.get_provider_appointments(provider_id))

    # ── Vital signs and labs ─────────────────────────────────────────────────

    def add_vital_signs(self, data: Mapping[str, Any]) -> APIResponse:
        def run():
            self._require_patient(data.get("patient_id", ""))
            return self.db.add_vital_signs(data)
        return self._call("add_vital_signs", run, "Vital signs recorded successfully")

    def get_patient_vital_signs(self, patient_id: str, limit: Optional[int] = None) -> APIResponse:
        return self._call("get_patient_vital_signs", lambda: self.db.get_patient_vital_signs(patient_id, limit))

    def add_lab_result(self, data: Mapping[str, Any]) -> APIResponse:
        def run():
            self._require_patient(data.get("patient_id", ""))
            return self.db.add_lab_result(data)
        return self._call("add_lab_result", run, "Lab result added successfully")

    def get_patient_lab_results(self, patient_id: str) -> APIResponse:
        return self._call("get_patient_lab_results", lambda: self.db.get_patient_lab_results(patient_id))

    def interpret_lab_result(self, test_id: str, value: float) -> APIResponse:
        return self._call("interpret_lab_result", lambda: self.engine.interpret_lab_result(test_id, value))

    # ── Health scans and analysis ────────────────────────────────────────────

    def process_health_scan(
        self,
        patient_id: str,
        scan_data: Mapping[str, Any],
        scan_type: Union[ScanType, str] = ScanType.COMPREHENSIVE,
    ) -> APIResponse:
        """Score a scan, attach a simulated AI confidence and store it."""
        def run():
            self._require_patient(patient_id)
            try:
                scan = HealthScanData.from_dict(dict(scan_data))
            except PydanticValidationError as e:
                raise ValidationError(f"Malformed scan data: {_describe(e)}", field_name="scan_data") from e

            assessment = self.engine.analyze_health_scan(scan)
            return self.db.add_health_scan(HealthScan(
                id=new_id(),
                patient_id=patient_id,
                scan_type=ScanType(scan_type),
                timestamp=self._now(),
                results=assessment,
                ai_confidence=round(self._rng.uniform(AI_CONFIDENCE_MIN, AI_CONFIDENCE_MAX), 1),
            ))
        return self._call("process_health_scan", run, "Health scan processed successfully")

    def get_patient_health_scans(self, patient_id: str) -> APIResponse:
        return self._call("get_patient_health_scans", lambda: self.db.get_patient_health_scans(patient_id))

    def analyze_symptoms(self, symptoms: List[str], limit: int = DEFAULT_DIAGNOSIS_LIMIT) -> APIResponse:
        return self._call("analyze_symptoms", lambda: self.engine.analyze_symptoms(symptoms, limit=limit))

    def check_drug_interactions(self, medications: List[str]) -> APIResponse:
        return self._call("check_drug_interactions", lambda: self.engine.check_drug_interactions(medications))

    def predict_health_risks(self, profile: Mapping[str, Any]) -> APIResponse:
        def run():
            try:
                risk_profile = RiskProfile.from_dict(dict(profile))
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid risk profile: {_describe(e)}", field_name="profile") from e
            return self.engine.predict_health_risks(risk_profile)
        return self._call("predict_health_risks", run)

    def get_health_analytics(self, patient_id: str, timeframe: str = "month") -> APIResponse:
        def run():
            self._require_patient(patient_id)
            return calculate_health_analytics(
                self.db.get_patient_vital_signs(patient_id),
                self.db.get_patient_lab_results(patient_id),
                self.db.get_patient_health_scans(patient_id),
                parse_timeframe(timeframe),
                self._now(),
            )
        return self._call("get_health_analytics", run)

    # ── Telemedicine and emergencies ─────────────────────────────────────────

    def initiate_telemedicine_session(
        self,
        patient_id: str,
        provider_id: str,
        session_type: str = "video",
    ) -> APIResponse:
        """Book an immediate consultation and start it in one step."""
        if not patient_id or not provider_id:
            return APIResponse.fail("Patient ID and Provider ID are required", code="VALIDATION_ERROR")

        def run():
            session = self.consultations.schedule_consultation({
                "patient_id": patient_id,
                "doctor_id": provider_id,
                "type": session_type,
                "scheduled_time": self._now(),
            })
            credentials = self.consultations.start_consultation(session.id)
            return {
                "consultation": self.consultations.get_consultation(session.id),
                "credentials": credentials,
            }
        return self._call("initiate_telemedicine_session", run, "Telemedicine session initiated successfully")

    def trigger_emergency_alert(
        self,
        patient_id: str,
        alert_type: str,
        severity: Union[AlertSeverity, str] = AlertSeverity.HIGH,
        location: Optional[str] = None,
        description: str = "",
        vital_signs: Optional[Dict[str, float]] = None,
    ) -> APIResponse:
        def run():
            alert = EmergencyAlert(
                id=new_id(),
                patient_id=patient_id,
                type=alert_type,
                severity=AlertSeverity(severity),
                location=location,
                description=description,
                vital_signs=vital_signs,
                timestamp=self._now(),
            )
            logger.critical(f"EMERGENCY ALERT {alert.id}: patient {patient_id}, {alert_type} ({alert.severity.value})")
            return alert
        return self._call("trigger_emergency_alert", run, "Emergency alert triggered successfully")

    # ── Doctor consultations ─────────────────────────────────────────────────

    def get_doctors(self, filters: Union[DoctorFilters, Dict[str, Any], None] = None) -> APIResponse:
        return self._call("get_doctors", lambda: self.consultations.get_all_doctors(filters))

    def get_doctor(self, doctor_id: str) -> APIResponse:
        return self._call(
            "get_doctor", lambda: self.consultations.get_doctor_by_id(doctor_id), missing="Doctor not found"
        )

    def get_doctor_availability(self, doctor_id: str, day) -> APIResponse:
        return self._call(
            "get_doctor_availability", lambda: self.consultations.get_doctor_availability(doctor_id, day)
        )

    def schedule_consultation(self, request: Mapping[str, Any]) -> APIResponse:
        return self._call(
            "schedule_consultation",
            lambda: self.consultations.schedule_consultation(request),
            "Consultation scheduled successfully",
        )

    def get_consultation(self, consultation_id: str) -> APIResponse:
        return self._call(
            "get_consultation",
            lambda: self.consultations.get_consultation(consultation_id),
            missing="Consultation not found",
        )

    def get_patient_consultations(self, patient_id: str) -> APIResponse:
        return self._call("get_patient_consultations", lambda: self.consultations.get_patient_consultations(patient_id))

    def get_doctor_consultations(self, doctor_id: str) -> APIResponse:
        return self._call("get_doctor_consultations", lambda: self.consultations.get_doctor_consultations(doctor_id))

    def start_consultation(self, consultation_id: str) -> APIResponse:
        return self._call(
            "start_consultation",
            lambda: self.consultations.start_consultation(consultation_id),
            "Consultation started",
        )

    def end_consultation(self, consultation_id: str, summary: Optional[Mapping[str, Any]] = None) -> APIResponse:
        return self._call(
            "end_consultation",
            lambda: self.consultations.end_consultation(consultation_id, dict(summary or {})),
            "Consultation completed",
        )

    def cancel_consultation(self, consultation_id: str, reason: Optional[str] = None) -> APIResponse:
        return self._call(
            "cancel_consultation",
            lambda: self.consultations.cancel_consultation(consultation_id, reason),
            "Consultation cancelled",
        )

    def add_review(self, review: Mapping[str, Any]) -> APIResponse:
        return self._call("add_review", lambda: self.consultations.add_review(review), "Review submitted")

    def get_doctor_reviews(self, doctor_id: str) -> APIResponse:
        return self._call("get_doctor_reviews", lambda: self.consultations.get_doctor_reviews(doctor_id))

    def request_emergency_consultation(
        self,
        patient_id: str,
        emergency_type: str,
        symptoms: Optional[List[str]] = None,
        vital_signs: Optional[Dict[str, Any]] = None,
        location: Optional[str] = None,
    ) -> APIResponse:
        return self._call(
            "request_emergency_consultation",
            lambda: self.consultations.request_emergency_consultation(
                patient_id, emergency_type, symptoms, vital_signs, location
            ),
            "Emergency consultation requested",
        )

    # ── Medications ──────────────────────────────────────────────────────────

    def add_medication(self, data: Mapping[str, Any]) -> APIResponse:
        def run():
            self._require_patient(data.get("patient_id", ""))
            return self.medications.add_medication(data)
        return self._call("add_medication", run, "Medication added successfully")

    def get_medication(self, medication_id: str) -> APIResponse:
        return self._call(
            "get_medication", lambda: self.medications.get_medication(medication_id), missing="Medication not found"
        )

    def list_medications(self, patient_id: str) -> APIResponse:
        return self._call("list_medications", lambda: self.medications.list_medications(patient_id))

    def mark_medication_taken(self, medication_id: str, at: Optional[str] = None) -> APIResponse:
        return self._call(
            "mark_medication_taken",
            lambda: self.medications.mark_taken(medication_id, at),
            "Medication marked as taken",
        )

    def skip_medication_dose(self, medication_id: str, at: Optional[str] = None) -> APIResponse:
        return self._call(
            "skip_medication_dose", lambda: self.medications.skip_dose(medication_id, at), "Dose marked as skipped"
        )

    def refill_medication(self, medication_id: str, pills: Optional[int] = None) -> APIResponse:
        return self._call(
            "refill_medication", lambda: self.medications.refill(medication_id, pills), "Medication refilled"
        )

    def set_medication_status(self, medication_id: str, status: str) -> APIResponse:
        return self._call(
            "set_medication_status",
            lambda: self.medications.set_status(medication_id, status),
            "Medication status updated",
        )

    def get_medication_adherence(self, medication_id: str) -> APIResponse:
        return self._call(
            "get_medication_adherence",
            lambda: {
                "medication_id": medication_id,
                "adherence_score": self.medications.adherence_score(medication_id),
            },
        )

    def get_todays_reminders(self, patient_id: str) -> APIResponse:
        return self._call("get_todays_reminders", lambda: self.medications.todays_reminders(patient_id))

    def get_low_stock_medications(self, patient_id: str, threshold: int = LOW_STOCK_THRESHOLD) -> APIResponse:
        return self._call(
            "get_low_stock_medications", lambda: self.medications.low_stock(patient_id, threshold)
        )

    # ── Generative assistant ─────────────────────────────────────────────────

    async def assistant_chat(self, message: str, context: Optional[Dict[str, Any]] = None) -> APIResponse:
        return await self._acall("assistant_chat", lambda: self.assistant.chat(message, context))

    async def assistant_analyze_health_data(self, health_data: Dict[str, Any]) -> APIResponse:
        return await self._acall(
            "assistant_analyze_health_data", lambda: self.assistant.analyze_health_data(health_data)
        )

    async def assistant_analyze_symptoms(self, symptoms: List[str]) -> APIResponse:
        return await self._acall("assistant_analyze_symptoms", lambda: self.assistant.analyze_symptoms(symptoms))

    async def assistant_health_plan(self, profile: Dict[str, Any]) -> APIResponse:
        return await self._acall("assistant_health_plan", lambda: self.assistant.generate_health_plan(profile))
