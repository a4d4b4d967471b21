"""
Unit Tests for the HealthAPI Facade

Envelope shape, error codes, appointment validation, scans, analytics and
the telemedicine/emergency helpers.
"""
from datetime import timedelta, timezone

import pytest

from healthhub.core.llm import GeminiClient, GeminiConfig, HealthAssistant
from healthhub.services import APIResponse, HealthAPI, Trend, calculate_trend


@pytest.fixture
def patient(api, patient_data):
    return api.create_patient(patient_data).data


@pytest.fixture
def provider(api, provider_data):
    return api.create_provider(provider_data).data


class TestEnvelope:
    """Tests for the success/failure envelope."""

    def test_success_envelope(self, api, patient_data):
        response = api.create_patient(patient_data)
        assert response.success
        assert response.message == "Patient created successfully"
        body = response.to_dict()
        assert body["success"] is True
        assert body["data"]["personal_info"]["first_name"] == "Ada"
        assert "error" not in body and "code" not in body

    def test_not_found(self, api):
        response = api.get_patient("missing")
        assert not response.success
        assert response.error == "Patient not found"
        assert response.code == "NOT_FOUND"

    def test_validation_error_is_captured(self, api):
        response = api.create_patient({"personal_info": {"first_name": "No"}})
        assert not response.success
        assert response.code == "VALIDATION_ERROR"
        assert "personal_info" in response.error

    def test_unexpected_error_is_captured(self, api, monkeypatch):
        def boom():
            raise RuntimeError("store offline")
        monkeypatch.setattr(api.db, "get_all_patients", boom)

        response = api.get_all_patients()
        assert response == APIResponse(success=False, error="store offline", code="INTERNAL_ERROR")

    def test_list_of_models_serialises(self, api, patient):
        body = api.get_all_patients().to_dict()
        assert [p["id"] for p in body["data"]] == [patient.id]


class TestAppointments:
    """Tests for validation and status updates through the facade."""

    @pytest.mark.parametrize("missing,message", [
        ("patient_id", "Patient ID is required"),
        ("provider_id", "Provider ID is required"),
        ("scheduled_date", "Scheduled date is required"),
    ])
    def test_required_fields(self, api, provider, missing, message):
        data = {"patient_id": "p1", "provider_id": provider.id, "scheduled_date": "2024-03-14T09:00:00"}
        del data[missing]
        response = api.create_appointment(data)
        assert response.error == message
        assert response.code == "VALIDATION_ERROR"

    def test_inactive_provider(self, api, provider_data):
        inactive = api.create_provider({**provider_data, "is_active": False}).data
        response = api.create_appointment({
            "patient_id": "p1", "provider_id": inactive.id, "scheduled_date": "2024-03-14T09:00:00",
        })
        assert response.error == "Provider is not available"

    def test_create_and_transition(self, api, patient, provider):
        created = api.create_appointment({
            "patient_id": patient.id, "provider_id": provider.id, "scheduled_date": "2024-03-14T09:00:00",
        })
        assert created.message == "Appointment scheduled successfully"

        confirmed = api.update_appointment_status(created.data.id, "confirmed")
        assert confirmed.data.status.value == "confirmed"

        api.update_appointment_status(created.data.id, "cancelled")
        illegal = api.update_appointment_status(created.data.id, "completed")
        assert not illegal.success
        assert illegal.code == "INVALID_TRANSITION"

    def test_unknown_appointment(self, api):
        assert api.update_appointment_status("missing", "confirmed").code == "NOT_FOUND"


class TestClinicalRecords:
    """Tests for vitals, labs and scans through the facade."""

    def test_vitals_require_existing_patient(self, api):
        response = api.add_vital_signs({
            "patient_id": "ghost",
            "heart_rate": 70,
            "blood_pressure": {"systolic": 120, "diastolic": 80},
            "temperature": 36.8,
            "respiratory_rate": 16,
            "oxygen_saturation": 98,
        })
        assert response.code == "NOT_FOUND"
        assert response.error == "Patient not found"

    def test_process_health_scan(self, api, patient, scan_data):
        response = api.process_health_scan(patient.id, scan_data)

        assert response.success
        assert response.message == "Health scan processed successfully"
        scan = response.data
        assert scan.results.overall_score == 93
        assert 85 <= scan.ai_confidence <= 95
        assert api.get_patient_health_scans(patient.id).data == [scan]
        assert response.to_dict()["data"]["results"]["risk_level"] == "low"

    def test_malformed_scan(self, api, patient):
        response = api.process_health_scan(patient.id, {"vital_signs": {}})
        assert response.code == "VALIDATION_ERROR"

    def test_scan_numeric_strings_coerced(self, api, patient, scan_data):
        scan_data["vital_signs"]["heart_rate"] = "72"
        response = api.process_health_scan(patient.id, scan_data)
        assert response.success
        assert response.data.results.overall_score == 93

    def test_scan_non_numeric_value(self, api, patient, scan_data):
        scan_data["vital_signs"]["heart_rate"] = "fast"
        response = api.process_health_scan(patient.id, scan_data)
        assert response.code == "VALIDATION_ERROR"
        assert "heart_rate" in response.error

    def test_vitals_limit_below_one(self, api, patient):
        assert api.get_patient_vital_signs(patient.id, limit=-1).code == "VALIDATION_ERROR"

    def test_interpret_lab_result(self, api):
        assert api.interpret_lab_result("hba1c", 7.0).data.status.value == "high"

    def test_predict_health_risks_requires_age(self, api):
        assert api.predict_health_risks({"gender": "male"}).code == "VALIDATION_ERROR"
        assert api.predict_health_risks({"age": 30}).success

    def test_predict_health_risks_parses_flags(self, api):
        assert api.predict_health_risks({"age": 30, "smoking": "false"}).data.risks == []
        smoker = api.predict_health_risks({"age": 30, "smoking": "true"}).data
        assert [r.condition for r in smoker.risks] == ["Cardiovascular Disease"]
        assert api.predict_health_risks({"age": 30, "family_history": "diabetes"}).code == "VALIDATION_ERROR"


class TestAnalytics:
    """Tests for trend and analytics calculations."""

    def test_calculate_trend(self):
        assert calculate_trend([70, 70, 80, 80]) == Trend.INCREASING
        assert calculate_trend([80, 80, 70, 70]) == Trend.DECREASING
        assert calculate_trend([70, 71, 70, 72]) == Trend.STABLE
        assert calculate_trend([70]) == Trend.STABLE

    def test_health_analytics_window_and_trend(self, api, patient, clock):
        for days_ago, heart_rate in ((40, 50), (6, 60), (4, 62), (2, 80), (1, 82)):
            api.add_vital_signs({
                "patient_id": patient.id,
                "timestamp": clock.now - timedelta(days=days_ago),
                "heart_rate": heart_rate,
                "blood_pressure": {"systolic": 120, "diastolic": 80},
                "temperature": 37.0,
                "respiratory_rate": 16,
                "oxygen_saturation": 98,
            })

        month = api.get_health_analytics(patient.id, "month").data
        assert month["summary"]["total_vital_sign_records"] == 4
        assert month["trends"]["heart_rate"] == "increasing"
        assert month["trends"]["blood_pressure"] == "stable"
        assert month["averages"]["heart_rate"] == 71.0

        year = api.get_health_analytics(patient.id, "year").data
        assert year["summary"]["total_vital_sign_records"] == 5

    def test_analytics_with_utc_and_local_timestamps(self, api, patient, clock):
        reading = {
            "patient_id": patient.id,
            "heart_rate": 70,
            "blood_pressure": {"systolic": 120, "diastolic": 80},
            "temperature": 37.0,
            "respiratory_rate": 16,
            "oxygen_saturation": 98,
        }
        utc = (clock.now - timedelta(days=1)).astimezone(timezone.utc)
        assert api.add_vital_signs({**reading, "timestamp": utc.isoformat()}).success
        assert api.add_vital_signs({**reading, "timestamp": clock.now - timedelta(days=2)}).success

        assert len(api.get_patient_vital_signs(patient.id).data) == 2
        data = api.get_health_analytics(patient.id, "week").data
        assert data["summary"]["total_vital_sign_records"] == 2

    def test_adherence_with_utc_start_date(self, api, patient):
        medication = api.add_medication({
            "patient_id": patient.id, "name": "Aspirin", "dosage": "81mg",
            "start_date": "2024-03-01T08:00:00Z",
        }).data
        response = api.get_medication_adherence(medication.id)
        assert response.success
        assert response.data["adherence_score"] == 100

    def test_unknown_timeframe_defaults_to_month(self, api, patient):
        data = api.get_health_analytics(patient.id, "decade").data
        assert data["summary"]["timeframe"] == "month"

    def test_analytics_unknown_patient(self, api):
        assert api.get_health_analytics("ghost").code == "NOT_FOUND"


class TestTelemedicineAndEmergency:
    """Tests for session initiation, alerts and emergency consultations."""

    def test_initiate_telemedicine_session(self, api, patient, provider):
        response = api.initiate_telemedicine_session(patient.id, provider.id)

        assert response.success
        consultation = response.data["consultation"]
        assert consultation.status.value == "active"
        assert response.data["credentials"].room_id == f"room_{consultation.id}"

    def test_telemedicine_requires_ids(self, api):
        response = api.initiate_telemedicine_session("", "d1")
        assert response.error == "Patient ID and Provider ID are required"

    def test_trigger_emergency_alert(self, api, patient, clock):
        response = api.trigger_emergency_alert(patient.id, "fall", severity="critical", location="Kitchen")
        alert = response.data
        assert alert.severity.value == "critical"
        assert alert.status == "active"
        assert alert.timestamp == clock.now

    def test_invalid_alert_severity(self, api):
        assert api.trigger_emergency_alert("p1", "fall", severity="apocalyptic").code == "VALIDATION_ERROR"

    def test_emergency_consultation_queues(self, api, patient):
        response = api.request_emergency_consultation(patient.id, "moderate")
        body = response.to_dict()["data"]
        assert body["status"] == "waiting"
        assert body["doctor_id"] == "emergency-pool"
        assert body["estimated_wait_time"] == 30


class TestConsultationsAndMedications:
    """Tests for consultation and medication wrappers."""

    def test_consultation_flow(self, api, provider, clock):
        scheduled = api.schedule_consultation({
            "patient_id": "p1", "doctor_id": provider.id, "scheduled_time": clock.now.isoformat(),
        })
        consultation_id = scheduled.data.id

        assert api.start_consultation(consultation_id).success
        ended = api.end_consultation(consultation_id, {"doctor_notes": "All clear"})
        assert ended.data.status.value == "completed"
        assert api.end_consultation(consultation_id).code == "INVALID_TRANSITION"

    def test_schedule_unknown_doctor(self, api, clock):
        response = api.schedule_consultation({
            "patient_id": "p1", "doctor_id": "missing", "scheduled_time": clock.now.isoformat(),
        })
        assert response.code == "NOT_FOUND"
        assert response.error == "Doctor not found"

    def test_medication_requires_patient(self, api):
        response = api.add_medication({"patient_id": "ghost", "name": "Aspirin", "dosage": "81mg"})
        assert response.code == "NOT_FOUND"

    def test_medication_flow(self, api, patient):
        medication = api.add_medication({
            "patient_id": patient.id, "name": "Aspirin", "dosage": "81mg", "total_pills": 8,
        }).data

        assert api.mark_medication_taken(medication.id, "08:00").data.remaining_pills == 7
        assert [m.id for m in api.get_low_stock_medications(patient.id).data] == [medication.id]
        assert api.get_todays_reminders(patient.id).data[0].taken
        assert api.get_medication_adherence(medication.id).data["adherence_score"] == 100
        assert api.refill_medication(medication.id, -2).code == "VALIDATION_ERROR"
        assert api.set_medication_status(medication.id, "completed").data.status.value == "completed"


class TestAssistant:
    """Tests for the async assistant wrappers (mock mode, no API key)."""

    @pytest.fixture
    def offline_api(self, db, clock) -> HealthAPI:
        assistant = HealthAssistant(GeminiClient(GeminiConfig(api_key=None)))
        return HealthAPI(db, assistant=assistant, clock=clock)

    async def test_empty_chat_message(self, offline_api):
        response = await offline_api.assistant_chat("   ")
        assert not response.success
        assert response.code == "ASSISTANT_ERROR"

    async def test_symptoms_fall_back_offline(self, offline_api):
        response = await offline_api.assistant_analyze_symptoms(["headache"])
        assert response.success
        assert response.data["recommendations"] == ["Consult healthcare provider"]
