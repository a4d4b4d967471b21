"""
Unit Tests for the In-Memory Health Database

CRUD, patch semantics, ordering of clinical records and appointment status
transitions.
"""
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from healthhub.core.domain import AppointmentStatus, Patient
from healthhub.core.store import HealthDatabase
from healthhub.utils import InvalidTransitionError


def vitals(patient_id: str, at: datetime, heart_rate: float = 70) -> dict:
    return {
        "patient_id": patient_id,
        "timestamp": at,
        "heart_rate": heart_rate,
        "blood_pressure": {"systolic": 120, "diastolic": 80},
        "temperature": 36.8,
        "respiratory_rate": 16,
        "oxygen_saturation": 98,
    }


class TestPatients:
    """Tests for patient storage."""

    def test_round_trip(self, db, patient_data):
        created = db.create_patient(patient_data)
        fetched = db.get_patient(created.id)

        assert isinstance(fetched, Patient)
        assert fetched == created
        assert fetched.full_name == "Ada Lovelace"
        assert fetched.created_at == fetched.updated_at

    def test_ids_are_unique(self, db, patient_data):
        ids = {db.create_patient(patient_data).id for _ in range(50)}
        assert len(ids) == 50

    def test_unknown_id_returns_none(self, db):
        assert db.get_patient("missing") is None
        assert db.update_patient("missing", {"current_medications": []}) is None
        assert db.get_patient_record("missing") is None

    def test_empty_patch_only_bumps_updated_at(self, db, patient_data):
        created = db.create_patient(patient_data)
        updated = db.update_patient(created.id, {})

        assert updated.updated_at >= created.updated_at
        assert updated.model_dump(exclude={"updated_at"}) == created.model_dump(exclude={"updated_at"})

    def test_patch_cannot_change_identity(self, db, patient_data):
        created = db.create_patient(patient_data)
        updated = db.update_patient(created.id, {"id": "hijacked", "current_medications": ["Metformin"]})

        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert updated.current_medications == ["Metformin"]
        assert db.get_patient(created.id).current_medications == ["Metformin"]

    def test_unknown_field_rejected(self, db, patient_data):
        created = db.create_patient(patient_data)
        with pytest.raises(PydanticValidationError):
            db.update_patient(created.id, {"favourite_colour": "blue"})

    def test_invalid_payload_rejected(self, db, patient_data):
        patient_data["personal_info"]["height"] = -1
        with pytest.raises(PydanticValidationError):
            db.create_patient(patient_data)


class TestProviders:
    """Tests for provider storage and availability."""

    def test_available_providers_by_specialty(self, db, provider_data):
        cardiologist = db.create_provider(provider_data)
        db.create_provider({**provider_data, "specialty": "Dermatology"})
        db.create_provider({**provider_data, "is_active": False})

        available = db.get_available_providers("cardio")
        assert [p.id for p in available] == [cardiologist.id]
        assert len(db.get_available_providers()) == 2

    def test_update_provider(self, db, provider_data):
        provider = db.create_provider(provider_data)
        updated = db.update_provider(provider.id, {"years_of_experience": 11})
        assert updated.years_of_experience == 11


class TestAppointments:
    """Tests for appointment status transitions."""

    @pytest.fixture
    def appointment(self, db):
        return db.create_appointment({
            "patient_id": "p1",
            "provider_id": "d1",
            "scheduled_date": datetime(2024, 3, 14, 9, 0),
        })

    def test_defaults(self, appointment):
        assert appointment.status == AppointmentStatus.SCHEDULED
        assert appointment.duration == 30

    def test_legal_path(self, db, appointment):
        for status in ("confirmed", "in-progress", "completed"):
            appointment = db.update_appointment_status(appointment.id, status)
        assert appointment.status == AppointmentStatus.COMPLETED

    def test_terminal_status_is_final(self, db, appointment):
        db.update_appointment_status(appointment.id, "cancelled")
        with pytest.raises(InvalidTransitionError) as exc:
            db.update_appointment_status(appointment.id, "confirmed")
        assert exc.value.code == "INVALID_TRANSITION"
        assert db.get_appointment(appointment.id).status == AppointmentStatus.CANCELLED

    def test_unknown_status_rejected(self, db, appointment):
        with pytest.raises(ValueError):
            db.update_appointment_status(appointment.id, "teleported")

    def test_unknown_appointment(self, db):
        assert db.update_appointment_status("missing", "confirmed") is None

    def test_queries(self, db, appointment):
        assert db.get_patient_appointments("p1") == [appointment]
        assert db.get_provider_appointments("d1") == [appointment]
        assert db.get_patient_appointments("p2") == []


class TestClinicalRecords:
    """Tests for vitals, labs and scan ordering."""

    def test_vitals_newest_first_with_limit(self, db):
        base = datetime(2024, 3, 1, 8, 0)
        for day in range(5):
            db.add_vital_signs(vitals("p1", base + timedelta(days=day), heart_rate=60 + day))

        records = db.get_patient_vital_signs("p1")
        assert [r.heart_rate for r in records] == [64, 63, 62, 61, 60]
        assert len(db.get_patient_vital_signs("p1", limit=2)) == 2

    def test_vitals_limit_must_be_positive(self, db):
        db.add_vital_signs(vitals("p1", datetime(2024, 3, 1, 8, 0)))
        with pytest.raises(ValueError):
            db.get_patient_vital_signs("p1", limit=-1)
        with pytest.raises(ValueError):
            db.get_patient_vital_signs("p1", limit=0)

    def test_utc_timestamps_stored_as_local_time(self, db):
        record = db.add_vital_signs(vitals("p1", "2024-03-12T09:00:00Z"))
        expected = datetime(2024, 3, 12, 9, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
        assert record.timestamp.tzinfo is None
        assert record.timestamp == expected

    def test_offset_and_default_timestamps_sort_together(self, db, patient_data):
        patient = db.create_patient(patient_data)
        with_offset = db.add_vital_signs(vitals(patient.id, "2024-03-12T09:00:00+02:00"))
        data = vitals(patient.id, datetime.now())
        del data["timestamp"]
        defaulted = db.add_vital_signs(data)
        db.add_lab_result({"patient_id": patient.id, "test_name": "HbA1c", "value": 5.4,
                           "result_date": "2024-01-01T00:00:00Z"})
        db.add_lab_result({"patient_id": patient.id, "test_name": "HbA1c", "value": 5.6})

        assert db.get_patient_vital_signs(patient.id) == [defaulted, with_offset]
        record = db.get_patient_record(patient.id)
        assert len(record["lab_results"]) == 2

    def test_patched_datetimes_are_normalised(self, db, provider_data):
        provider = db.create_provider(provider_data)
        updated = db.update_provider(provider.id, {"availability": {"next_available": "2024-03-13T10:00:00Z"}})
        assert updated.availability.next_available.tzinfo is None

    def test_vitals_default_timestamp(self, db):
        data = vitals("p1", datetime.now())
        del data["timestamp"]
        assert db.add_vital_signs(data).timestamp is not None

    def test_lab_results_newest_first(self, db):
        older = db.add_lab_result({"patient_id": "p1", "test_name": "HbA1c", "value": 5.4,
                                   "result_date": datetime(2024, 1, 1)})
        newer = db.add_lab_result({"patient_id": "p1", "test_name": "HbA1c", "value": 5.9,
                                   "result_date": datetime(2024, 2, 1)})
        assert db.get_patient_lab_results("p1") == [newer, older]
        assert older.order_date is not None

    def test_patient_record_aggregates_collections(self, db, patient_data):
        patient = db.create_patient(patient_data)
        db.add_vital_signs(vitals(patient.id, datetime.now()))

        record = db.get_patient_record(patient.id)
        assert record["patient"] == patient
        assert len(record["vital_signs"]) == 1
        assert record["appointments"] == []


class TestLifecycle:
    """Tests for seeding and clearing."""

    def test_seed_sample_data(self):
        db = HealthDatabase()
        seeded = db.seed_sample_data()

        assert len(seeded["providers"]) == 3
        assert len(seeded["patients"]) == 1
        assert db.stats()["providers"] == 3

    def test_clear(self, seeded_db):
        seeded_db.clear()
        assert all(count == 0 for count in seeded_db.stats().values())
