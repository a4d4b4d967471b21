"""
Pytest Configuration and Fixtures

Shared fixtures for HealthHub store, service and API tests.
"""
import random
from datetime import date, datetime

import pytest

from healthhub.core.consultation import DoctorConsultationService
from healthhub.core.medication import MedicationTracker
from healthhub.core.store import HealthDatabase
from healthhub.services import HealthAPI


class FrozenClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> FrozenClock:
    # A Wednesday
    return FrozenClock(datetime(2024, 3, 13, 10, 0))


@pytest.fixture
def db() -> HealthDatabase:
    """Empty in-memory store."""
    return HealthDatabase()


@pytest.fixture
def seeded_db(db) -> HealthDatabase:
    db.seed_sample_data()
    return db


@pytest.fixture
def consultations(db, clock) -> DoctorConsultationService:
    return DoctorConsultationService(db, clock=clock)


@pytest.fixture
def tracker(db, clock) -> MedicationTracker:
    return MedicationTracker(db, clock=clock)


@pytest.fixture
def api(db, clock) -> HealthAPI:
    return HealthAPI(db, rng=random.Random(7), clock=clock)


@pytest.fixture
def patient_data() -> dict:
    """Minimal valid patient payload."""
    return {
        "personal_info": {
            "first_name": "Ada",
            "last_name": "Lovelace",
            "date_of_birth": date(1980, 12, 10).isoformat(),
            "gender": "female",
            "height": 165,
            "weight": 60,
        },
    }


@pytest.fixture
def provider_data() -> dict:
    """Emergency-capable cardiologist working weekdays 09:00-17:00 with a lunch break."""
    day = {"available": True, "start": "09:00", "end": "17:00", "breaks": [{"start": "12:00", "end": "13:00"}]}
    return {
        "first_name": "Grace",
        "last_name": "Hopper",
        "specialty": "Cardiology",
        "sub_specialties": ["Heart Failure"],
        "years_of_experience": 10,
        "consultation": {"fee": 100, "duration": 30, "types": ["video", "chat"], "emergency_available": True},
        "ratings": {"average_rating": 4.5, "total_reviews": 0},
        "availability": {
            "working_hours": {d: day for d in ("monday", "tuesday", "wednesday", "thursday", "friday")},
        },
    }


@pytest.fixture
def scan_data() -> dict:
    """A healthy scan: every category scores 100 except skin (85) and stress (80)."""
    return {
        "face_analysis": {
            "skin_health": 85,
            "eye_clarity": 90,
            "facial_symmetry": 95,
            "stress_indicators": 20,
        },
        "vital_signs": {
            "heart_rate": 72,
            "respiratory_rate": 16,
            "systolic": 118,
            "diastolic": 76,
            "oxygen_saturation": 99,
        },
        "body_composition": {
            "bmi": 22.5,
            "body_fat": 18,
            "muscle_mass": 40,
            "hydration_level": 60,
        },
    }
