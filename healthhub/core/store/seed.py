"""
Demo data loaded into a fresh HealthDatabase at startup.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Dict, List

from healthhub.utils import get_logger

if TYPE_CHECKING:
    from .database import HealthDatabase

logger = get_logger(__name__)

_LUNCH = [{"start": "12:00", "end": "13:00"}]
_CLOSED = {"available": False}


def _weekdays(start: str, end: str, friday_end: str, saturday=None, breaks=None) -> Dict[str, dict]:
    day = {"available": True, "start": start, "end": end, "breaks": breaks or []}
    return {
        "monday": day,
        "tuesday": day,
        "wednesday": day,
        "thursday": day,
        "friday": {**day, "end": friday_end},
        "saturday": saturday or _CLOSED,
        "sunday": _CLOSED,
    }


def sample_providers(now: datetime) -> List[dict]:
    return [
        {
            "first_name": "Sarah",
            "last_name": "Johnson",
            "title": "MD, FACC",
            "languages": ["English", "Spanish"],
            "specialty": "Cardiology",
            "sub_specialties": ["Interventional Cardiology", "Heart Failure"],
            "license_number": "MD123456",
            "npi_number": "1234567890",
            "years_of_experience": 15,
            "education": ["Harvard Medical School", "Johns Hopkins Residency"],
            "certifications": ["Board Certified Cardiologist", "ACLS Certified"],
            "hospital_affiliations": ["Massachusetts General Hospital", "Brigham and Women's Hospital"],
            "consultation": {
                "fee": 200,
                "duration": 30,
                "types": ["video", "audio", "chat"],
                "emergency_available": True,
            },
            "ratings": {"average_rating": 4.9, "total_reviews": 156, "patient_satisfaction": 98, "response_time": 5},
            "availability": {
                "timezone": "America/New_York",
                "working_hours": _weekdays(
                    "09:00", "17:00", "15:00",
                    saturday={"available": True, "start": "10:00", "end": "14:00"},
                ),
                "next_available": now + timedelta(minutes=15),
            },
        },
        {
            "first_name": "Michael",
            "last_name": "Chen",
            "title": "MD, PhD",
            "languages": ["English", "Mandarin"],
            "specialty": "Internal Medicine",
            "sub_specialties": ["Diabetes", "Hypertension"],
            "license_number": "MD789012",
            "npi_number": "0987654321",
            "years_of_experience": 12,
            "education": ["Stanford Medical School", "UCSF Residency"],
            "certifications": ["Board Certified Internal Medicine", "Diabetes Educator"],
            "hospital_affiliations": ["Stanford Hospital", "UCSF Medical Center"],
            "consultation": {"fee": 150, "duration": 25, "types": ["video", "chat"], "emergency_available": False},
            "ratings": {"average_rating": 4.8, "total_reviews": 203, "patient_satisfaction": 96, "response_time": 8},
            "availability": {
                "timezone": "America/Los_Angeles",
                "working_hours": _weekdays("08:00", "18:00", "16:00"),
                "next_available": now + timedelta(hours=2),
            },
        },
        {
            "first_name": "Sarah",
            "last_name": "Mitchell",
            "title": "MD",
            "specialty": "Internal Medicine",
            "license_number": "MD345678",
            "npi_number": "1122334455",
            "years_of_experience": 12,
            "education": ["Harvard Medical School", "Massachusetts General Hospital Residency"],
            "certifications": ["Internal Medicine"],
            "consultation": {"fee": 120, "duration": 30, "types": ["in-person", "video"], "emergency_available": False},
            "ratings": {"average_rating": 4.7, "total_reviews": 98, "patient_satisfaction": 95, "response_time": 15},
            "availability": {
                "timezone": "America/New_York",
                "working_hours": _weekdays("08:00", "17:00", "17:00", breaks=_LUNCH),
                "next_available": now + timedelta(days=1),
            },
        },
    ]


def sample_patient() -> dict:
    return {
        "personal_info": {
            "first_name": "John",
            "last_name": "Doe",
            "date_of_birth": date(1985, 6, 15),
            "gender": "male",
            "blood_type": "O+",
            "height": 175,
            "weight": 75,
            "phone": "+1-555-0123",
            "email": "john.doe@email.com",
            "address": {
                "street": "123 Main St",
                "city": "Boston",
                "state": "MA",
                "zip_code": "02101",
                "country": "USA",
            },
            "emergency_contact": {"name": "Jane Doe", "relationship": "Spouse", "phone": "+1-555-0124"},
        },
        "medical_history": {
            "allergies": [{
                "allergen": "Penicillin",
                "type": "drug",
                "severity": "moderate",
                "reaction": "Rash and itching",
                "onset_date": date(2010, 3, 15),
            }],
            "family_history": [{"relationship": "Father", "condition": "Hypertension", "age_of_onset": 45}],
        },
    }


def seed_sample_data(db: "HealthDatabase") -> Dict[str, List[str]]:
    now = datetime.now()
    provider_ids = [db.create_provider(p).id for p in sample_providers(now)]
    patient_ids = [db.create_patient(sample_patient()).id]
    logger.info(f"Seeded {len(provider_ids)} providers and {len(patient_ids)} patient(s)")
    return {"providers": provider_ids, "patients": patient_ids}
