"""
Provider entity.

One canonical record serves both the appointment side ("provider") and the
consultation browser ("doctor"); `Doctor` is an alias of `Provider`.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import Field

from .base import DomainModel

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class ConsultationType(str, Enum):
    VIDEO = "video"
    AUDIO = "audio"
    CHAT = "chat"
    IN_PERSON = "in-person"


class TimeRange(DomainModel):
    start: str
    end: str


class WorkingHours(DomainModel):
    """Working window for one weekday, as HH:MM strings."""
    available: bool = False
    start: str = "00:00"
    end: str = "00:00"
    breaks: List[TimeRange] = Field(default_factory=list)


class ConsultationOptions(DomainModel):
    fee: float = Field(0.0, ge=0)
    duration: int = Field(30, gt=0, description="Minutes")
    types: List[ConsultationType] = Field(default_factory=lambda: [ConsultationType.VIDEO])
    emergency_available: bool = False


class Ratings(DomainModel):
    average_rating: float = Field(0.0, ge=0, le=5)
    total_reviews: int = Field(0, ge=0)
    patient_satisfaction: float = Field(0.0, ge=0, le=100)
    response_time: int = Field(0, ge=0, description="Minutes")


class Availability(DomainModel):
    timezone: str = "UTC"
    working_hours: Dict[str, WorkingHours] = Field(default_factory=dict)
    next_available: Optional[datetime] = None

    def hours_for(self, day: datetime) -> Optional[WorkingHours]:
        return self.working_hours.get(WEEKDAYS[day.weekday()])


class ProviderCreate(DomainModel):
    first_name: str
    last_name: str
    title: str = "MD"
    languages: List[str] = Field(default_factory=lambda: ["English"])

    specialty: str
    sub_specialties: List[str] = Field(default_factory=list)
    license_number: str = ""
    npi_number: str = ""
    years_of_experience: int = Field(0, ge=0)
    education: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    hospital_affiliations: List[str] = Field(default_factory=list)

    consultation: ConsultationOptions = Field(default_factory=ConsultationOptions)
    ratings: Ratings = Field(default_factory=Ratings)
    availability: Availability = Field(default_factory=Availability)

    is_verified: bool = True
    is_active: bool = True


class Provider(ProviderCreate):
    id: str
    created_at: datetime
    updated_at: datetime

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def matches_specialty(self, specialty: str, include_sub: bool = False) -> bool:
        needle = specialty.lower()
        if needle in self.specialty.lower():
            return True
        return include_sub and any(needle in s.lower() for s in self.sub_specialties)


Doctor = Provider
