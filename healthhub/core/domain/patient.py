"""
Patient entity and its nested medical-history records.
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .base import DomainModel, new_id


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ConditionStatus(str, Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"
    CHRONIC = "chronic"
    REMISSION = "remission"


class ConditionSeverity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class AllergyType(str, Enum):
    DRUG = "drug"
    FOOD = "food"
    ENVIRONMENTAL = "environmental"
    OTHER = "other"


class AllergySeverity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    LIFE_THREATENING = "life-threatening"


class Address(DomainModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""


class EmergencyContact(DomainModel):
    name: str
    relationship: str
    phone: str


class PersonalInfo(DomainModel):
    first_name: str
    last_name: str
    date_of_birth: date
    gender: Gender
    blood_type: str = ""
    height: float = Field(..., gt=0, description="Height in cm")
    weight: float = Field(..., gt=0, description="Weight in kg")
    phone: str = ""
    email: str = ""
    address: Address = Field(default_factory=Address)
    emergency_contact: Optional[EmergencyContact] = None


class DiagnosedCondition(DomainModel):
    id: str = Field(default_factory=new_id)
    name: str
    icd10_code: str = ""
    diagnosis_date: Optional[date] = None
    status: ConditionStatus = ConditionStatus.ACTIVE
    severity: ConditionSeverity = ConditionSeverity.MILD
    notes: str = ""
    treating_physician: str = ""


class Surgery(DomainModel):
    id: str = Field(default_factory=new_id)
    procedure: str
    performed_on: date
    surgeon: str = ""
    hospital: str = ""
    complications: Optional[str] = None
    notes: str = ""


class Allergy(DomainModel):
    id: str = Field(default_factory=new_id)
    allergen: str
    type: AllergyType
    severity: AllergySeverity
    reaction: str = ""
    onset_date: Optional[date] = None


class FamilyHistoryEntry(DomainModel):
    id: str = Field(default_factory=new_id)
    relationship: str
    condition: str
    age_of_onset: Optional[int] = None
    notes: Optional[str] = None


class Immunization(DomainModel):
    id: str = Field(default_factory=new_id)
    vaccine: str
    administered_on: date
    provider: str = ""
    lot_number: Optional[str] = None
    next_due: Optional[date] = None


class MedicalHistory(DomainModel):
    conditions: List[DiagnosedCondition] = Field(default_factory=list)
    surgeries: List[Surgery] = Field(default_factory=list)
    allergies: List[Allergy] = Field(default_factory=list)
    family_history: List[FamilyHistoryEntry] = Field(default_factory=list)
    immunizations: List[Immunization] = Field(default_factory=list)


class PatientCreate(DomainModel):
    """Fields a caller supplies when registering a patient."""
    personal_info: PersonalInfo
    medical_history: MedicalHistory = Field(default_factory=MedicalHistory)
    current_medications: List[str] = Field(default_factory=list)


class Patient(PatientCreate):
    """A stored patient. Vitals, labs, scans and appointments live in the store."""
    id: str
    created_at: datetime
    updated_at: datetime

    @property
    def full_name(self) -> str:
        return f"{self.personal_info.first_name} {self.personal_info.last_name}"

    @property
    def age(self) -> int:
        born = self.personal_info.date_of_birth
        today = date.today()
        return today.year - born.year - ((today.month, today.day) < (born.month, born.day))
