"""
Tracked patient medications and their daily reminders.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import Field, model_validator

from .base import DomainModel


class MedicationFrequency(str, Enum):
    DAILY = "daily"
    TWICE_DAILY = "twice-daily"
    THREE_TIMES_DAILY = "three-times-daily"
    WEEKLY = "weekly"
    AS_NEEDED = "as-needed"


# Default reminder times per frequency (HH:MM)
FREQUENCY_TIMES: Dict[MedicationFrequency, Tuple[str, ...]] = {
    MedicationFrequency.DAILY:             ("08:00",),
    MedicationFrequency.TWICE_DAILY:       ("08:00", "20:00"),
    MedicationFrequency.THREE_TIMES_DAILY: ("08:00", "12:00", "20:00"),
    MedicationFrequency.WEEKLY:            ("08:00",),
    MedicationFrequency.AS_NEEDED:         (),
}


class MedicationStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"
    DISCONTINUED = "discontinued"


class MedicationCreate(DomainModel):
    patient_id: str
    name: str = Field(..., min_length=1)
    dosage: str = Field(..., min_length=1)
    frequency: MedicationFrequency = MedicationFrequency.DAILY
    times: Optional[List[str]] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    total_pills: int = Field(30, ge=0)
    instructions: str = ""
    side_effects: List[str] = Field(default_factory=list)


class Medication(MedicationCreate):
    id: str
    times: List[str]
    start_date: datetime
    remaining_pills: int = Field(..., ge=0)
    status: MedicationStatus = MedicationStatus.ACTIVE
    last_taken: Optional[datetime] = None
    missed_doses: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _pills_within_supply(self) -> "Medication":
        if self.remaining_pills > self.total_pills:
            raise ValueError("remaining_pills cannot exceed total_pills")
        return self


class Reminder(DomainModel):
    medication_id: str
    medication_name: str
    time: str
    taken: bool = False
    skipped: bool = False
