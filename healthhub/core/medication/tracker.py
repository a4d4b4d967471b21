"""
Medication Tracker

Pill counts, dose logging and adherence for medications a patient takes.
`remaining_pills` always stays within 0..total_pills: taking a dose stops at
zero and a refill stops at the prescribed supply.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from healthhub.core.domain import (
    FREQUENCY_TIMES,
    Medication,
    MedicationCreate,
    MedicationStatus,
    Reminder,
    new_id,
)
from healthhub.core.store import HealthDatabase
from healthhub.utils import NotFoundError, ValidationError, get_logger

logger = get_logger(__name__)

LOW_STOCK_THRESHOLD = 7

DOSE_TAKEN = "taken"
DOSE_SKIPPED = "skipped"


class MedicationTracker:
    def __init__(self, db: HealthDatabase, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self._now = clock

    def add_medication(self, data: Union[MedicationCreate, Dict[str, Any]]) -> Medication:
        payload = MedicationCreate.coerce(data)
        fields = payload.model_dump()
        fields["times"] = payload.times if payload.times is not None else list(FREQUENCY_TIMES[payload.frequency])
        fields["start_date"] = payload.start_date or self._now()

        medication = Medication(**fields, id=new_id(), remaining_pills=payload.total_pills)
        self.db.save_medication(medication)
        logger.info(f"Medication added: {medication.name} for patient {medication.patient_id}")
        return medication

    def get_medication(self, medication_id: str) -> Optional[Medication]:
        return self.db.get_medication(medication_id)

    def list_medications(self, patient_id: str) -> List[Medication]:
        return self.db.get_patient_medications(patient_id)

    def _require(self, medication_id: str) -> Medication:
        medication = self.db.get_medication(medication_id)
        if medication is None:
            raise NotFoundError("Medication", medication_id)
        return medication

    def _save(self, medication: Medication, **changes) -> Medication:
        return self.db.save_medication(medication.model_copy(update=changes))

    def mark_taken(self, medication_id: str, at: Optional[str] = None) -> Medication:
        """Record a dose; `at` is the HH:MM reminder it answers, if any."""
        medication = self._require(medication_id)
        now = self._now()
        if at:
            self.db.record_dose(medication_id, now.date(), at, DOSE_TAKEN)
        return self._save(
            medication,
            remaining_pills=max(0, medication.remaining_pills - 1),
            last_taken=now,
        )

    def skip_dose(self, medication_id: str, at: Optional[str] = None) -> Medication:
        medication = self._require(medication_id)
        if at:
            self.db.record_dose(medication_id, self._now().date(), at, DOSE_SKIPPED)
        return self._save(medication, missed_doses=medication.missed_doses + 1)

    def refill(self, medication_id: str, pills: Optional[int] = None) -> Medication:
        """Add `pills` (default: a full supply), never exceeding total_pills."""
        medication = self._require(medication_id)
        if pills is not None and pills < 0:
            raise ValidationError("Refill amount must not be negative", field_name="pills")
        added = medication.total_pills if pills is None else pills
        return self._save(
            medication,
            remaining_pills=min(medication.total_pills, medication.remaining_pills + added),
        )

    def set_status(self, medication_id: str, status: Union[MedicationStatus, str]) -> Medication:
        medication = self._require(medication_id)
        return self._save(medication, status=MedicationStatus(status))

    def adherence_score(self, medication_id: str) -> int:
        """
        Percentage of expected doses not reported missed.

        Expected doses = whole days since start x doses per day; a medication
        with no expected doses yet scores 100.
        """
        medication = self._require(medication_id)
        days = (self._now() - medication.start_date).days
        expected = max(0, days) * len(medication.times)
        if expected <= 0:
            return 100
        taken = expected - medication.missed_doses
        return max(0, min(100, round(taken / expected * 100)))

    def todays_reminders(self, patient_id: str) -> List[Reminder]:
        today = self._now().date()
        reminders = []
        for medication in self.db.get_patient_medications(patient_id):
            if medication.status != MedicationStatus.ACTIVE:
                continue
            for at in medication.times:
                outcome = self.db.dose_outcome(medication.id, today, at)
                reminders.append(Reminder(
                    medication_id=medication.id,
                    medication_name=medication.name,
                    time=at,
                    taken=outcome == DOSE_TAKEN,
                    skipped=outcome == DOSE_SKIPPED,
                ))
        return sorted(reminders, key=lambda r: r.time)

    def low_stock(self, patient_id: str, threshold: int = LOW_STOCK_THRESHOLD) -> List[Medication]:
        return [
            m for m in self.db.get_patient_medications(patient_id)
            if m.status == MedicationStatus.ACTIVE and m.remaining_pills <= threshold
        ]
