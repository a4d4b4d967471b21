"""
Unit Tests for the Medication Tracker

Pill counts, dose logging, adherence and reminders.
"""
from datetime import timedelta, timezone

import pytest

from healthhub.core.domain import MedicationStatus
from healthhub.utils import NotFoundError, ValidationError


@pytest.fixture
def medication(tracker):
    return tracker.add_medication({
        "patient_id": "p1",
        "name": "Lisinopril",
        "dosage": "10mg",
        "frequency": "twice-daily",
        "total_pills": 10,
    })


class TestAddMedication:
    """Tests for adding a tracked medication."""

    def test_defaults_from_frequency(self, medication, clock):
        assert medication.times == ["08:00", "20:00"]
        assert medication.remaining_pills == 10
        assert medication.start_date == clock.now
        assert medication.status == MedicationStatus.ACTIVE

    def test_explicit_times_kept(self, tracker):
        medication = tracker.add_medication({
            "patient_id": "p1", "name": "Metformin", "dosage": "500mg", "times": ["07:30"],
        })
        assert medication.times == ["07:30"]

    def test_blank_name_rejected(self, tracker):
        with pytest.raises(ValueError):
            tracker.add_medication({"patient_id": "p1", "name": "", "dosage": "1mg"})


class TestPillCounts:
    """Tests for the 0..total_pills invariant."""

    def test_taking_clamps_at_zero(self, tracker, medication, clock):
        for _ in range(12):
            medication = tracker.mark_taken(medication.id)
        assert medication.remaining_pills == 0
        assert medication.last_taken == clock.now

    def test_partial_refill(self, tracker, medication):
        for _ in range(5):
            tracker.mark_taken(medication.id)
        assert tracker.refill(medication.id, 3).remaining_pills == 8

    def test_refill_clamps_at_total(self, tracker, medication):
        tracker.mark_taken(medication.id)
        assert tracker.refill(medication.id, 50).remaining_pills == 10
        assert tracker.refill(medication.id).remaining_pills == 10

    def test_negative_refill_rejected(self, tracker, medication):
        with pytest.raises(ValidationError):
            tracker.refill(medication.id, -1)

    def test_unknown_medication(self, tracker):
        with pytest.raises(NotFoundError):
            tracker.mark_taken("missing")
        assert tracker.get_medication("missing") is None


class TestAdherence:
    """Tests for the adherence score."""

    def test_new_medication_scores_full(self, tracker, medication):
        assert tracker.adherence_score(medication.id) == 100

    def test_missed_doses_reduce_score(self, tracker, medication, clock):
        clock.now += timedelta(days=5)
        tracker.skip_dose(medication.id)
        tracker.skip_dose(medication.id)
        # 5 days x 2 doses = 10 expected, 2 missed
        assert tracker.adherence_score(medication.id) == 80

    def test_score_never_negative(self, tracker, medication, clock):
        clock.now += timedelta(days=1)
        for _ in range(5):
            tracker.skip_dose(medication.id)
        assert tracker.adherence_score(medication.id) == 0

    def test_utc_start_date(self, tracker, clock):
        start = (clock.now - timedelta(days=2)).astimezone(timezone.utc)
        medication = tracker.add_medication({
            "patient_id": "p1",
            "name": "Metformin",
            "dosage": "500mg",
            "frequency": "daily",
            "start_date": start.isoformat(),
        })
        assert medication.start_date == clock.now - timedelta(days=2)
        tracker.skip_dose(medication.id)
        # 2 days x 1 dose = 2 expected, 1 missed
        assert tracker.adherence_score(medication.id) == 50


class TestReminders:
    """Tests for daily reminders and stock warnings."""

    def test_todays_reminders_reflect_dose_log(self, tracker, medication):
        tracker.add_medication({"patient_id": "p1", "name": "Vitamin D", "dosage": "1000IU", "times": ["12:00"]})
        tracker.mark_taken(medication.id, at="08:00")
        tracker.skip_dose(medication.id, at="20:00")

        reminders = tracker.todays_reminders("p1")
        assert [r.time for r in reminders] == ["08:00", "12:00", "20:00"]
        assert reminders[0].taken and not reminders[0].skipped
        assert not reminders[1].taken and not reminders[1].skipped
        assert reminders[2].skipped

    def test_reminders_reset_next_day(self, tracker, medication, clock):
        tracker.mark_taken(medication.id, at="08:00")
        clock.now += timedelta(days=1)
        assert not any(r.taken for r in tracker.todays_reminders("p1"))

    def test_paused_medication_has_no_reminders(self, tracker, medication):
        tracker.set_status(medication.id, "paused")
        assert tracker.todays_reminders("p1") == []

    def test_low_stock(self, tracker, medication):
        assert tracker.low_stock("p1") == []
        for _ in range(3):
            tracker.mark_taken(medication.id)
        assert [m.id for m in tracker.low_stock("p1")] == [medication.id]
        assert tracker.low_stock("p1", threshold=5) == []
