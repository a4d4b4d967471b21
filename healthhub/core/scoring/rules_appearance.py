"""
Skin and Stress Scoring Rules

Both categories are read straight off the face-analysis input:
    skin score   = skin_health
    stress score = 100 - stress_indicators
"""
from __future__ import annotations

from .base import CategoryScore, HealthScanData, get_health_status

SKIN_CATEGORY = "Skin & Appearance"
STRESS_CATEGORY = "Stress & Mental Health"

SKIN_LOW     = 70
STRESS_HIGH  = 60


def _clamp(score: float) -> float:
    return min(100.0, max(0.0, score))


def evaluate_skin(scan: HealthScanData) -> CategoryScore:
    score = _clamp(scan.face_analysis.skin_health)

    recs = []
    if score < SKIN_LOW:
        recs.append("Increase daily water intake")
        recs.append("Use moisturizer regularly")
        recs.append("Protect skin from UV exposure")
    recs.append("Maintain a balanced diet rich in antioxidants")

    return CategoryScore(
        category=SKIN_CATEGORY,
        score=score,
        status=get_health_status(score),
        description="Evaluation of skin condition, hydration, and aging indicators",
        recommendations=recs,
    )


def evaluate_stress(scan: HealthScanData) -> CategoryScore:
    stress = scan.face_analysis.stress_indicators
    score = _clamp(100 - stress)

    recs = []
    if stress > STRESS_HIGH:
        recs.append("Practice meditation or mindfulness")
        recs.append("Ensure adequate sleep (7-9 hours)")
        recs.append("Consider stress management counseling")
    recs.append("Regular physical exercise")
    recs.append("Maintain social connections")

    return CategoryScore(
        category=STRESS_CATEGORY,
        score=score,
        status=get_health_status(score),
        description="Analysis of stress markers and mental wellness indicators",
        recommendations=recs,
    )
