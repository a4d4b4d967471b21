"""
Cardiovascular Scoring Rules

Inputs consumed (from ScanVitals):
    heart_rate   (bpm) : normal: 60–100, critical outside 50–110
    systolic     (mmHg): elevated > 130, stage 2 > 140, crisis > 180
    diastolic    (mmHg): elevated > 85,  stage 2 > 90

Scoring starts at 100. The heart-rate penalty is either the normal-band
penalty or the critical-band penalty, never both.
"""
from __future__ import annotations

from typing import List

from .base import CategoryScore, HealthScanData, get_health_status

CATEGORY = "Cardiovascular Health"

# ── Thresholds ────────────────────────────────────────────────────────────────

HR_NORMAL_LOW     = 60
HR_NORMAL_HIGH    = 100
HR_CRITICAL_LOW   = 50
HR_CRITICAL_HIGH  = 110

SBP_ELEVATED      = 130
SBP_STAGE2        = 140
SBP_CRISIS        = 180
DBP_ELEVATED      = 85
DBP_STAGE2        = 90

# ── Penalties ─────────────────────────────────────────────────────────────────

HR_PENALTY           = 15
HR_CRITICAL_PENALTY  = 25
BP_STAGE2_PENALTY    = 20
BP_ELEVATED_PENALTY  = 10

ALERT_HYPERTENSIVE_CRISIS = "Severe hypertension detected - seek immediate medical attention"
ALERT_HEART_RATE = "Abnormal heart rate detected - medical evaluation recommended"


def is_heart_rate_critical(heart_rate: float) -> bool:
    return heart_rate < HR_CRITICAL_LOW or heart_rate > HR_CRITICAL_HIGH


def is_hypertensive_crisis(systolic: float) -> bool:
    return systolic > SBP_CRISIS


def heart_rate_penalty(heart_rate: float) -> int:
    if is_heart_rate_critical(heart_rate):
        return HR_CRITICAL_PENALTY
    if heart_rate < HR_NORMAL_LOW or heart_rate > HR_NORMAL_HIGH:
        return HR_PENALTY
    return 0


def blood_pressure_penalty(systolic: float, diastolic: float) -> int:
    if systolic > SBP_STAGE2 or diastolic > DBP_STAGE2:
        return BP_STAGE2_PENALTY
    if systolic > SBP_ELEVATED or diastolic > DBP_ELEVATED:
        return BP_ELEVATED_PENALTY
    return 0


def _recommendations(heart_rate: float, systolic: float) -> List[str]:
    recs = []
    if systolic > SBP_ELEVATED:
        recs.append("Reduce sodium intake and increase physical activity")
        recs.append("Monitor blood pressure regularly")
    if heart_rate > HR_NORMAL_HIGH:
        recs.append("Consider stress reduction techniques")
        recs.append("Limit caffeine intake")
    elif heart_rate < HR_NORMAL_LOW:
        recs.append("Monitor heart rate regularly")
    recs.append("Maintain regular cardiovascular exercise")
    return recs


def evaluate_cardiovascular(scan: HealthScanData) -> CategoryScore:
    v = scan.vital_signs
    score = 100 - heart_rate_penalty(v.heart_rate) - blood_pressure_penalty(v.systolic, v.diastolic)
    score = max(0, score)

    alerts = []
    if is_hypertensive_crisis(v.systolic):
        alerts.append(ALERT_HYPERTENSIVE_CRISIS)
    if is_heart_rate_critical(v.heart_rate):
        alerts.append(ALERT_HEART_RATE)

    return CategoryScore(
        category=CATEGORY,
        score=score,
        status=get_health_status(score),
        description="Analysis of heart rate, blood pressure, and circulation indicators",
        recommendations=_recommendations(v.heart_rate, v.systolic),
        urgent_alerts=alerts,
    )
