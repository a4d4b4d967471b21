"""
Respiratory Scoring Rules

Inputs consumed (from ScanVitals):
    oxygen_saturation (%)    : optimal >= 98, low < 95, critical < 90
    respiratory_rate  (/min) : normal: 12–20
"""
from __future__ import annotations

from .base import CategoryScore, HealthScanData, get_health_status

CATEGORY = "Respiratory Function"

SPO2_OPTIMAL   = 98
SPO2_LOW       = 95
SPO2_CRITICAL  = 90
RR_LOW         = 12
RR_HIGH        = 20

SPO2_LOW_PENALTY        = 30
SPO2_SUBOPTIMAL_PENALTY = 10
RR_PENALTY              = 15

ALERT_LOW_SPO2 = "Low oxygen saturation - consult healthcare provider immediately"


def is_spo2_critical(oxygen_saturation: float) -> bool:
    return oxygen_saturation < SPO2_CRITICAL


def spo2_penalty(oxygen_saturation: float) -> int:
    if oxygen_saturation < SPO2_LOW:
        return SPO2_LOW_PENALTY
    if oxygen_saturation < SPO2_OPTIMAL:
        return SPO2_SUBOPTIMAL_PENALTY
    return 0


def respiratory_rate_penalty(respiratory_rate: float) -> int:
    if respiratory_rate < RR_LOW or respiratory_rate > RR_HIGH:
        return RR_PENALTY
    return 0


def evaluate_respiratory(scan: HealthScanData) -> CategoryScore:
    v = scan.vital_signs
    score = max(0, 100 - spo2_penalty(v.oxygen_saturation) - respiratory_rate_penalty(v.respiratory_rate))

    recs = []
    if v.oxygen_saturation < SPO2_OPTIMAL:
        recs.append("Practice deep breathing exercises")
        recs.append("Ensure good air quality in living spaces")
    if respiratory_rate_penalty(v.respiratory_rate):
        recs.append("Monitor breathing patterns")
    recs.append("Avoid smoking and secondhand smoke")
    recs.append("Regular aerobic exercise to improve lung capacity")

    return CategoryScore(
        category=CATEGORY,
        score=score,
        status=get_health_status(score),
        description="Assessment of breathing patterns and oxygen saturation",
        recommendations=recs,
        urgent_alerts=[ALERT_LOW_SPO2] if is_spo2_critical(v.oxygen_saturation) else [],
    )
