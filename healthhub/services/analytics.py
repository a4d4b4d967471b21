"""
Health analytics over a patient's stored vitals, labs and scans.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from healthhub.core.domain import HealthScan, LabResult, VitalSignRecord

TREND_THRESHOLD = 0.05


class Timeframe(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


_WINDOWS = {
    Timeframe.WEEK: timedelta(days=7),
    Timeframe.MONTH: timedelta(days=30),
    Timeframe.YEAR: timedelta(days=365),
}


class Trend(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


def parse_timeframe(value: Optional[str]) -> Timeframe:
    """Unknown or missing timeframes fall back to a month."""
    try:
        return Timeframe(value)
    except ValueError:
        return Timeframe.MONTH


def calculate_average(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def calculate_trend(values: Sequence[float]) -> Trend:
    """
    Compare the mean of the later half against the earlier half.

    `values` must be oldest first. A move of more than 5% of the earlier
    mean counts as a trend.
    """
    if len(values) < 2:
        return Trend.STABLE
    mid = len(values) // 2
    first = calculate_average(values[:mid])
    second = calculate_average(values[mid:])
    difference = second - first
    threshold = abs(first) * TREND_THRESHOLD
    if difference > threshold:
        return Trend.INCREASING
    if difference < -threshold:
        return Trend.DECREASING
    return Trend.STABLE


def calculate_health_analytics(
    vitals: List[VitalSignRecord],
    labs: List[LabResult],
    scans: List[HealthScan],
    timeframe: Timeframe,
    now: datetime,
) -> Dict[str, Any]:
    start = now - _WINDOWS[timeframe]
    vitals = sorted((v for v in vitals if v.timestamp >= start), key=lambda v: v.timestamp)
    labs = [r for r in labs if r.result_date >= start]
    scans = sorted((s for s in scans if s.timestamp >= start), key=lambda s: s.timestamp)

    heart_rate = [v.heart_rate for v in vitals]
    systolic = [v.blood_pressure.systolic for v in vitals]
    weight = [v.weight for v in vitals if v.weight is not None]

    return {
        "summary": {
            "total_vital_sign_records": len(vitals),
            "total_lab_results": len(labs),
            "total_health_scans": len(scans),
            "timeframe": timeframe.value,
        },
        "trends": {
            "heart_rate": calculate_trend(heart_rate).value,
            "blood_pressure": calculate_trend(systolic).value,
            "weight": calculate_trend(weight).value,
        },
        "averages": {
            "heart_rate": round(calculate_average(heart_rate), 1),
            "systolic_bp": round(calculate_average(systolic), 1),
            "diastolic_bp": round(calculate_average([v.blood_pressure.diastolic for v in vitals]), 1),
            "temperature": round(calculate_average([v.temperature for v in vitals]), 1),
        },
        "health_score_progression": [
            {"date": s.timestamp.isoformat(), "score": s.results.overall_score} for s in scans
        ],
    }
