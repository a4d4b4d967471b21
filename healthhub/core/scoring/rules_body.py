"""
Body Composition Scoring Rules

Inputs consumed (from BodyComposition):
    bmi      : healthy 20–25, out of range < 18.5 or > 30
    body_fat  (%): elevated > 25, high > 30
"""
from __future__ import annotations

from .base import CategoryScore, HealthScanData, get_health_status

CATEGORY = "Body Composition"

BMI_UNDERWEIGHT   = 18.5
BMI_OBESE         = 30
BMI_HEALTHY_LOW   = 20
BMI_HEALTHY_HIGH  = 25
FAT_ELEVATED      = 25
FAT_HIGH          = 30

BMI_OUT_OF_RANGE_PENALTY  = 25
BMI_BORDERLINE_PENALTY    = 10
FAT_HIGH_PENALTY          = 15
FAT_ELEVATED_PENALTY      = 5


def bmi_penalty(bmi: float) -> int:
    if bmi < BMI_UNDERWEIGHT or bmi > BMI_OBESE:
        return BMI_OUT_OF_RANGE_PENALTY
    if bmi < BMI_HEALTHY_LOW or bmi > BMI_HEALTHY_HIGH:
        return BMI_BORDERLINE_PENALTY
    return 0


def body_fat_penalty(body_fat: float) -> int:
    if body_fat > FAT_HIGH:
        return FAT_HIGH_PENALTY
    if body_fat > FAT_ELEVATED:
        return FAT_ELEVATED_PENALTY
    return 0


def evaluate_body_composition(scan: HealthScanData) -> CategoryScore:
    body = scan.body_composition
    score = max(0, 100 - bmi_penalty(body.bmi) - body_fat_penalty(body.body_fat))

    recs = []
    if body.bmi > BMI_HEALTHY_HIGH:
        recs.append("Focus on balanced nutrition and portion control")
        recs.append("Increase physical activity")
    elif body.bmi < BMI_UNDERWEIGHT:
        recs.append("Consult with nutritionist")
    if body.body_fat > FAT_ELEVATED:
        recs.append("Incorporate strength training exercises")
    recs.append("Stay hydrated throughout the day")

    return CategoryScore(
        category=CATEGORY,
        score=score,
        status=get_health_status(score),
        description="Assessment of BMI, body fat percentage, and muscle mass",
        recommendations=recs,
    )
