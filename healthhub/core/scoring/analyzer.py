"""
Health Scan Analyzer

Central dispatcher. Runs every registered category evaluator over one
HealthScanData record and folds the category scores into a HealthAssessment.

Usage:
    from healthhub.core.scoring import HealthScanAnalyzer

    assessment = HealthScanAnalyzer().analyze(scan_data)
    print(assessment.overall_score, assessment.risk_level)

Adding a category:
    1. Create  healthhub/core/scoring/rules_<category>.py
    2. Implement evaluate_<category>(HealthScanData) -> CategoryScore
    3. Register it in _CATEGORY_EVALUATORS below.
"""
from __future__ import annotations

from typing import Callable, List, Tuple

from healthhub.utils import get_logger
from .base import (
    CategoryScore,
    HealthAssessment,
    HealthScanData,
    HealthStatus,
    RiskLevel,
)
from .rules_appearance import evaluate_skin, evaluate_stress
from .rules_body import evaluate_body_composition
from .rules_cardiovascular import (
    evaluate_cardiovascular,
    is_heart_rate_critical,
    is_hypertensive_crisis,
)
from .rules_respiratory import evaluate_respiratory, is_spo2_critical

logger = get_logger(__name__)

Evaluator = Callable[[HealthScanData], CategoryScore]

# ── Registry: report order of categories ─────────────────────────────────────
_CATEGORY_EVALUATORS: Tuple[Evaluator, ...] = (
    evaluate_cardiovascular,
    evaluate_respiratory,
    evaluate_skin,
    evaluate_stress,
    evaluate_body_composition,
)

# Risk buckets on the overall score (exclusive upper bounds)
RISK_HIGH_BELOW = 50
RISK_MODERATE_BELOW = 70


class HealthScanAnalyzer:
    """
    Maps a HealthScanData record to a deterministic HealthAssessment.

    Stateless; one instance can be shared by every request.
    """

    def analyze(self, scan: HealthScanData) -> HealthAssessment:
        findings: List[CategoryScore] = [evaluate(scan) for evaluate in _CATEGORY_EVALUATORS]

        overall = sum(f.score for f in findings) / len(findings)
        urgent_alerts = [alert for f in findings for alert in f.urgent_alerts]
        risk_level = self.calculate_risk_level(overall, scan)

        if urgent_alerts:
            logger.warning(f"HealthScanAnalyzer: {len(urgent_alerts)} urgent alert(s) - risk {risk_level.value}")
        else:
            logger.debug(f"HealthScanAnalyzer: overall {overall:.1f}, risk {risk_level.value}")

        return HealthAssessment(
            overall_score=round(overall),
            risk_level=risk_level,
            findings=findings,
            urgent_alerts=urgent_alerts,
            follow_up_recommendations=self.follow_up_recommendations(findings),
        )

    @staticmethod
    def has_critical_vitals(scan: HealthScanData) -> bool:
        v = scan.vital_signs
        return (
            is_hypertensive_crisis(v.systolic)
            or is_spo2_critical(v.oxygen_saturation)
            or is_heart_rate_critical(v.heart_rate)
        )

    @classmethod
    def calculate_risk_level(cls, overall_score: float, scan: HealthScanData) -> RiskLevel:
        """Critical whenever a vital is in its critical band, else bucket the score."""
        if cls.has_critical_vitals(scan):
            return RiskLevel.CRITICAL
        if overall_score < RISK_HIGH_BELOW:
            return RiskLevel.HIGH
        if overall_score < RISK_MODERATE_BELOW:
            return RiskLevel.MODERATE
        return RiskLevel.LOW

    @staticmethod
    def follow_up_recommendations(findings: List[CategoryScore]) -> List[str]:
        recs = []
        if any(f.status == HealthStatus.POOR for f in findings):
            recs.append("Schedule comprehensive medical evaluation within 1 week")
        if sum(1 for f in findings if f.status == HealthStatus.FAIR) > 1:
            recs.append("Follow up with healthcare provider within 1 month")
        recs.append("Repeat health scan in 3 months to track progress")
        recs.append("Maintain regular health monitoring routine")
        return recs

    @staticmethod
    def registered_categories() -> List[str]:
        """Evaluator names in report order."""
        return [e.__name__.replace("evaluate_", "") for e in _CATEGORY_EVALUATORS]
