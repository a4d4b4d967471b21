"""
Medical AI Engine

Deterministic rules over the knowledge base: health-scan scoring, symptom
lookup, drug-interaction checks, risk prediction and lab interpretation.
Nothing here learns or calls out; every answer is arithmetic or substring
matching, and missing knowledge-base entries give empty results.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from healthhub.utils import get_logger
from .analyzer import HealthScanAnalyzer
from .base import (
    DiagnosisCandidate,
    HealthAssessment,
    HealthRiskReport,
    HealthScanData,
    InteractionReport,
    InteractionSeverity,
    LabBand,
    LabInterpretation,
    PredictedRisk,
    RiskProfile,
    SymptomAnalysis,
    Urgency,
)
from .knowledge_base import KnowledgeBase, MedicalCondition

logger = get_logger(__name__)

DEFAULT_DIAGNOSIS_LIMIT = 5

EMERGENCY_SYMPTOMS = ("chest pain", "severe headache", "difficulty breathing", "loss of consciousness")

# Risk factors (thresholds are exclusive unless noted)
CVD_AGE = 45
CVD_AGE_POINTS = 15
CVD_SMOKING_POINTS = 20
CVD_OBESE_BMI = 30
CVD_OBESE_POINTS = 10
CVD_REPORT_ABOVE = 10

DIABETES_AGE = 45
DIABETES_AGE_POINTS = 10
DIABETES_OVERWEIGHT_BMI = 25
DIABETES_OVERWEIGHT_POINTS = 15
DIABETES_FAMILY_POINTS = 20
DIABETES_REPORT_ABOVE = 15

COLORECTAL_SCREENING_AGE = 50   # inclusive
BREAST_SCREENING_AGE = 40       # inclusive
HIGH_RISK_ABOVE = 20


class MedicalAIEngine:
    """
    Facade over the scan analyzer and the knowledge base.

    Usage:
        engine = MedicalAIEngine()
        engine.analyze_symptoms(["headache", "dizziness"])
        engine.check_drug_interactions(["Warfarin", "Aspirin"])
    """

    def __init__(
        self,
        knowledge_base: Optional[KnowledgeBase] = None,
        analyzer: Optional[HealthScanAnalyzer] = None,
    ):
        self.knowledge_base = knowledge_base or KnowledgeBase()
        self.analyzer = analyzer or HealthScanAnalyzer()

    # ── Health scan ──────────────────────────────────────────────────────────

    def analyze_health_scan(self, scan: HealthScanData) -> HealthAssessment:
        return self.analyzer.analyze(scan)

    # ── Symptoms ─────────────────────────────────────────────────────────────

    def analyze_symptoms(self, symptoms: Sequence[str], limit: int = DEFAULT_DIAGNOSIS_LIMIT) -> SymptomAnalysis:
        reported = [s for s in symptoms if s and s.strip()]
        if not reported:
            logger.debug("analyze_symptoms: no symptoms supplied")
            return SymptomAnalysis(recommendations=self._symptom_recommendations([]))

        kb = self.knowledge_base
        candidates: List[DiagnosisCandidate] = []
        for condition in kb.conditions:
            matched = kb.matching_symptoms(condition, reported)
            if not matched:
                continue
            probability = len(matched) / len(condition.symptoms) * 100
            candidates.append(DiagnosisCandidate(
                condition_id=condition.id,
                name=condition.name,
                icd10_code=condition.icd10_code,
                category=condition.category,
                probability=probability,
                reasoning=f"{len(matched)} of {len(condition.symptoms)} symptoms match",
                required_tests=list(condition.required_tests),
                urgency=self.assess_urgency(condition, reported),
            ))

        # Stable sort keeps knowledge-base order on ties
        candidates.sort(key=lambda c: c.probability, reverse=True)
        candidates = candidates[:max(0, limit)]
        red_flags = kb.red_flags_for(reported)

        logger.debug(f"analyze_symptoms: {len(candidates)} candidate(s), {len(red_flags)} red flag(s)")
        return SymptomAnalysis(
            possible_diagnoses=candidates,
            confidence=candidates[0].probability if candidates else 0.0,
            recommendations=self._symptom_recommendations(red_flags),
            red_flags=red_flags,
            next_steps=self._next_steps(candidates),
        )

    @staticmethod
    def assess_urgency(condition: MedicalCondition, symptoms: Iterable[str]) -> Urgency:
        lowered = [s.lower() for s in symptoms]
        if any(es in s for s in lowered for es in EMERGENCY_SYMPTOMS):
            return Urgency.EMERGENCY
        if condition.category.lower() == "cardiovascular":
            return Urgency.HIGH
        return Urgency.MEDIUM

    @staticmethod
    def _symptom_recommendations(red_flags: List[str]) -> List[str]:
        recs = [
            "Consult with a healthcare professional for proper diagnosis",
            "Keep a detailed symptom diary",
            "Monitor symptom progression and severity",
        ]
        if red_flags:
            recs.insert(0, "Seek immediate medical attention due to red flag symptoms")
        return recs

    @staticmethod
    def _next_steps(candidates: List[DiagnosisCandidate]) -> List[str]:
        steps = ["Schedule appointment with primary care physician"]
        if any(c.urgency == Urgency.EMERGENCY for c in candidates):
            steps.insert(0, "Seek immediate emergency medical care")
        elif any(c.urgency == Urgency.HIGH for c in candidates):
            steps.insert(0, "Schedule urgent medical consultation within 24-48 hours")
        return steps

    # ── Drug interactions ────────────────────────────────────────────────────

    def check_drug_interactions(self, medications: Sequence[str]) -> InteractionReport:
        meds = [m for m in medications if m and m.strip()]
        found = []
        for i, first in enumerate(meds):
            for second in meds[i + 1:]:
                interaction = self.knowledge_base.find_interaction(first, second)
                if interaction is not None and interaction not in found:
                    found.append(interaction)

        severity = max((i.severity for i in found), key=lambda s: s.rank, default=InteractionSeverity.NONE)
        if found:
            logger.info(f"check_drug_interactions: {len(found)} interaction(s), max severity {severity.value}")

        recs = []
        if any(i.severity == InteractionSeverity.CONTRAINDICATED for i in found):
            recs.append("URGENT: Contraindicated drug combination detected - contact healthcare provider immediately")
        if any(i.severity == InteractionSeverity.MAJOR for i in found):
            recs.append("Major drug interaction detected - requires medical supervision")
        recs.append("Review all medications with healthcare provider or pharmacist")

        return InteractionReport(interactions=found, severity=severity, recommendations=recs)

    # ── Risk prediction ──────────────────────────────────────────────────────

    def predict_health_risks(self, profile: RiskProfile) -> HealthRiskReport:
        risks: List[PredictedRisk] = []

        cvd = self._cardiovascular_risk(profile)
        if cvd.probability > CVD_REPORT_ABOVE:
            risks.append(cvd)
        diabetes = self._diabetes_risk(profile)
        if diabetes.probability > DIABETES_REPORT_ABOVE:
            risks.append(diabetes)
        risks.extend(self._cancer_screening_risks(profile))

        overall = sum(r.probability for r in risks) / len(risks) if risks else 0.0

        recs = ["Maintain regular health check-ups"]
        if any(r.probability > HIGH_RISK_ABOVE for r in risks):
            recs.append("Discuss high-risk conditions with healthcare provider")
        recs.append("Follow age-appropriate screening guidelines")
        recs.append("Maintain healthy lifestyle practices")

        return HealthRiskReport(risks=risks, overall_risk_score=overall, recommendations=recs)

    @staticmethod
    def _cardiovascular_risk(profile: RiskProfile) -> PredictedRisk:
        probability, factors = 0, []
        if profile.age > CVD_AGE:
            probability += CVD_AGE_POINTS
            factors.append("Age over 45")
        if profile.smoking:
            probability += CVD_SMOKING_POINTS
            factors.append("Smoking")
        if profile.bmi > CVD_OBESE_BMI:
            probability += CVD_OBESE_POINTS
            factors.append("Obesity")
        return PredictedRisk(
            condition="Cardiovascular Disease",
            probability=probability,
            timeframe="10 years",
            risk_factors=factors,
            prevention=["Quit smoking", "Regular exercise", "Healthy diet", "Weight management"],
        )

    @staticmethod
    def _diabetes_risk(profile: RiskProfile) -> PredictedRisk:
        probability, factors = 0, []
        if profile.age > DIABETES_AGE:
            probability += DIABETES_AGE_POINTS
            factors.append("Age over 45")
        if profile.bmi > DIABETES_OVERWEIGHT_BMI:
            probability += DIABETES_OVERWEIGHT_POINTS
            factors.append("Overweight")
        if any("diabetes" in entry.lower() for entry in profile.family_history):
            probability += DIABETES_FAMILY_POINTS
            factors.append("Family history of diabetes")
        return PredictedRisk(
            condition="Type 2 Diabetes",
            probability=probability,
            timeframe="5 years",
            risk_factors=factors,
            prevention=["Weight management", "Regular exercise", "Healthy diet", "Regular screening"],
        )

    @staticmethod
    def _cancer_screening_risks(profile: RiskProfile) -> List[PredictedRisk]:
        risks = []
        if profile.age >= COLORECTAL_SCREENING_AGE:
            risks.append(PredictedRisk(
                condition="Colorectal Cancer",
                probability=5,
                timeframe="Lifetime",
                risk_factors=["Age over 50"],
                prevention=["Regular colonoscopy screening", "Healthy diet", "Regular exercise"],
            ))
        if profile.gender == "female" and profile.age >= BREAST_SCREENING_AGE:
            risks.append(PredictedRisk(
                condition="Breast Cancer",
                probability=12,
                timeframe="Lifetime",
                risk_factors=["Female gender", "Age over 40"],
                prevention=["Regular mammography", "Self-examination", "Healthy lifestyle"],
            ))
        return risks

    # ── Lab results ──────────────────────────────────────────────────────────

    def interpret_lab_result(self, test_id: str, value: float) -> LabInterpretation:
        test = self.knowledge_base.find_lab_test(test_id)
        if test is None:
            logger.debug(f"interpret_lab_result: unknown test '{test_id}'")
            return LabInterpretation(test_id=test_id, status=LabBand.NORMAL, interpretation="Test not found")

        if value < test.normal_min:
            return LabInterpretation(
                test_id=test_id,
                status=LabBand.LOW,
                interpretation=test.interpretation_low,
                recommendations=["Consider retesting", "Consult healthcare provider"],
            )
        if value > test.normal_max:
            return LabInterpretation(
                test_id=test_id,
                status=LabBand.HIGH,
                interpretation=test.interpretation_high,
                recommendations=["Lifestyle modifications may be needed", "Follow up with healthcare provider"],
            )
        return LabInterpretation(
            test_id=test_id,
            status=LabBand.NORMAL,
            interpretation=test.interpretation_normal,
            recommendations=["Continue current health practices"],
        )
