"""
Scoring Engine - Base Types

Input and output contracts for the health-scan analyzer and the medical
rules engine. These are plain dataclasses; the API layer serialises them
through `to_dict()`. Raw payloads are validated with a pydantic TypeAdapter.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter


class HealthStatus(str, Enum):
    """Per-category label derived from a 0-100 score."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class RiskLevel(str, Enum):
    """
    Overall risk of a scan.

    CRITICAL  – a vital crossed into the critical band; overrides the score
    HIGH      – overall score below 50
    MODERATE  – overall score below 70
    LOW       – everything else
    """
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


# Status cut-offs (inclusive lower bounds)
STATUS_EXCELLENT = 90
STATUS_GOOD = 75
STATUS_FAIR = 60


def get_health_status(score: float) -> HealthStatus:
    """Step function: >=90 excellent, >=75 good, >=60 fair, else poor."""
    if score >= STATUS_EXCELLENT:
        return HealthStatus.EXCELLENT
    if score >= STATUS_GOOD:
        return HealthStatus.GOOD
    if score >= STATUS_FAIR:
        return HealthStatus.FAIR
    return HealthStatus.POOR


# ── Scan input ────────────────────────────────────────────────────────────────

@dataclass
class FaceAnalysis:
    skin_health: float
    eye_clarity: float
    facial_symmetry: float
    stress_indicators: float


@dataclass
class ScanVitals:
    heart_rate: float
    respiratory_rate: float
    systolic: float
    diastolic: float
    oxygen_saturation: float


@dataclass
class BodyComposition:
    bmi: float
    body_fat: float
    muscle_mass: float
    hydration_level: float


@dataclass
class HealthScanData:
    """One simulated biometric capture fed through the analyzer."""
    face_analysis: FaceAnalysis
    vital_signs: ScanVitals
    body_composition: BodyComposition

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HealthScanData":
        """Validate a raw payload; numeric strings are coerced, anything else raises."""
        return TypeAdapter(cls).validate_python(data)


# ── Scan output ───────────────────────────────────────────────────────────────

@dataclass
class CategoryScore:
    """Score for one assessment category (one row of the scan report)."""
    category: str
    score: float
    status: HealthStatus
    description: str
    recommendations: List[str] = field(default_factory=list)
    # Messages for any input that crossed into the critical band
    urgent_alerts: List[str] = field(default_factory=list)

    @property
    def is_urgent(self) -> bool:
        return bool(self.urgent_alerts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "score": round(self.score, 1),
            "status": self.status.value,
            "description": self.description,
            "recommendations": self.recommendations,
            "urgent_alerts": self.urgent_alerts,
        }


@dataclass
class HealthAssessment:
    overall_score: int
    risk_level: RiskLevel
    findings: List[CategoryScore] = field(default_factory=list)
    urgent_alerts: List[str] = field(default_factory=list)
    follow_up_recommendations: List[str] = field(default_factory=list)

    def finding(self, category: str) -> Optional[CategoryScore]:
        return next((f for f in self.findings if f.category == category), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_score": self.overall_score,
            "risk_level": self.risk_level.value,
            "findings": [f.to_dict() for f in self.findings],
            "urgent_alerts": self.urgent_alerts,
            "follow_up_recommendations": self.follow_up_recommendations,
        }


# ── Symptom analysis ──────────────────────────────────────────────────────────

class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EMERGENCY = "emergency"


@dataclass
class DiagnosisCandidate:
    condition_id: str
    name: str
    icd10_code: str
    category: str
    probability: float
    reasoning: str
    required_tests: List[str] = field(default_factory=list)
    urgency: Urgency = Urgency.MEDIUM

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition_id": self.condition_id,
            "name": self.name,
            "icd10_code": self.icd10_code,
            "category": self.category,
            "probability": round(self.probability, 1),
            "reasoning": self.reasoning,
            "required_tests": self.required_tests,
            "urgency": self.urgency.value,
        }


@dataclass
class SymptomAnalysis:
    possible_diagnoses: List[DiagnosisCandidate] = field(default_factory=list)
    confidence: float = 0.0
    recommendations: List[str] = field(default_factory=list)
    red_flags: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "possible_diagnoses": [d.to_dict() for d in self.possible_diagnoses],
            "confidence": round(self.confidence, 1),
            "recommendations": self.recommendations,
            "red_flags": self.red_flags,
            "next_steps": self.next_steps,
        }


# ── Drug interactions ─────────────────────────────────────────────────────────

class InteractionSeverity(str, Enum):
    NONE = "none"
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    CONTRAINDICATED = "contraindicated"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    InteractionSeverity.NONE:            0,
    InteractionSeverity.MINOR:           1,
    InteractionSeverity.MODERATE:        2,
    InteractionSeverity.MAJOR:           3,
    InteractionSeverity.CONTRAINDICATED: 4,
}


@dataclass(frozen=True)
class DrugInteraction:
    drug1: str
    drug2: str
    severity: InteractionSeverity
    mechanism: str
    clinical_effect: str
    management: str

    def involves(self, a: str, b: str) -> bool:
        pair = {self.drug1.lower(), self.drug2.lower()}
        return pair == {a.strip().lower(), b.strip().lower()}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "drug1": self.drug1,
            "drug2": self.drug2,
            "severity": self.severity.value,
            "mechanism": self.mechanism,
            "clinical_effect": self.clinical_effect,
            "management": self.management,
        }


@dataclass
class InteractionReport:
    interactions: List[DrugInteraction] = field(default_factory=list)
    severity: InteractionSeverity = InteractionSeverity.NONE
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "interactions": [i.to_dict() for i in self.interactions],
            "severity": self.severity.value,
            "recommendations": self.recommendations,
        }


# ── Risk prediction ───────────────────────────────────────────────────────────

@dataclass
class RiskProfile:
    age: int
    gender: str = "other"
    bmi: float = 22.0
    smoking: bool = False
    family_history: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RiskProfile":
        profile = TypeAdapter(cls).validate_python(data)
        profile.gender = profile.gender.lower()
        return profile


@dataclass
class PredictedRisk:
    condition: str
    probability: float
    timeframe: str
    risk_factors: List[str] = field(default_factory=list)
    prevention: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition,
            "probability": self.probability,
            "timeframe": self.timeframe,
            "risk_factors": self.risk_factors,
            "prevention": self.prevention,
        }


@dataclass
class HealthRiskReport:
    risks: List[PredictedRisk] = field(default_factory=list)
    overall_risk_score: float = 0.0
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "risks": [r.to_dict() for r in self.risks],
            "overall_risk_score": round(self.overall_risk_score, 1),
            "recommendations": self.recommendations,
        }


# ── Lab interpretation ────────────────────────────────────────────────────────

class LabBand(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


@dataclass
class LabInterpretation:
    test_id: str
    status: LabBand
    interpretation: str
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "test_id": self.test_id,
            "status": self.status.value,
            "interpretation": self.interpretation,
            "recommendations": self.recommendations,
        }
