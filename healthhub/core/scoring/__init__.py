"""
Scoring Package

Deterministic health-scan scoring and the knowledge-base rules engine.
"""
from .base import (
    BodyComposition,
    CategoryScore,
    DiagnosisCandidate,
    DrugInteraction,
    FaceAnalysis,
    HealthAssessment,
    HealthRiskReport,
    HealthScanData,
    HealthStatus,
    InteractionReport,
    InteractionSeverity,
    LabBand,
    LabInterpretation,
    PredictedRisk,
    RiskLevel,
    RiskProfile,
    ScanVitals,
    SymptomAnalysis,
    Urgency,
    get_health_status,
)
from .analyzer import HealthScanAnalyzer
from .engine import MedicalAIEngine
from .knowledge_base import KnowledgeBase, LabTest, MedicalCondition, SymptomInfo
