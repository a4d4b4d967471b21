"""
Medical Knowledge Base

A small hardcoded table of conditions, symptoms, drug interactions and lab
reference ranges. Lookups are case-insensitive substring matches; anything
missing from the tables simply produces no match.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .base import DrugInteraction, InteractionSeverity


@dataclass(frozen=True)
class MedicalCondition:
    id: str
    name: str
    icd10_code: str
    category: str
    prevalence: float
    symptoms: Sequence[str]
    risk_factors: Sequence[str] = ()
    treatments: Sequence[str] = ()
    complications: Sequence[str] = ()
    prevention: Sequence[str] = ()
    required_tests: Sequence[str] = ()


@dataclass(frozen=True)
class SymptomInfo:
    id: str
    name: str
    category: str
    severity: str
    associated_conditions: Sequence[str] = ()
    red_flags: Sequence[str] = ()


@dataclass(frozen=True)
class LabTest:
    id: str
    name: str
    category: str
    normal_min: float
    normal_max: float
    unit: str
    interpretation_low: str
    interpretation_normal: str
    interpretation_high: str


def symptom_matches(known: str, reported: str) -> bool:
    """Bidirectional case-insensitive substring match; blank input never matches."""
    a = known.strip().lower()
    b = reported.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


CONDITIONS = (
    MedicalCondition(
        id="hypertension",
        name="Hypertension",
        icd10_code="I10",
        category="Cardiovascular",
        prevalence=45.4,
        symptoms=("Headaches", "Dizziness", "Chest pain", "Shortness of breath", "Nosebleeds"),
        risk_factors=("Age", "Family history", "Obesity", "Sedentary lifestyle", "High sodium diet", "Smoking"),
        treatments=("ACE inhibitors", "Beta blockers", "Diuretics", "Lifestyle modifications"),
        complications=("Heart attack", "Stroke", "Heart failure", "Kidney disease"),
        prevention=("Regular exercise", "Healthy diet", "Weight management", "Limit alcohol"),
        required_tests=("Ambulatory blood pressure monitoring", "Basic metabolic panel", "ECG"),
    ),
    MedicalCondition(
        id="diabetes-t2",
        name="Type 2 Diabetes Mellitus",
        icd10_code="E11",
        category="Endocrine",
        prevalence=11.3,
        symptoms=("Increased thirst", "Frequent urination", "Fatigue", "Blurred vision", "Slow healing wounds"),
        risk_factors=("Obesity", "Age over 45", "Family history", "Sedentary lifestyle"),
        treatments=("Metformin", "Insulin therapy", "Lifestyle modifications"),
        complications=("Diabetic retinopathy", "Nephropathy", "Neuropathy", "Cardiovascular disease"),
        prevention=("Weight management", "Regular exercise", "Healthy diet", "Regular screening"),
        required_tests=("Hemoglobin A1c", "Fasting plasma glucose"),
    ),
    MedicalCondition(
        id="depression",
        name="Major Depressive Disorder",
        icd10_code="F32",
        category="Psychiatric",
        prevalence=8.5,
        symptoms=("Persistent sadness", "Loss of interest", "Fatigue", "Sleep disturbances", "Appetite changes"),
        risk_factors=("Family history", "Trauma", "Chronic illness", "Social isolation"),
        treatments=("Antidepressants", "Psychotherapy", "Cognitive behavioral therapy"),
        complications=("Suicide risk", "Substance abuse", "Social isolation"),
        prevention=("Stress management", "Social support", "Regular exercise", "Adequate sleep"),
        required_tests=("PHQ-9 questionnaire", "Thyroid function tests"),
    ),
)

SYMPTOMS = (
    SymptomInfo(
        id="headache",
        name="Headache",
        category="Neurological",
        severity="moderate",
        associated_conditions=("hypertension",),
        red_flags=("Sudden severe headache", "Headache with fever and neck stiffness"),
    ),
    SymptomInfo(
        id="chest-pain",
        name="Chest Pain",
        category="Cardiovascular",
        severity="severe",
        associated_conditions=("hypertension",),
        red_flags=("Crushing chest pain", "Pain radiating to arm or jaw", "Shortness of breath"),
    ),
)

DRUG_INTERACTIONS = (
    DrugInteraction(
        drug1="Warfarin",
        drug2="Aspirin",
        severity=InteractionSeverity.MAJOR,
        mechanism="Additive anticoagulant effects",
        clinical_effect="Increased bleeding risk",
        management="Monitor INR closely, consider dose adjustment",
    ),
    DrugInteraction(
        drug1="Lisinopril",
        drug2="Potassium supplements",
        severity=InteractionSeverity.MODERATE,
        mechanism="Additive hyperkalemic effects",
        clinical_effect="Increased potassium levels",
        management="Monitor serum potassium levels",
    ),
    DrugInteraction(
        drug1="Lisinopril",
        drug2="Metformin",
        severity=InteractionSeverity.MINOR,
        mechanism="Both agents depend on renal clearance",
        clinical_effect="Possible change in kidney function",
        management="Monitor kidney function when using together",
    ),
)

LAB_TESTS = (
    LabTest(
        id="hba1c",
        name="Hemoglobin A1c",
        category="Diabetes Monitoring",
        normal_min=4.0,
        normal_max=5.6,
        unit="%",
        interpretation_low="May indicate hypoglycemia or certain anemias",
        interpretation_normal="Normal glucose metabolism",
        interpretation_high="Indicates diabetes (>=6.5%) or prediabetes (5.7-6.4%)",
    ),
    LabTest(
        id="lipid-panel",
        name="Lipid Panel",
        category="Cardiovascular Risk",
        normal_min=0.0,
        normal_max=200.0,
        unit="mg/dL",
        interpretation_low="May indicate malnutrition or liver disease",
        interpretation_normal="Low cardiovascular risk",
        interpretation_high="Increased cardiovascular risk",
    ),
)


@dataclass
class KnowledgeBase:
    """Lookup tables consulted by MedicalAIEngine. Pass empty tables in tests."""
    conditions: Sequence[MedicalCondition] = CONDITIONS
    symptoms: Sequence[SymptomInfo] = SYMPTOMS
    drug_interactions: Sequence[DrugInteraction] = DRUG_INTERACTIONS
    lab_tests: Sequence[LabTest] = LAB_TESTS
    _lab_index: Dict[str, LabTest] = field(init=False, repr=False)

    def __post_init__(self):
        self._lab_index = {t.id: t for t in self.lab_tests}

    def find_condition(self, condition_id: str) -> Optional[MedicalCondition]:
        return next((c for c in self.conditions if c.id == condition_id), None)

    def matching_symptoms(self, condition: MedicalCondition, reported: Sequence[str]) -> List[str]:
        """The condition's own symptoms that any reported symptom matches."""
        return [s for s in condition.symptoms if any(symptom_matches(s, r) for r in reported)]

    def red_flags_for(self, reported: Sequence[str]) -> List[str]:
        flags: List[str] = []
        for info in self.symptoms:
            if any(symptom_matches(info.name, r) for r in reported):
                flags.extend(f for f in info.red_flags if f not in flags)
        return flags

    def find_interaction(self, a: str, b: str) -> Optional[DrugInteraction]:
        return next((i for i in self.drug_interactions if i.involves(a, b)), None)

    def find_lab_test(self, test_id: str) -> Optional[LabTest]:
        return self._lab_index.get(test_id)
