"""
Domain Model Package

Pydantic entities stored by HealthDatabase. Each stored entity has a
`<Name>Create` input shape and a `<Name>` stored shape that adds the id and
timestamps.
"""
from .base import DomainModel, new_id, check_transition
from .patient import (
    Address,
    Allergy,
    AllergySeverity,
    AllergyType,
    ConditionSeverity,
    ConditionStatus,
    DiagnosedCondition,
    EmergencyContact,
    FamilyHistoryEntry,
    Gender,
    Immunization,
    MedicalHistory,
    Patient,
    PatientCreate,
    PersonalInfo,
    Surgery,
)
from .provider import (
    WEEKDAYS,
    Availability,
    ConsultationOptions,
    ConsultationType,
    Doctor,
    Provider,
    ProviderCreate,
    Ratings,
    TimeRange,
    WorkingHours,
)
from .clinical import (
    APPOINTMENT_TRANSITIONS,
    Appointment,
    AppointmentCreate,
    AppointmentStatus,
    AlertSeverity,
    AppointmentType,
    BloodPressure,
    EmergencyAlert,
    HealthScan,
    LabResult,
    LabResultCreate,
    LabStatus,
    ScanType,
    VitalSignRecord,
    VitalSignsCreate,
)
from .consultation import (
    CONSULTATION_TRANSITIONS,
    EMERGENCY_POOL_ID,
    ConsultationKind,
    ConsultationNotes,
    ConsultationRequest,
    ConsultationSession,
    ConsultationStatus,
    ConsultationSummary,
    Diagnosis,
    DoctorReview,
    Intake,
    PaymentStatus,
    Prescription,
    ReviewCategories,
    ReviewCreate,
    SessionCredentials,
    SlotType,
    TimeSlot,
    Treatment,
)
from .medication import (
    FREQUENCY_TIMES,
    Medication,
    MedicationCreate,
    MedicationFrequency,
    MedicationStatus,
    Reminder,
)
