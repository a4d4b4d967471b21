"""
Consultation Package
"""
from .service import (
    AvailabilityWindow,
    DoctorConsultationService,
    DoctorFilters,
    EmergencyDispatch,
    emergency_wait_time,
    generate_emergency_code,
)
