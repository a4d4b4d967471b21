"""API routers."""
from . import (
    analysis,
    appointments,
    assistant,
    consultations,
    medications,
    patients,
    providers,
    records,
)

ROUTERS = [
    patients.router,
    providers.router,
    appointments.router,
    records.router,
    analysis.router,
    consultations.router,
    medications.router,
    assistant.router,
]
