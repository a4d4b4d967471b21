"""
Medication Package
"""
from .tracker import LOW_STOCK_THRESHOLD, MedicationTracker
