"""
Store Package

In-memory HealthDatabase plus demo seed data.
"""
from .database import HealthDatabase
from .seed import seed_sample_data
