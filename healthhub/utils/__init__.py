"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    HealthHubError,
    NotFoundError,
    ValidationError,
    InvalidTransitionError,
    AssistantError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "HealthHubError",
    "NotFoundError",
    "ValidationError",
    "InvalidTransitionError",
    "AssistantError",
]
