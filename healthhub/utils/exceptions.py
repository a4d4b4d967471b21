"""
Custom Exception Hierarchy

Typed errors raised by the services. The HealthAPI facade converts every one
of them into a failed envelope; the HTTP layer maps `code` to a status.
"""
from typing import Optional, Dict, Any


class HealthHubError(Exception):
    """Base exception for all backend errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class NotFoundError(HealthHubError):
    """A referenced entity does not exist in the store."""

    def __init__(
        self,
        entity: str,
        entity_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=f"{entity} not found",
            code="NOT_FOUND",
            details={"entity": entity, "id": entity_id, **(details or {})}
        )
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(HealthHubError):
    """Missing or malformed input."""

    def __init__(
        self,
        message: str,
        field_name: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field": field_name, **(details or {})}
        )
        self.field_name = field_name


class InvalidTransitionError(HealthHubError):
    """A status change not permitted by the entity's transition table."""

    def __init__(
        self,
        entity: str,
        current: str,
        target: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=f"Cannot move {entity} from '{current}' to '{target}'",
            code="INVALID_TRANSITION",
            details={"entity": entity, "from": current, "to": target, **(details or {})}
        )
        self.current = current
        self.target = target


class AssistantError(HealthHubError):
    """Errors from the generative AI assistant."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="ASSISTANT_ERROR",
            details=details
        )
