"""
Domain Model - Shared Base

Every stored entity derives from `DomainModel`. Unknown fields are rejected so
that a misspelt patch key fails loudly instead of being dropped. Datetimes are
kept naive in server local time; offset-aware input (e.g. a trailing `Z`) is
converted on the way in so stored values always compare with each other.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

from healthhub.utils.exceptions import InvalidTransitionError

M = TypeVar("M", bound="DomainModel")
S = TypeVar("S", bound=Enum)


def new_id() -> str:
    """Generate a collision-free entity id."""
    return str(uuid.uuid4())


class DomainModel(BaseModel):
    """Base class for all domain entities."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    @field_validator("*", mode="after")
    @classmethod
    def normalise_datetimes(cls, value: Any) -> Any:
        if isinstance(value, datetime) and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def coerce(cls: Type[M], data: Any) -> M:
        """Accept either an instance or a plain mapping."""
        if isinstance(data, cls):
            return data
        return cls.model_validate(data)


def check_transition(
    entity: str,
    current: S,
    target: S,
    table: Mapping[S, Iterable[S]],
) -> S:
    """
    Validate a status change against a transition table.

    Returns the target status, or raises InvalidTransitionError when the
    table does not list `target` as reachable from `current`.
    """
    if target not in table.get(current, ()):
        raise InvalidTransitionError(entity, current.value, target.value)
    return target
