from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Mapping

from .errors import ValidationError


@dataclass(frozen=True, kw_only=True)
class Workout:
    """A single logged exercise session.

    Notes:
    - `type` is a free-form label ("running", "yoga", ...), matched exactly.
    - `duration` is in minutes.
    - `date` is optional; the registry stamps the logging time when it is missing.
    """

    type: str
    duration: float
    calories_burned: float
    date: datetime | None = None


@dataclass(frozen=True, kw_only=True)
class User:
    id: str
    name: str
    age: float
    weight: float  # kg
    height: float  # cm
    workouts: tuple[Workout, ...] = ()

    @property
    def workout_count(self) -> int:
        return len(self.workouts)


UPDATABLE_USER_FIELDS = ("name", "age", "weight", "height")


@dataclass(frozen=True, kw_only=True)
class UserPatch:
    """Partial update for a user. `None` means the field was not supplied."""

    name: str | None = None
    age: float | None = None
    weight: float | None = None
    height: float | None = None

    def supplied(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def is_empty(self) -> bool:
        return not self.supplied()

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "UserPatch":
        for key in values:
            if key not in UPDATABLE_USER_FIELDS:
                raise ValidationError(key, values[key], reason="is not an updatable field")
        return cls(**{k: values[k] for k in UPDATABLE_USER_FIELDS if values.get(k) is not None})
