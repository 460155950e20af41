from __future__ import annotations

from .errors import DuplicateUserError, FitTrackError, UserNotFoundError, ValidationError
from .models import UPDATABLE_USER_FIELDS, User, UserPatch, Workout
from .registry import FitnessRegistry
from .sample import seed_sample_data

__all__ = [
    "FitTrackError",
    "ValidationError",
    "DuplicateUserError",
    "UserNotFoundError",
    "Workout",
    "User",
    "UserPatch",
    "UPDATABLE_USER_FIELDS",
    "FitnessRegistry",
    "seed_sample_data",
]
