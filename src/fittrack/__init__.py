from __future__ import annotations

from .core import (
    DuplicateUserError,
    FitnessRegistry,
    FitTrackError,
    User,
    UserNotFoundError,
    UserPatch,
    ValidationError,
    Workout,
)
from .runtime.server import FitTrackServer, run
from .sdk.client import FitTrackClient

__all__ = [
    "run",
    "FitTrackServer",
    "FitTrackClient",
    "FitnessRegistry",
    "User",
    "UserPatch",
    "Workout",
    "FitTrackError",
    "ValidationError",
    "DuplicateUserError",
    "UserNotFoundError",
]
