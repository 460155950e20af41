from __future__ import annotations

from .client import FitTrackClient, user_from_dict, workout_from_dict

__all__ = ["FitTrackClient", "user_from_dict", "workout_from_dict"]
