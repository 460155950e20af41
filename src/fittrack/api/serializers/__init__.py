from __future__ import annotations

from .users import error_detail, user_to_dict, workout_to_dict

__all__ = ["user_to_dict", "workout_to_dict", "error_detail"]
