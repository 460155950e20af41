from __future__ import annotations

import math
from typing import Any

from ...core.errors import DuplicateUserError, UserNotFoundError, ValidationError
from ...core.models import User, Workout


def workout_to_dict(w: Workout) -> dict[str, Any]:
    return {
        "type": w.type,
        "duration": w.duration,
        "caloriesBurned": w.calories_burned,
        "date": w.date.isoformat() if w.date is not None else None,
    }


def user_to_dict(u: User) -> dict[str, Any]:
    return {
        "id": u.id,
        "name": u.name,
        "age": u.age,
        "weight": u.weight,
        "height": u.height,
        "workoutCount": u.workout_count,
        "workouts": [workout_to_dict(w) for w in u.workouts],
    }


def _json_safe(value: Any) -> Any:
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return repr(value)


def error_detail(ex: Exception) -> dict[str, Any]:
    if isinstance(ex, ValidationError):
        return {"message": str(ex), "field": ex.field, "value": _json_safe(ex.value), "reason": ex.reason}
    if isinstance(ex, (DuplicateUserError, UserNotFoundError)):
        return {"message": str(ex), "userId": ex.user_id}
    return {"message": str(ex)}
