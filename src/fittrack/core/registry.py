from __future__ import annotations

import math
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from .errors import DuplicateUserError, UserNotFoundError, ValidationError
from .models import User, UserPatch, Workout


class FitnessRegistry:
    """Owns every user and, through them, every logged workout.

    All public operations run under one re-entrant lock, so each of them is
    indivisible even when called from several server threads. Stored records
    are frozen dataclasses that get replaced on write; readers never see a
    half-applied update.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: dict[str, User] = {}
        self._global_revision = 0

    @staticmethod
    def _require_positive(field: str, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(field, value, reason="must be a number")
        if not math.isfinite(value):
            raise ValidationError(field, value, reason="must be a finite number")
        if value <= 0:
            raise ValidationError(field, value)
        return value

    @staticmethod
    def _require_text(field: str, value: Any, *, allow_empty: bool = True) -> str:
        if not isinstance(value, str):
            raise ValidationError(field, value, reason="must be a string")
        if not allow_empty and not value.strip():
            raise ValidationError(field, value, reason="must not be empty")
        return value

    @classmethod
    def _require_user_id(cls, value: Any) -> str:
        uid = cls._require_text("id", value, allow_empty=False)
        # Ids travel as a single URL path segment.
        if "/" in uid or uid in {".", ".."}:
            raise ValidationError("id", value, reason="must not contain '/' or be a dot segment")
        return uid

    def _require_user_locked(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def _bump_revision_locked(self) -> None:
        self._global_revision += 1

    def global_revision(self) -> int:
        with self._lock:
            return self._global_revision

    def add_user(self, user_id: str, name: str, age: float, weight: float, height: float) -> User:
        uid = self._require_user_id(user_id)
        with self._lock:
            if uid in self._users:
                raise DuplicateUserError(uid)
            user = User(
                id=uid,
                name=self._require_text("name", name),
                age=self._require_positive("age", age),
                weight=self._require_positive("weight", weight),
                height=self._require_positive("height", height),
            )
            self._users[uid] = user
            self._bump_revision_locked()
            return user

    def log_workout(self, user_id: str, workout: Workout) -> Workout:
        with self._lock:
            user = self._require_user_locked(user_id)
            self._require_text("type", workout.type, allow_empty=False)
            self._require_positive("duration", workout.duration)
            self._require_positive("calories_burned", workout.calories_burned)
            if workout.date is not None and not isinstance(workout.date, datetime):
                raise ValidationError("date", workout.date, reason="must be a datetime")
            if workout.date is None:
                workout = replace(workout, date=datetime.now(timezone.utc))
            self._users[user.id] = replace(user, workouts=user.workouts + (workout,))
            self._bump_revision_locked()
            return workout

    def get_all_workouts_of(self, user_id: str) -> tuple[Workout, ...]:
        with self._lock:
            return self._require_user_locked(user_id).workouts

    def get_all_workouts_by_type(self, user_id: str, workout_type: str) -> tuple[Workout, ...]:
        with self._lock:
            user = self._require_user_locked(user_id)
            return tuple(w for w in user.workouts if w.type == workout_type)

    def get_users(self) -> list[User]:
        with self._lock:
            return list(self._users.values())

    def get_user(self, user_id: str) -> User | None:
        with self._lock:
            return self._users.get(user_id)

    def update_user(self, user_id: str, patch: UserPatch) -> User:
        with self._lock:
            user = self._require_user_locked(user_id)
            changes = patch.supplied()

            # Check every supplied field before writing any of them.
            if "name" in changes:
                self._require_text("name", changes["name"])
            for field in ("age", "weight", "height"):
                if field in changes:
                    self._require_positive(field, changes[field])

            if not changes:
                return user
            updated = replace(user, **changes)
            self._users[user.id] = updated
            self._bump_revision_locked()
            return updated
