from __future__ import annotations

from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx

from ..core.errors import DuplicateUserError, UserNotFoundError, ValidationError
from ..core.models import User, UserPatch, Workout


def _parse_date(value: Any) -> datetime | None:
    if value is None:
        return None
    s = str(value)
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return datetime.fromisoformat(s)


def workout_from_dict(data: dict[str, Any]) -> Workout:
    return Workout(
        type=str(data["type"]),
        duration=data["duration"],
        calories_burned=data["caloriesBurned"],
        date=_parse_date(data.get("date")),
    )


def user_from_dict(data: dict[str, Any]) -> User:
    return User(
        id=str(data["id"]),
        name=str(data["name"]),
        age=data["age"],
        weight=data["weight"],
        height=data["height"],
        workouts=tuple(workout_from_dict(w) for w in data.get("workouts") or ()),
    )


def workout_to_body(workout: Workout) -> dict[str, Any]:
    body: dict[str, Any] = {
        "type": workout.type,
        "duration": workout.duration,
        "caloriesBurned": workout.calories_burned,
    }
    if workout.date is not None:
        body["date"] = workout.date.isoformat()
    return body


def _user_path(user_id: str, *rest: str) -> str:
    return "/".join(("/api/users", quote(str(user_id), safe=""), *rest))


def _raise_for_response(res: httpx.Response, action: str, *, user_id: str | None = None) -> None:
    """Re-raise server-side failures as the registry's own error types."""

    if res.status_code < 400:
        return

    detail: Any = None
    try:
        body = res.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("detail")

    if isinstance(detail, dict):
        if res.status_code == 404 and "userId" in detail:
            raise UserNotFoundError(str(detail["userId"]))
        if res.status_code == 409 and "userId" in detail:
            raise DuplicateUserError(str(detail["userId"]))
        if res.status_code == 400:
            if "field" in detail:
                raise ValidationError(str(detail["field"]), detail.get("value"), reason=str(detail.get("reason") or "is invalid"))
            raise ValueError(str(detail.get("message") or res.text))

    # An id that cannot be routed never reaches a user handler.
    if res.status_code == 404 and user_id is not None:
        raise UserNotFoundError(user_id)

    raise RuntimeError(f"Failed to {action}: {res.status_code} {res.text}")


class FitTrackClient:
    """HTTP client for a running fittrack server.

    Method names and return types match `FitnessRegistry`, so code written
    against a local registry works unchanged against a remote one.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8000", *, timeout_s: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout_s)

    def add_user(self, user_id: str, name: str, age: float, weight: float, height: float) -> User:
        body = {"id": user_id, "name": name, "age": age, "weight": weight, "height": height}
        with self._client() as client:
            res = client.post("/api/users", json=body)
            _raise_for_response(res, "add user")
            return user_from_dict(res.json())

    def log_workout(self, user_id: str, workout: Workout) -> Workout:
        with self._client() as client:
            res = client.post(_user_path(user_id, "workouts"), json=workout_to_body(workout))
            _raise_for_response(res, "log workout", user_id=user_id)
            return workout_from_dict(res.json())

    def get_all_workouts_of(self, user_id: str) -> tuple[Workout, ...]:
        with self._client() as client:
            res = client.get(_user_path(user_id, "workouts"))
            _raise_for_response(res, "list workouts", user_id=user_id)
            return tuple(workout_from_dict(w) for w in res.json())

    def get_all_workouts_by_type(self, user_id: str, workout_type: str) -> tuple[Workout, ...]:
        with self._client() as client:
            res = client.get(_user_path(user_id, "workouts"), params={"type": workout_type})
            _raise_for_response(res, "list workouts", user_id=user_id)
            return tuple(workout_from_dict(w) for w in res.json())

    def get_users(self) -> list[User]:
        with self._client() as client:
            res = client.get("/api/users")
            _raise_for_response(res, "list users")
            return [user_from_dict(u) for u in res.json()]

    def get_user(self, user_id: str) -> User | None:
        with self._client() as client:
            res = client.get(_user_path(user_id))
            if res.status_code == 404:
                return None
            _raise_for_response(res, "get user")
            return user_from_dict(res.json())

    def update_user(self, user_id: str, patch: UserPatch) -> User:
        with self._client() as client:
            res = client.patch(_user_path(user_id), json=patch.supplied())
            _raise_for_response(res, "update user", user_id=user_id)
            return user_from_dict(res.json())

    def global_revision(self) -> int:
        with self._client() as client:
            res = client.get("/api/events")
            _raise_for_response(res, "poll events")
            return int(res.json()["globalRevision"])
