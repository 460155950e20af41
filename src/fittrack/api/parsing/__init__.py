from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any

from ...core.models import UserPatch, Workout

USER_FIELDS = ("id", "name", "age", "weight", "height")
WORKOUT_FIELDS = ("type", "duration", "caloriesBurned")


def _require_object(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise ValueError("Body must be a JSON object")
    return body


def _require_fields(body: Any, names: tuple[str, ...]) -> dict[str, Any]:
    body = _require_object(body)
    missing = [n for n in names if n not in body]
    if missing:
        raise ValueError(f"Missing field: {', '.join(missing)}")
    return body


def parse_date(value: Any) -> datetime | None:
    """Accept an ISO-8601 string or unix seconds. Naive values are taken as UTC."""

    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("Invalid date")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError("Invalid date")
        try:
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as ex:
            raise ValueError("Invalid date") from ex
    s = str(value).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(s)
    except ValueError as ex:
        raise ValueError("Invalid date") from ex
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_user_body(body: Any) -> tuple[str, Any, Any, Any, Any]:
    body = _require_fields(body, USER_FIELDS)
    return body["id"], body["name"], body["age"], body["weight"], body["height"]


def parse_workout_body(body: Any) -> Workout:
    body = _require_fields(body, WORKOUT_FIELDS)
    return Workout(
        type=body["type"],
        duration=body["duration"],
        calories_burned=body["caloriesBurned"],
        date=parse_date(body.get("date")),
    )


def parse_patch_body(body: Any) -> UserPatch:
    return UserPatch.from_mapping(_require_object(body))


__all__ = ["parse_date", "parse_user_body", "parse_workout_body", "parse_patch_body"]
