from __future__ import annotations

import logging
from typing import Any

from fastapi import Body, FastAPI, HTTPException, Query

from ...core.errors import DuplicateUserError, UserNotFoundError, ValidationError
from ...core.registry import FitnessRegistry
from ..parsing import parse_patch_body, parse_user_body, parse_workout_body
from ..serializers import error_detail, user_to_dict, workout_to_dict

logger = logging.getLogger(__name__)


def _http_error(ex: Exception) -> HTTPException:
    if isinstance(ex, UserNotFoundError):
        status = 404
    elif isinstance(ex, DuplicateUserError):
        status = 409
    else:
        status = 400
    logger.warning("Rejected request (%d): %s", status, ex)
    return HTTPException(status_code=status, detail=error_detail(ex))


def mount_users_api(app: FastAPI, registry: FitnessRegistry) -> None:
    """Mount user and workout endpoints backed by `registry`."""

    @app.post("/api/users", status_code=201)
    def add_user(body: Any = Body(None)) -> dict[str, Any]:
        try:
            user_id, name, age, weight, height = parse_user_body(body)
            user = registry.add_user(user_id, name, age, weight, height)
        except (DuplicateUserError, ValidationError, ValueError) as ex:
            raise _http_error(ex) from ex
        logger.info("Added user %r", user.id)
        return user_to_dict(user)

    @app.get("/api/users")
    def list_users() -> list[dict[str, Any]]:
        return [user_to_dict(u) for u in registry.get_users()]

    @app.get("/api/users/{user_id}")
    def get_user(user_id: str) -> dict[str, Any]:
        user = registry.get_user(user_id)
        if user is None:
            raise HTTPException(status_code=404, detail=error_detail(UserNotFoundError(user_id)))
        return user_to_dict(user)

    @app.patch("/api/users/{user_id}")
    def update_user(user_id: str, body: Any = Body(None)) -> dict[str, Any]:
        try:
            patch = parse_patch_body(body)
            user = registry.update_user(user_id, patch)
        except (UserNotFoundError, ValidationError, ValueError) as ex:
            raise _http_error(ex) from ex
        logger.info("Updated user %r fields %s", user.id, sorted(patch.supplied()))
        return user_to_dict(user)

    @app.post("/api/users/{user_id}/workouts", status_code=201)
    def log_workout(user_id: str, body: Any = Body(None)) -> dict[str, Any]:
        try:
            workout = registry.log_workout(user_id, parse_workout_body(body))
        except (UserNotFoundError, ValidationError, ValueError) as ex:
            raise _http_error(ex) from ex
        logger.info("Logged %r workout for user %r", workout.type, user_id)
        return workout_to_dict(workout)

    @app.get("/api/users/{user_id}/workouts")
    def list_workouts(user_id: str, workout_type: str | None = Query(None, alias="type")) -> list[dict[str, Any]]:
        try:
            if workout_type is None:
                workouts = registry.get_all_workouts_of(user_id)
            else:
                workouts = registry.get_all_workouts_by_type(user_id, workout_type)
        except UserNotFoundError as ex:
            raise _http_error(ex) from ex
        return [workout_to_dict(w) for w in workouts]
