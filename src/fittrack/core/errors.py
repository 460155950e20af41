from __future__ import annotations

from typing import Any


class FitTrackError(Exception):
    """Base class for every failure the registry signals."""


class ValidationError(FitTrackError, ValueError):
    """A supplied field value was rejected.

    `field` names the offending field and `value` carries what was supplied.
    """

    def __init__(self, field: str, value: Any, reason: str = "must be a positive value") -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"{field} {reason}, got {value!r}")


class DuplicateUserError(FitTrackError, ValueError):
    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User with id {user_id!r} already exists")


class UserNotFoundError(FitTrackError, KeyError):
    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User not found: {user_id!r}")

    # KeyError wraps its message in quotes otherwise.
    def __str__(self) -> str:
        return str(self.args[0])
