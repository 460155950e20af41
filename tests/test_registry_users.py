from __future__ import annotations

import math

import pytest

from fittrack.core.errors import DuplicateUserError, UserNotFoundError, ValidationError
from fittrack.core.registry import FitnessRegistry


def test_add_user_then_get_user_returns_same_fields() -> None:
    reg = FitnessRegistry()

    added = reg.add_user("u1", "Alice", 30, 70.5, 165)
    got = reg.get_user("u1")

    assert got is not None
    assert got == added
    assert (got.id, got.name, got.age, got.weight, got.height) == ("u1", "Alice", 30, 70.5, 165)
    assert got.workouts == ()


def test_duplicate_id_is_rejected_and_existing_user_untouched() -> None:
    reg = FitnessRegistry()
    reg.add_user("u1", "Alice", 30, 70, 165)

    with pytest.raises(DuplicateUserError) as info:
        reg.add_user("u1", "Mallory", 99, 99, 99)

    assert info.value.user_id == "u1"
    user = reg.get_user("u1")
    assert user is not None
    assert user.name == "Alice"
    assert user.age == 30


@pytest.mark.parametrize("field", ["age", "weight", "height"])
@pytest.mark.parametrize("bad", [0, -1, -0.5, math.nan, math.inf])
def test_non_positive_numeric_fields_reject_add(field: str, bad: float) -> None:
    reg = FitnessRegistry()
    values = {"age": 30, "weight": 70, "height": 165}
    values[field] = bad

    with pytest.raises(ValidationError) as info:
        reg.add_user("u1", "Alice", values["age"], values["weight"], values["height"])

    assert info.value.field == field
    assert reg.get_user("u1") is None
    assert reg.get_users() == []


def test_non_numbers_are_validation_errors() -> None:
    reg = FitnessRegistry()

    with pytest.raises(ValidationError, match="age must be a number"):
        reg.add_user("u1", "Alice", "30", 70, 165)  # type: ignore[arg-type]
    with pytest.raises(ValidationError, match="weight must be a number"):
        reg.add_user("u1", "Alice", 30, True, 165)  # type: ignore[arg-type]
    with pytest.raises(ValidationError) as info:
        reg.add_user("", "Nobody", 30, 70, 165)
    assert info.value.field == "id"


def test_get_user_missing_returns_none() -> None:
    reg = FitnessRegistry()
    assert reg.get_user("missing") is None


def test_get_users_is_insertion_ordered_and_stable() -> None:
    reg = FitnessRegistry()
    reg.add_user("b", "Bob", 25, 80, 175)
    reg.add_user("a", "Alice", 30, 70, 165)
    reg.add_user("c", "Carol", 41, 60, 158)

    first = [u.id for u in reg.get_users()]
    second = [u.id for u in reg.get_users()]

    assert first == ["b", "a", "c"]
    assert first == second


def test_errors_keep_builtin_bases() -> None:
    assert issubclass(ValidationError, ValueError)
    assert issubclass(DuplicateUserError, ValueError)
    assert issubclass(UserNotFoundError, KeyError)
    assert str(UserNotFoundError("x")) == "User not found: 'x'"


def test_mutations_bump_global_revision() -> None:
    reg = FitnessRegistry()
    assert reg.global_revision() == 0

    reg.add_user("u1", "Alice", 30, 70, 165)
    assert reg.global_revision() == 1

    with pytest.raises(DuplicateUserError):
        reg.add_user("u1", "Alice", 30, 70, 165)
    assert reg.global_revision() == 1


def test_ids_must_fit_in_one_path_segment() -> None:
    reg = FitnessRegistry()

    for bad in ("x/y", "/", ".", ".."):
        with pytest.raises(ValidationError) as info:
            reg.add_user(bad, "Slash", 30, 70, 165)
        assert info.value.field == "id"
    assert reg.get_users() == []

    reg.add_user("a?b", "Query", 30, 70, 165)
    reg.add_user("a", "Plain", 30, 70, 165)
    assert reg.get_user("a?b").name == "Query"  # type: ignore[union-attr]
