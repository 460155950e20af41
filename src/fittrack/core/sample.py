from __future__ import annotations

from .models import UserPatch, Workout
from .registry import FitnessRegistry


def seed_sample_data(registry: FitnessRegistry) -> None:
    """Populate `registry` with two demo users and a couple of workouts."""

    registry.add_user("1", "Alice", 30, 70, 165)
    registry.add_user("2", "Bob", 25, 80, 175)

    registry.log_workout("1", Workout(type="running", duration=30, calories_burned=300))
    registry.log_workout("1", Workout(type="yoga", duration=45, calories_burned=200))

    registry.update_user("1", UserPatch(age=31, weight=72))
