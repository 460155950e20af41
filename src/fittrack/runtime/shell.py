from __future__ import annotations

import math
import sys
from typing import Protocol, TextIO

import httpx

from ..core.errors import FitTrackError
from ..core.models import User, UserPatch, Workout


class FitnessOps(Protocol):
    def add_user(self, user_id: str, name: str, age: float, weight: float, height: float) -> User: ...
    def log_workout(self, user_id: str, workout: Workout) -> Workout: ...
    def get_all_workouts_of(self, user_id: str) -> tuple[Workout, ...]: ...
    def get_all_workouts_by_type(self, user_id: str, workout_type: str) -> tuple[Workout, ...]: ...
    def get_users(self) -> list[User]: ...
    def get_user(self, user_id: str) -> User | None: ...
    def update_user(self, user_id: str, patch: UserPatch) -> User: ...


MENU = """
Fitness Tracker
1. Add user
2. Log workout
3. List workouts of a user
4. List workouts of a user by type
5. List all users
6. Show user
7. Update user
8. Exit"""


class _EndOfInput(Exception):
    pass


class _BadInput(Exception):
    pass


def format_workout(w: Workout) -> str:
    when = w.date.strftime("%Y-%m-%d %H:%M") if w.date is not None else "-"
    return f"{when}  {w.type}: {w.duration:g} min, {w.calories_burned:g} kcal"


def format_user(u: User) -> str:
    return (
        f"[{u.id}] {u.name}, age {u.age:g}, weight {u.weight:g} kg, height {u.height:g} cm, "
        f"{u.workout_count} workout(s)"
    )


class FitnessShell:
    """Numbered text menu over any object exposing the registry operations.

    Every failure the operations signal is printed as a message; the loop only
    ends on the exit choice or when input runs out.
    """

    def __init__(self, ops: FitnessOps, *, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self.ops = ops
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self._actions = {
            "1": self.add_user,
            "2": self.log_workout,
            "3": self.list_workouts,
            "4": self.list_workouts_by_type,
            "5": self.list_users,
            "6": self.show_user,
            "7": self.update_user,
        }

    def _print(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def _ask(self, prompt: str) -> str:
        self.stdout.write(f"{prompt}: ")
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise _EndOfInput()
        return line.strip()

    def _ask_number(self, prompt: str, *, optional: bool = False) -> float | None:
        raw = self._ask(prompt)
        if not raw and optional:
            return None
        try:
            value = float(raw)
        except ValueError:
            raise _BadInput(f"Invalid number for {prompt.lower()}: {raw!r}") from None
        if not math.isfinite(value):
            raise _BadInput(f"Invalid number for {prompt.lower()}: {raw!r}")
        return int(value) if value.is_integer() else value

    def run(self) -> None:
        while True:
            self._print(MENU)
            try:
                choice = self._ask("Choose an option")
            except _EndOfInput:
                self._print()
                return
            if choice == "8":
                self._print("Goodbye.")
                return
            action = self._actions.get(choice)
            if action is None:
                self._print(f"Unknown option: {choice!r}")
                continue
            try:
                action()
            except _EndOfInput:
                self._print()
                return
            except _BadInput as ex:
                self._print(str(ex))
            except FitTrackError as ex:
                self._print(f"Error: {ex}")
            except (RuntimeError, httpx.HTTPError) as ex:
                self._print(f"Request failed: {ex}")

    def add_user(self) -> None:
        user_id = self._ask("User ID")
        name = self._ask("Name")
        age = self._ask_number("Age")
        weight = self._ask_number("Weight (kg)")
        height = self._ask_number("Height (cm)")
        user = self.ops.add_user(user_id, name, age, weight, height)
        self._print(f"Added user {user.id}.")

    def log_workout(self) -> None:
        user_id = self._ask("User ID")
        workout_type = self._ask("Workout type")
        duration = self._ask_number("Duration (minutes)")
        calories = self._ask_number("Calories burned")
        self.ops.log_workout(user_id, Workout(type=workout_type, duration=duration, calories_burned=calories))
        self._print(f"Logged {workout_type} workout for user {user_id}.")

    def _print_workouts(self, workouts: tuple[Workout, ...]) -> None:
        if not workouts:
            self._print("No workouts found.")
            return
        for w in workouts:
            self._print(format_workout(w))

    def list_workouts(self) -> None:
        self._print_workouts(self.ops.get_all_workouts_of(self._ask("User ID")))

    def list_workouts_by_type(self) -> None:
        user_id = self._ask("User ID")
        workout_type = self._ask("Workout type")
        self._print_workouts(self.ops.get_all_workouts_by_type(user_id, workout_type))

    def list_users(self) -> None:
        users = self.ops.get_users()
        if not users:
            self._print("No users registered.")
        for u in users:
            self._print(format_user(u))

    def show_user(self) -> None:
        user_id = self._ask("User ID")
        user = self.ops.get_user(user_id)
        if user is None:
            self._print(f"No user with id {user_id!r}.")
            return
        self._print(format_user(user))
        for w in user.workouts:
            self._print("  " + format_workout(w))

    def update_user(self) -> None:
        user_id = self._ask("User ID")
        self._print("Leave a field empty to keep its current value.")
        name = self._ask("Name") or None
        patch = UserPatch(
            name=name,
            age=self._ask_number("Age", optional=True),
            weight=self._ask_number("Weight (kg)", optional=True),
            height=self._ask_number("Height (cm)", optional=True),
        )
        user = self.ops.update_user(user_id, patch)
        self._print(f"Updated user {user.id}.")
