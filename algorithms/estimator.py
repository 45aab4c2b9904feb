from __future__ import annotations
from typing import Iterable

from csv_codec import format_decimal
from models import Exercise, User, WorkoutRecord
from .math_tools import MathTools


class Estimator(MathTools):
    """Heuristic calorie and load estimates derived from user state and history."""

    STRENGTH_MET: float = 6.0
    SECONDS_PER_REP: float = 3.0
    MIN_ACTIVE_MINUTES: float = 1.0
    BASELINE_FRACTION: float = 0.5
    LOAD_INCREMENT: float = 2.5
    DEFAULT_GROUP_FACTOR: float = 0.5
    WEIGHT_CHANGE_THRESHOLD: float = 2.0

    # first matching rule wins
    GROUP_FACTORS: tuple[tuple[tuple[str, ...], float], ...] = (
        (("legs",), 1.0),
        (("chest", "back"), 0.7),
        (("shoulder", "triceps", "biceps"), 0.35),
        (("core",), 0.15),
        (("cardio",), 0.1),
    )
    # (minimum age, factor), checked from the oldest band down
    AGE_BANDS: tuple[tuple[int, float], ...] = ((60, 0.75), (45, 0.85), (30, 0.95))

    NO_HISTORY = "No history yet — start with conservative loads and track sets/reps."
    NO_PREVIOUS_WEIGHT = "No previous weight recorded in history."
    GAINED = (
        "You gained {diff}kg since last workout — consider increasing loads "
        "gradually (~2.5-5% per week)."
    )
    LOST = (
        "You lost {diff}kg — reduce loads slightly and focus on technique "
        "and nutrition."
    )
    STABLE = (
        "Bodyweight stable — aim to progressively overload (add 1–2.5 kg to "
        "compound lifts every 1–2 weeks if form is good)."
    )

    @classmethod
    def estimate_cardio_calories(
        cls, met: float, weight_kg: float, minutes: int
    ) -> float:
        """Return ``met * weight * hours``, or 0 for a non-positive duration."""
        if minutes <= 0:
            return 0.0
        return met * weight_kg * cls.hours(minutes)

    @classmethod
    def estimate_strength_calories(cls, weight_kg: float, sets: int, reps: int) -> float:
        """Estimate strength calories from time under tension.

        Each rep counts as three seconds of work and the session as at least
        one minute. The load lifted does not enter the estimate.
        """
        active_seconds = sets * reps * cls.SECONDS_PER_REP
        minutes = max(cls.MIN_ACTIVE_MINUTES, cls.minutes(active_seconds))
        return cls.STRENGTH_MET * weight_kg * cls.hours(minutes)

    @classmethod
    def group_factor(cls, group: str) -> float:
        g = group.lower()
        for keywords, factor in cls.GROUP_FACTORS:
            if any(k in g for k in keywords):
                return factor
        return cls.DEFAULT_GROUP_FACTOR

    @classmethod
    def age_factor(cls, age: int) -> float:
        for minimum, factor in cls.AGE_BANDS:
            if age >= minimum:
                return factor
        return 1.0

    @classmethod
    def suggest_load_kg(cls, user: User, exercise: Exercise) -> float:
        """Suggest a starting load rounded to the nearest 2.5 kg."""
        base = user.weight_kg * cls.BASELINE_FRACTION
        suggested = base * cls.group_factor(exercise.group) * cls.age_factor(user.age)
        return cls.round_half_up(suggested, cls.LOAD_INCREMENT)

    @classmethod
    def progression_advice(cls, user: User, history: Iterable[WorkoutRecord]) -> str:
        """Compare current body weight with the weight at the latest workout."""
        ordered = sorted(history, key=lambda r: r.timestamp)
        if not ordered:
            return cls.NO_HISTORY
        last_weight = ordered[-1].user_weight
        if last_weight <= 0:
            return cls.NO_PREVIOUS_WEIGHT
        diff = user.weight_kg - last_weight
        if diff >= cls.WEIGHT_CHANGE_THRESHOLD:
            return cls.GAINED.format(diff=format_decimal(diff, 1))
        if diff <= -cls.WEIGHT_CHANGE_THRESHOLD:
            return cls.LOST.format(diff=format_decimal(-diff, 1))
        return cls.STABLE
