from __future__ import annotations
import datetime
import re
import uuid
from typing import Iterable, List, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from csv_codec import (
    ParseError,
    decode_row,
    encode_row,
    format_decimal,
    format_fixed,
    format_float,
    format_timestamp,
    parse_float,
    parse_int,
    parse_timestamp,
    require_columns,
)

USER_HEADER = ["id", "name", "gender", "age", "heightCm", "weightKg", "createdAt"]
WORKOUT_HEADER = [
    "recordId",
    "userId",
    "userName",
    "workoutDay",
    "exercises",
    "totalCalories",
    "userWeight",
    "timestamp",
]
SUMMARY_SEPARATOR = "||"
DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M"

_KCAL_RE = re.compile(r"=>\s*(-?\d+(?:\.\d+)?)\s*kcal\s*$")


class ValidationError(ValueError):
    """Raised when input values cannot form a valid entity."""


def _describe(error: pydantic.ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


def _now() -> datetime.datetime:
    return datetime.datetime.now()


def _new_id() -> str:
    return str(uuid.uuid4())


class User(BaseModel):
    """Registered person whose workouts are tracked."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(frozen=True, min_length=1)
    name: str = Field(frozen=True)
    gender: str = Field(default="", frozen=True)
    age: int = Field(ge=0)
    height_cm: float = Field(gt=0)
    weight_kg: float = Field(gt=0)
    created_at: datetime.datetime = Field(frozen=True)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name must not be empty")
        return value

    @classmethod
    def create(
        cls,
        name: str,
        gender: str,
        age: int,
        height_cm: float,
        weight_kg: float,
    ) -> "User":
        """Return a new user with a fresh id and the current time."""
        try:
            return cls(
                id=_new_id(),
                name=name,
                gender=gender,
                age=age,
                height_cm=height_cm,
                weight_kg=weight_kg,
                created_at=_now(),
            )
        except pydantic.ValidationError as e:
            raise ValidationError(_describe(e)) from e

    @classmethod
    def from_row(cls, line: str) -> Optional["User"]:
        """Rebuild a stored user, or return ``None`` if the row is malformed."""
        cols = decode_row(line)
        try:
            require_columns(cols, len(USER_HEADER))
            return cls(
                id=cols[0],
                name=cols[1],
                gender=cols[2],
                age=parse_int(cols[3]),
                height_cm=parse_float(cols[4]),
                weight_kg=parse_float(cols[5]),
                created_at=parse_timestamp(cols[6]),
            )
        except (ParseError, pydantic.ValidationError):
            return None

    def to_row(self) -> str:
        return encode_row(
            [
                self.id,
                self.name,
                self.gender,
                str(self.age),
                format_float(self.height_cm),
                format_float(self.weight_kg),
                format_timestamp(self.created_at),
            ]
        )

    def update_profile(
        self,
        weight_kg: float | None = None,
        height_cm: float | None = None,
        age: int | None = None,
    ) -> None:
        """Apply the given changes atomically; nothing changes if any is invalid."""
        changes: dict = {}
        if weight_kg is not None:
            changes["weight_kg"] = weight_kg
        if height_cm is not None:
            changes["height_cm"] = height_cm
        if age is not None:
            changes["age"] = age
        if not changes:
            return
        try:
            checked = User.model_validate({**self.model_dump(), **changes})
        except pydantic.ValidationError as e:
            raise ValidationError(_describe(e)) from e
        for key in changes:
            setattr(self, key, getattr(checked, key))

    def __str__(self) -> str:
        return (
            f"{self.name} ({self.gender}) ID:{self.id[:8]} Age:{self.age} "
            f"Height:{format_decimal(self.height_cm, 1)}cm Weight:{format_decimal(self.weight_kg, 1)}kg"
        )


class Exercise(BaseModel):
    """A single movement with its muscle group and MET intensity."""

    model_config = ConfigDict(frozen=True)

    name: str
    group: str
    cardio: bool = False
    met: float = Field(gt=0)

    @classmethod
    def from_text(cls, text: str) -> "Exercise":
        """Parse the ``name|group|cardio|met`` form used for custom days."""
        parts = text.split("|")
        if len(parts) < 4:
            raise ValidationError("expected name|group|cardio|met")
        cardio = parts[2].strip().lower() == "true"
        try:
            met = float(parts[3].strip())
        except ValueError:
            met = 7.0 if cardio else 5.0
        try:
            return cls(
                name=parts[0].strip(),
                group=parts[1].strip(),
                cardio=cardio,
                met=met,
            )
        except pydantic.ValidationError as e:
            raise ValidationError(_describe(e)) from e

    def __str__(self) -> str:
        return self.name + (" (cardio)" if self.cardio else "")


class WorkoutDay:
    """Named, ordered list of exercises performed in one session."""

    def __init__(self, name: str, exercises: Iterable[Exercise] = ()) -> None:
        self.name = name
        self.exercises: List[Exercise] = list(exercises)

    @classmethod
    def custom(cls, name: str) -> "WorkoutDay":
        name = name.strip()
        return cls(name or "Custom")

    def add(self, exercise: Exercise) -> None:
        self.exercises.append(exercise)

    def __repr__(self) -> str:
        return f"WorkoutDay({self.name!r}, {len(self.exercises)} exercises)"


class ExerciseEntry(BaseModel):
    """What the user reported for one exercise of a session."""

    model_config = ConfigDict(frozen=True)

    exercise: Exercise
    sets: int = Field(default=0, ge=0)
    reps: int = Field(default=0, ge=0)
    load_kg: Optional[float] = Field(default=None, ge=0)
    minutes: int = 0

    @classmethod
    def strength(
        cls, exercise: Exercise, sets: int, reps: int, load_kg: float | None = None
    ) -> "ExerciseEntry":
        try:
            return cls(exercise=exercise, sets=sets, reps=reps, load_kg=load_kg)
        except pydantic.ValidationError as e:
            raise ValidationError(_describe(e)) from e

    @classmethod
    def cardio(cls, exercise: Exercise, minutes: int) -> "ExerciseEntry":
        try:
            return cls(exercise=exercise, minutes=minutes)
        except pydantic.ValidationError as e:
            raise ValidationError(_describe(e)) from e


def summary_kcal(summary: str) -> float:
    """Return the calorie component rendered at the end of a summary string."""
    match = _KCAL_RE.search(summary)
    if match is None:
        raise ValueError(f"no calorie value in summary: {summary!r}")
    return float(match.group(1))


class WorkoutRecord(BaseModel):
    """Immutable result of one completed workout session."""

    model_config = ConfigDict(frozen=True)

    record_id: str
    user_id: str
    user_name: str
    workout_day: str
    exercises: tuple[str, ...] = ()
    total_calories: float
    user_weight: float
    timestamp: datetime.datetime

    @classmethod
    def create(
        cls,
        user_id: str,
        user_name: str,
        workout_day: str,
        exercises: Iterable[str],
        total_calories: float,
        user_weight: float,
    ) -> "WorkoutRecord":
        return cls(
            record_id=_new_id(),
            user_id=user_id,
            user_name=user_name,
            workout_day=workout_day,
            exercises=tuple(exercises),
            total_calories=total_calories,
            user_weight=user_weight,
            timestamp=_now(),
        )

    @classmethod
    def from_row(cls, line: str) -> Optional["WorkoutRecord"]:
        """Rebuild a stored record keeping its id and timestamp.

        Returns ``None`` if the row is malformed.
        """
        cols = decode_row(line)
        try:
            require_columns(cols, len(WORKOUT_HEADER))
            joined = cols[4]
            return cls(
                record_id=cols[0],
                user_id=cols[1],
                user_name=cols[2],
                workout_day=cols[3],
                exercises=tuple(joined.split(SUMMARY_SEPARATOR)) if joined else (),
                total_calories=parse_float(cols[5]),
                user_weight=parse_float(cols[6]),
                timestamp=parse_timestamp(cols[7]),
            )
        except (ParseError, pydantic.ValidationError):
            return None

    def to_row(self) -> str:
        return encode_row(
            [
                self.record_id,
                self.user_id,
                self.user_name,
                self.workout_day,
                SUMMARY_SEPARATOR.join(self.exercises),
                format_fixed(self.total_calories),
                format_fixed(self.user_weight),
                format_timestamp(self.timestamp),
            ]
        )

    def summary_calories(self) -> float:
        return sum(summary_kcal(s) for s in self.exercises)

    def brief(self) -> str:
        return (
            f"{self.user_name} | {self.workout_day} | {format_fixed(self.total_calories)} kcal"
            f" | {self.timestamp.strftime(DISPLAY_TIME_FORMAT)}"
        )

    def full(self) -> str:
        lines = [
            f"User: {self.user_name} ({self.user_id})",
            f"Workout Day: {self.workout_day}",
            f"When: {self.timestamp.strftime(DISPLAY_TIME_FORMAT)}",
            f"Weight at time: {format_fixed(self.user_weight)} kg",
            "Exercises:",
        ]
        lines.extend(f" - {s}" for s in self.exercises)
        lines.append(f"Total calories: {format_fixed(self.total_calories)}")
        return "\n".join(lines) + "\n"
