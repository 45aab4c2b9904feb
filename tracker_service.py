from __future__ import annotations
import logging
from typing import Iterable, List, Optional

from algorithms import Estimator
from csv_codec import format_decimal, format_fixed
from models import ExerciseEntry, User, WorkoutDay, WorkoutRecord
from store import Store

logger = logging.getLogger(__name__)

HISTORY_ORDERS = ("earliest", "latest", "calories")


class UserNotFoundError(LookupError):
    """Raised when an operation names a user id that is not registered."""


class TrackerService:
    """Registration, session recording and recommendations over a ``Store``.

    Every method takes already validated primitive values and returns
    entities, plain data or display strings, so any front end can drive it.
    """

    def __init__(self, store: Store, estimator: type[Estimator] = Estimator) -> None:
        self.store = store
        self.estimator = estimator

    def _require_user(self, user_id: str) -> User:
        user = self.store.find_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"user {user_id} not found")
        return user

    def register(
        self,
        name: str,
        gender: str,
        age: int,
        height_cm: float,
        weight_kg: float,
    ) -> User:
        user = User.create(name.strip(), gender.strip(), age, height_cm, weight_kg)
        self.store.save_user(user)
        logger.info("Registered user %s", user.id)
        return user

    def login(self, query: str) -> Optional[User]:
        """Find a user by id or, failing that, by case-insensitive name."""
        query = query.strip()
        if not query:
            return None
        return self.store.find_user(query)

    def list_users(self) -> List[User]:
        return self.store.all_users()

    def presets(self) -> List[WorkoutDay]:
        return self.store.presets()

    def update_profile(
        self,
        user_id: str,
        weight_kg: float | None = None,
        height_cm: float | None = None,
        age: int | None = None,
    ) -> User:
        user = self._require_user(user_id)
        user.update_profile(weight_kg=weight_kg, height_cm=height_cm, age=age)
        self.store.save_user(user)
        return user

    def update_weight(self, user_id: str, weight_kg: float) -> User:
        return self.update_profile(user_id, weight_kg=weight_kg)

    def log_exercise(self, user: User, entry: ExerciseEntry) -> tuple[str, float]:
        """Return the summary line and calories for one exercise of a session."""
        exercise = entry.exercise
        if exercise.cardio:
            kcal = self.estimator.estimate_cardio_calories(
                exercise.met, user.weight_kg, entry.minutes
            )
            return f"{exercise.name}: {entry.minutes} min => {format_fixed(kcal)} kcal", kcal
        kcal = self.estimator.estimate_strength_calories(
            user.weight_kg, entry.sets, entry.reps
        )
        load = entry.load_kg
        if load is None:
            load = self.estimator.suggest_load_kg(user, exercise)
        summary = (
            f"{exercise.name}: {entry.sets}x{entry.reps} @ {format_decimal(load, 1)}kg"
            f" => {format_fixed(kcal)} kcal"
        )
        return summary, kcal

    def record_workout(
        self, user_id: str, day_name: str, entries: Iterable[ExerciseEntry]
    ) -> WorkoutRecord:
        """Compute and store a workout record for ``user_id``.

        The user's current body weight is snapshotted into the record.
        """
        user = self._require_user(user_id)
        summaries: list[str] = []
        total = 0.0
        for entry in entries:
            summary, kcal = self.log_exercise(user, entry)
            summaries.append(summary)
            total += kcal
        record = WorkoutRecord.create(
            user.id, user.name, day_name, summaries, total, user.weight_kg
        )
        self.store.append_record(record)
        logger.info("Recorded %s for user %s (%.2f kcal)", day_name, user.id, total)
        return record

    def history(self, user_id: str, order: str = "earliest") -> List[WorkoutRecord]:
        if order not in HISTORY_ORDERS:
            raise ValueError(f"order must be one of {', '.join(HISTORY_ORDERS)}")
        records = self.store.records_for_user(user_id)
        if order == "calories":
            return sorted(records, key=lambda r: r.total_calories, reverse=True)
        records = sorted(records, key=lambda r: r.timestamp)
        if order == "latest":
            records.reverse()
        return records

    def all_records_latest_first(self) -> List[WorkoutRecord]:
        records = sorted(self.store.all_records(), key=lambda r: r.timestamp)
        records.reverse()
        return records

    def progression_advice(self, user_id: str) -> str:
        user = self._require_user(user_id)
        return self.estimator.progression_advice(user, self.store.records_for_user(user_id))

    def recommendations(self, user_id: str) -> dict:
        """Suggested starting loads for every preset exercise plus advice."""
        user = self._require_user(user_id)
        loads = []
        for day in self.store.presets():
            loads.append(
                {
                    "day": day.name,
                    "exercises": [
                        {
                            "name": ex.name,
                            "suggested_kg": self.estimator.suggest_load_kg(user, ex),
                        }
                        for ex in day.exercises
                    ],
                }
            )
        return {
            "user": user.name,
            "loads": loads,
            "advice": self.estimator.progression_advice(
                user, self.store.records_for_user(user_id)
            ),
        }
