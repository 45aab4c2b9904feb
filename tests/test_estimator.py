import os
import sys
import datetime
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from algorithms import Estimator, MathTools
from models import Exercise, User, WorkoutRecord


def make_user(weight: float = 70.0, age: int = 25) -> User:
    return User.create("Test", "F", age, 170.0, weight)


def make_record(weight: float, when: datetime.datetime) -> WorkoutRecord:
    return WorkoutRecord(
        record_id=f"r-{when.isoformat()}",
        user_id="u1",
        user_name="Test",
        workout_day="Day",
        exercises=(),
        total_calories=0.0,
        user_weight=weight,
        timestamp=when,
    )


class MathToolsTestCase(unittest.TestCase):
    def test_round_half_up(self) -> None:
        self.assertEqual(MathTools.round_half_up(3.9375, 2.5), 5.0)
        self.assertEqual(MathTools.round_half_up(3.75, 2.5), 5.0)
        self.assertEqual(MathTools.round_half_up(1.25, 2.5), 2.5)
        self.assertEqual(MathTools.round_half_up(1.2, 2.5), 0.0)
        with self.assertRaises(ValueError):
            MathTools.round_half_up(1.0, 0)

    def test_time_conversions(self) -> None:
        self.assertAlmostEqual(MathTools.hours(30), 0.5)
        self.assertAlmostEqual(MathTools.minutes(1200), 20.0)


class CalorieEstimateTestCase(unittest.TestCase):
    def test_cardio(self) -> None:
        # 10 MET * 70 kg * 0.5 h
        self.assertAlmostEqual(Estimator.estimate_cardio_calories(10, 70, 30), 350.0)
        self.assertAlmostEqual(Estimator.estimate_cardio_calories(9.8, 60, 30), 294.0)

    def test_cardio_non_positive_minutes(self) -> None:
        self.assertEqual(Estimator.estimate_cardio_calories(10, 70, 0), 0.0)
        self.assertEqual(Estimator.estimate_cardio_calories(10, 70, -5), 0.0)

    def test_strength(self) -> None:
        # 4 * 100 * 3 s = 1200 s = 20 min
        self.assertAlmostEqual(Estimator.estimate_strength_calories(80, 4, 100), 320.0)
        # 4 * 10 * 3 s = 120 s = 2 min
        self.assertAlmostEqual(Estimator.estimate_strength_calories(80, 4, 10), 16.0)

    def test_strength_floors_active_time(self) -> None:
        self.assertAlmostEqual(Estimator.estimate_strength_calories(60, 1, 5), 6.0)
        self.assertAlmostEqual(Estimator.estimate_strength_calories(60, 0, 0), 6.0)


class SuggestLoadTestCase(unittest.TestCase):
    def test_legs_young(self) -> None:
        ex = Exercise(name="Squat", group="legs", met=8.0)
        self.assertEqual(Estimator.suggest_load_kg(make_user(70, 25), ex), 35.0)

    def test_core_senior(self) -> None:
        ex = Exercise(name="Plank", group="core", met=3.5)
        self.assertEqual(Estimator.suggest_load_kg(make_user(70, 65), ex), 5.0)

    def test_shoulders_middle_age(self) -> None:
        ex = Exercise(name="Overhead Press", group="Shoulders", met=6.0)
        # 40 * 0.35 * 0.85 = 11.9
        self.assertEqual(Estimator.suggest_load_kg(make_user(80, 50), ex), 12.5)

    def test_group_priority_and_default(self) -> None:
        self.assertEqual(Estimator.group_factor("Upper BACK / biceps"), 0.7)
        self.assertEqual(Estimator.group_factor("legs and core"), 1.0)
        self.assertEqual(Estimator.group_factor("cardio"), 0.1)
        self.assertEqual(Estimator.group_factor("glutes"), 0.5)
        ex = Exercise(name="Hip Thrust", group="glutes", met=5.0)
        self.assertEqual(Estimator.suggest_load_kg(make_user(70, 25), ex), 17.5)

    def test_age_bands(self) -> None:
        self.assertEqual(Estimator.age_factor(29), 1.0)
        self.assertEqual(Estimator.age_factor(30), 0.95)
        self.assertEqual(Estimator.age_factor(45), 0.85)
        self.assertEqual(Estimator.age_factor(60), 0.75)
        self.assertEqual(Estimator.age_factor(90), 0.75)


class ProgressionAdviceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.t0 = datetime.datetime(2024, 1, 1, 8, 0)

    def test_no_history(self) -> None:
        self.assertEqual(
            Estimator.progression_advice(make_user(), []),
            "No history yet — start with conservative loads and track sets/reps.",
        )

    def test_gain(self) -> None:
        advice = Estimator.progression_advice(make_user(73.0), [make_record(70.0, self.t0)])
        self.assertEqual(
            advice,
            "You gained 3.0kg since last workout — consider increasing loads "
            "gradually (~2.5-5% per week).",
        )

    def test_gain_threshold_inclusive(self) -> None:
        advice = Estimator.progression_advice(make_user(72.0), [make_record(70.0, self.t0)])
        self.assertTrue(advice.startswith("You gained 2.0kg"))

    def test_change_rounds_ties_up(self) -> None:
        gained = Estimator.progression_advice(make_user(72.25), [make_record(70.0, self.t0)])
        self.assertTrue(gained.startswith("You gained 2.3kg since last workout"))
        lost = Estimator.progression_advice(make_user(67.75), [make_record(70.0, self.t0)])
        self.assertTrue(lost.startswith("You lost 2.3kg"))

    def test_loss(self) -> None:
        advice = Estimator.progression_advice(make_user(65.0), [make_record(70.0, self.t0)])
        self.assertEqual(
            advice,
            "You lost 5.0kg — reduce loads slightly and focus on technique and nutrition.",
        )

    def test_stable(self) -> None:
        advice = Estimator.progression_advice(make_user(71.5), [make_record(70.0, self.t0)])
        self.assertTrue(advice.startswith("Bodyweight stable"))

    def test_uses_latest_timestamp_not_list_order(self) -> None:
        newer = make_record(73.0, self.t0 + datetime.timedelta(days=2))
        older = make_record(60.0, self.t0)
        advice = Estimator.progression_advice(make_user(73.0), [newer, older])
        self.assertTrue(advice.startswith("Bodyweight stable"))

    def test_missing_weight(self) -> None:
        advice = Estimator.progression_advice(make_user(), [make_record(0.0, self.t0)])
        self.assertEqual(advice, "No previous weight recorded in history.")


if __name__ == "__main__":
    unittest.main()
