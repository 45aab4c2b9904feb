from typing import List

from models import Exercise, WorkoutDay


_PRESETS = [
    (
        "Chest & Triceps Day",
        [
            ("Incline Bench Press (Barbell/Dumbbell)", "chest", False, 6.5),
            ("Flat Bench Press", "chest", False, 6.3),
            ("Dumbbell Fly (Flat/Incline)", "chest", False, 5.2),
            ("Triceps Pushdown", "triceps", False, 4.8),
        ],
    ),
    (
        "Back & Biceps Day",
        [
            ("Pull-Ups / Assisted Pull-Ups", "back", False, 7.0),
            ("Barbell Row", "back", False, 6.2),
            ("Seated Cable Row", "back", False, 6.0),
            ("Barbell Curl", "biceps", False, 4.3),
        ],
    ),
    (
        "Legs & Shoulders Day",
        [
            ("Squats (Back/Front)", "legs", False, 8.0),
            ("Leg Press", "legs", False, 6.5),
            ("Romanian Deadlift", "legs", False, 7.0),
            ("Overhead Press", "shoulders", False, 6.0),
        ],
    ),
    (
        "Abs & Core Day",
        [
            ("Plank (seconds-based)", "core", False, 3.5),
            ("Hanging Leg Raise", "core", False, 4.2),
            ("Russian Twist", "core", False, 4.0),
            ("Jump Rope (cardio)", "cardio", True, 10.0),
        ],
    ),
    (
        "Cardio / Mixed",
        [
            ("Running (moderate)", "cardio", True, 9.8),
            ("Cycling (moderate)", "cardio", True, 7.5),
        ],
    ),
]


def default_presets() -> List[WorkoutDay]:
    """Return fresh copies of the built-in workout day templates."""
    return [
        WorkoutDay(
            name,
            [
                Exercise(name=ex_name, group=group, cardio=cardio, met=met)
                for ex_name, group, cardio, met in exercises
            ],
        )
        for name, exercises in _PRESETS
    ]
