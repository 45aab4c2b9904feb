from __future__ import annotations
import logging
from typing import Callable

from csv_codec import format_decimal, format_fixed
from models import Exercise, ExerciseEntry, User, ValidationError, WorkoutDay
from tracker_service import TrackerService

logger = logging.getLogger(__name__)

TITLE = "=== Calories Burned & Workout Planner ==="


class ConsoleApp:
    """Interactive prompt-driven front end for ``TrackerService``."""

    def __init__(
        self,
        service: TrackerService,
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
    ) -> None:
        self.service = service
        self._input = input_func
        self.out = output_func

    def ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def run(self) -> None:
        self.out(TITLE)
        running = True
        while running:
            try:
                self.out("\nMain Menu:")
                self.out("1) Register new user")
                self.out("2) Login as existing user (by ID or name)")
                self.out("3) List all users")
                self.out("4) View all workout records (admin)")
                self.out("5) Exit")
                opt = self.ask("Select option: ")
                if opt == "1":
                    self.register_user()
                elif opt == "2":
                    self.login_user()
                elif opt == "3":
                    self.list_users()
                elif opt == "4":
                    self.view_all_records()
                elif opt == "5":
                    running = False
                else:
                    self.out("Invalid option.")
            except EOFError:
                running = False
            except Exception as e:
                logger.exception("Unhandled error in main menu")
                self.out(f"Unhandled error: {e}")
        self.out("Goodbye!")

    def register_user(self) -> User | None:
        name = self.ask("Enter name: ")
        if not name:
            self.out("Name required.")
            return None
        try:
            gender = self.ask("Enter gender (M/F/Other): ")
            age = int(self.ask("Enter age (years): "))
            height = float(self.ask("Enter height (cm): "))
            weight = float(self.ask("Enter weight (kg): "))
            user = self.service.register(name, gender, age, height, weight)
        except ValidationError as e:
            self.out(f"Invalid input: {e}. Registration cancelled.")
            return None
        except ValueError:
            self.out("Invalid numeric input. Registration cancelled.")
            return None
        self.out(f"User created: {user}")
        self.out(f"Your user ID (save this): {user.id}")
        return user

    def login_user(self) -> None:
        user = self.service.login(self.ask("Enter user ID or name: "))
        if user is None:
            self.out("User not found.")
            return
        self.out(f"Welcome {user.name}!")
        self.user_menu(user)

    def list_users(self) -> None:
        users = self.service.list_users()
        if not users:
            self.out("No users registered.")
            return
        self.out("Registered users:")
        for user in users:
            self.out(f" - {user}")

    def view_all_records(self) -> None:
        records = self.service.all_records_latest_first()
        if not records:
            self.out("No workout records.")
            return
        self.out("All workout records (latest first):")
        for record in records:
            self.out(f" - {record.brief()}")

    def user_menu(self, user: User) -> None:
        back = False
        while not back:
            try:
                self.out(f"\nUser Menu for {user.name} ({user.id[:8]})")
                self.out("1) Start a workout (pick preset or custom)")
                self.out("2) View my workout history")
                self.out("3) Update my weight/height/age")
                self.out("4) Get recommendations & progression advice")
                self.out("5) Back to main menu")
                choice = self.ask("Choice: ")
                if choice == "1":
                    self.start_workout(user)
                elif choice == "2":
                    self.view_history(user)
                elif choice == "3":
                    self.update_profile(user)
                elif choice == "4":
                    self.show_recommendations(user)
                elif choice == "5":
                    back = True
                else:
                    self.out("Invalid choice.")
            except EOFError:
                raise
            except Exception as e:
                logger.exception("Unhandled error in user menu")
                self.out(f"Error: {e}")

    def _choose_day(self) -> WorkoutDay:
        presets = self.service.presets()
        self.out("\nChoose workout day preset (or 0 for custom):")
        for i, day in enumerate(presets, start=1):
            self.out(f"{i}) {day.name}")
        choice = int(self.ask("Choice: "))
        if 1 <= choice <= len(presets):
            return presets[choice - 1]
        day = WorkoutDay.custom(self.ask("Enter custom workout day name: "))
        self.out(
            "Add exercises (type 'done' to finish). Format: name|group|cardio(true/false)|metValue"
        )
        while True:
            line = self.ask("Exercise: ")
            if line.lower() == "done":
                break
            try:
                day.add(Exercise.from_text(line))
            except ValidationError:
                self.out("Invalid format, try again.")
        return day

    def _ask_entry(self, user: User, exercise: Exercise) -> ExerciseEntry:
        if exercise.cardio:
            minutes = int(self.ask("Enter duration in minutes (int): "))
            return ExerciseEntry.cardio(exercise, minutes)
        sets = int(self.ask("Enter sets : "))
        reps = int(self.ask("Enter reps per set : "))
        suggested = self.service.estimator.suggest_load_kg(user, exercise)
        self.out(f"Suggested starting load: {format_decimal(suggested, 1)} kg (heuristic)")
        raw = self.ask("Enter load used (kg) or press Enter to use suggested: ")
        load = suggested
        if raw:
            try:
                load = float(raw)
            except ValueError:
                load = suggested
        return ExerciseEntry.strength(exercise, sets, reps, load)

    def start_workout(self, user: User) -> None:
        try:
            day = self._choose_day()
            self.out(f"\nStarting workout: {day.name}")
            entries = []
            for exercise in day.exercises:
                self.out(f"\nExercise: {exercise.name}")
                entry = self._ask_entry(user, exercise)
                _summary, kcal = self.service.log_exercise(user, entry)
                self.out(f"Calories estimated: {format_fixed(kcal)}")
                entries.append(entry)
            record = self.service.record_workout(user.id, day.name, entries)
            self.out(f"\nWorkout saved! Total estimated calories: {format_fixed(record.total_calories)}")
            if self.ask("Update weight now? (y/n): ").lower() == "y":
                weight = float(self.ask("Enter new weight (kg): "))
                self.service.update_weight(user.id, weight)
                self.out("Weight updated and saved.")
        except ValidationError as e:
            self.out(f"Invalid input: {e}. Workout cancelled.")
        except ValueError:
            self.out("Input must be numeric where requested. Workout cancelled.")

    def view_history(self, user: User) -> None:
        if not self.service.history(user.id):
            self.out("No workout history for this user.")
            return
        self.out("History options:")
        self.out("1) Show latest first")
        self.out("2) Show earliest first")
        self.out("3) Sort by calories (desc)")
        choice = self.ask("Choice: ")
        order = {"1": "latest", "3": "calories"}.get(choice, "earliest")
        self.out("\n--- Workout History ---")
        for idx, record in enumerate(self.service.history(user.id, order), start=1):
            self.out(f"\n[{idx}] {record.brief()}")
            self.out(record.full())

    def _optional(self, prompt: str, parse):
        raw = self.ask(prompt)
        return parse(raw) if raw else None

    def update_profile(self, user: User) -> None:
        self.out(f"Current profile: {user}")
        try:
            weight = self._optional("New weight (kg) or press Enter to skip: ", float)
            height = self._optional("New height (cm) or press Enter to skip: ", float)
            age = self._optional("New age or press Enter to skip: ", int)
            self.service.update_profile(user.id, weight_kg=weight, height_cm=height, age=age)
        except ValidationError as e:
            self.out(f"Invalid input: {e}. Update aborted.")
            return
        except ValueError:
            self.out("Invalid numeric input. Update aborted.")
            return
        self.out("Profile updated and saved.")

    def show_recommendations(self, user: User) -> None:
        data = self.service.recommendations(user.id)
        self.out(f"\nRecommendations for {data['user']}")
        self.out("Suggested loads for preset exercises:")
        for day in data["loads"]:
            self.out(f"\n{day['day']}:")
            for ex in day["exercises"]:
                self.out(f" - {ex['name']} : suggested start load {format_decimal(ex['suggested_kg'], 1)} kg")
        self.out(f"\nProgression advice: {data['advice']}")
