from models import ExerciseEntry
from tracker_service import TrackerService


def seed(service: TrackerService) -> bool:
    """Add a demo user with one logged session if no users exist."""
    if service.list_users():
        print("Store already contains users")
        return False

    user = service.register("Demo", "Other", 30, 175.0, 75.0)
    day = service.presets()[0]
    entries = [ExerciseEntry.strength(ex, 3, 10) for ex in day.exercises if not ex.cardio]
    service.record_workout(user.id, day.name, entries)
    print("Seed data inserted")
    return True


if __name__ == "__main__":
    from cli import build_service

    seed(build_service())
