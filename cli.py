import argparse
import json

from config import APP_VERSION, configure_logging
from console_app import ConsoleApp
from presets import default_presets
from settings_schema import load_settings
from seed_sample_data import seed
from store import Store
from tracker_service import TrackerService, UserNotFoundError


def build_service(settings_path: str | None = None) -> TrackerService:
    settings = load_settings(settings_path)
    configure_logging(settings.log_level)
    return TrackerService(Store.from_settings(settings, default_presets()))


def _resolve_user_id(service: TrackerService, query: str) -> str:
    user = service.login(query)
    if user is None:
        raise UserNotFoundError(f"user {query} not found")
    return user.id


def list_users(service: TrackerService) -> None:
    users = service.list_users()
    if not users:
        print("No users registered.")
    for user in users:
        print(user)


def show_history(service: TrackerService, query: str, order: str) -> None:
    records = service.history(_resolve_user_id(service, query), order)
    if not records:
        print("No workout history for this user.")
    for record in records:
        print(record.full())


def show_recommendations(service: TrackerService, query: str) -> None:
    data = service.recommendations(_resolve_user_id(service, query))
    print(json.dumps(data, indent=2, ensure_ascii=False))


def show_presets(service: TrackerService) -> None:
    for day in service.presets():
        print(day.name)
        for ex in day.exercises:
            print(f"  - {ex} [{ex.group}, MET {ex.met}]")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Workout and calorie tracker")
    parser.add_argument("--settings", default=None, help="YAML settings file")
    parser.add_argument("--version", action="version", version=APP_VERSION)
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("menu")

    reg = sub.add_parser("register")
    reg.add_argument("--name", required=True)
    reg.add_argument("--gender", default="")
    reg.add_argument("--age", type=int, required=True)
    reg.add_argument("--height", type=float, required=True)
    reg.add_argument("--weight", type=float, required=True)

    sub.add_parser("users")

    hist = sub.add_parser("history")
    hist.add_argument("user", help="user id or name")
    hist.add_argument("--order", choices=["earliest", "latest", "calories"], default="earliest")

    rec = sub.add_parser("recommend")
    rec.add_argument("user", help="user id or name")

    sub.add_parser("records")
    sub.add_parser("presets")
    sub.add_parser("demo")

    args = parser.parse_args(argv)

    try:
        service = build_service(args.settings)
        if args.cmd == "menu":
            ConsoleApp(service).run()
        elif args.cmd == "register":
            user = service.register(args.name, args.gender, args.age, args.height, args.weight)
            print(user.id)
        elif args.cmd == "users":
            list_users(service)
        elif args.cmd == "history":
            show_history(service, args.user, args.order)
        elif args.cmd == "recommend":
            show_recommendations(service, args.user)
        elif args.cmd == "records":
            for record in service.all_records_latest_first():
                print(record.brief())
        elif args.cmd == "presets":
            show_presets(service)
        elif args.cmd == "demo":
            seed(service)
    except (LookupError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
