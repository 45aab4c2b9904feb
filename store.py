from __future__ import annotations
import logging
import os
import threading
from typing import Callable, Iterator, List, Optional, Sequence

from csv_codec import encode_row
from models import USER_HEADER, WORKOUT_HEADER, User, WorkoutDay, WorkoutRecord

logger = logging.getLogger(__name__)


class CsvLog:
    """Append-only UTF-8 text file holding one encoded row per line."""

    def __init__(self, path: str, header: Sequence[str]) -> None:
        self.path = path
        self.header_line = encode_row(header)
        self._needs_newline = False

    def _open(self, mode: str):
        return open(self.path, mode, encoding="utf-8", newline="")

    def ensure_exists(self) -> bool:
        """Create the file with only its header row if it is missing.

        Returns ``True`` if the file was already present.
        """
        if os.path.exists(self.path):
            return True
        try:
            parent = os.path.dirname(self.path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with self._open("x") as f:
                f.write(self.header_line + "\n")
        except FileExistsError:
            return True
        except OSError as e:
            logger.warning("Failed to create %s: %s", self.path, e)
        return False

    def check_line_end(self) -> None:
        """Note whether the file ends mid-line so the next append starts a new one."""
        try:
            with open(self.path, "rb") as f:
                f.seek(0, os.SEEK_END)
                if f.tell() == 0:
                    return
                f.seek(-1, os.SEEK_END)
                self._needs_newline = f.read(1) not in (b"\n", b"\r")
        except OSError as e:
            logger.warning("Failed to inspect %s: %s", self.path, e)

    def read_lines(self) -> Iterator[str]:
        with self._open("r") as f:
            for raw in f:
                yield raw.rstrip("\r\n")

    def append(self, line: str) -> bool:
        """Append ``line``; report failure as ``False`` instead of raising."""
        try:
            with self._open("a") as f:
                f.write(("\n" if self._needs_newline else "") + line + "\n")
        except OSError as e:
            logger.warning("Failed to append to %s: %s", self.path, e)
            return False
        self._needs_newline = False
        return True


class BaseRepository(CsvLog):
    """Loads a log on construction and guards update+append pairs with a lock."""

    entity_name = "row"

    def __init__(self, path: str, header: Sequence[str]) -> None:
        super().__init__(path, header)
        self._lock = threading.Lock()
        self.skipped = 0
        if self.ensure_exists():
            self._load()
            self.check_line_end()

    def _decode(self, line: str):
        raise NotImplementedError

    def _index(self, entity) -> None:
        raise NotImplementedError

    def _load(self) -> None:
        loaded = 0
        try:
            for lineno, line in enumerate(self.read_lines(), start=1):
                if not line.strip() or line == self.header_line:
                    continue
                entity = self._decode(line)
                if entity is None:
                    self.skipped += 1
                    logger.debug("Skipping malformed %s at %s:%d", self.entity_name, self.path, lineno)
                    continue
                self._index(entity)
                loaded += 1
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to load %s: %s", self.path, e)
        if self.skipped:
            logger.info("Skipped %d malformed %s rows in %s", self.skipped, self.entity_name, self.path)
        logger.debug("Loaded %d %s rows from %s", loaded, self.entity_name, self.path)

    def _persist(self, entity, update: Callable[[], None]) -> bool:
        with self._lock:
            update()
            return self.append(entity.to_row())


class UserRepository(BaseRepository):
    """Users indexed by id; the last stored row for an id wins."""

    entity_name = "user"

    def __init__(self, path: str = "users.csv") -> None:
        self._users: dict[str, User] = {}
        super().__init__(path, USER_HEADER)

    def _decode(self, line: str) -> Optional[User]:
        return User.from_row(line)

    def _index(self, user: User) -> None:
        self._users[user.id] = user

    def save(self, user: User) -> bool:
        return self._persist(user, lambda: self._index(user))

    def get(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def find_by_name(self, name: str) -> Optional[User]:
        wanted = name.casefold()
        for user in self._users.values():
            if user.name.casefold() == wanted:
                return user
        return None

    def fetch_all(self) -> List[User]:
        return list(self._users.values())


class WorkoutRecordRepository(BaseRepository):
    """Every stored workout record in file order."""

    entity_name = "workout"

    def __init__(self, path: str = "workouts.csv") -> None:
        self._records: list[WorkoutRecord] = []
        super().__init__(path, WORKOUT_HEADER)

    def _decode(self, line: str) -> Optional[WorkoutRecord]:
        return WorkoutRecord.from_row(line)

    def _index(self, record: WorkoutRecord) -> None:
        self._records.append(record)

    def append_record(self, record: WorkoutRecord) -> bool:
        return self._persist(record, lambda: self._index(record))

    def fetch_for_user(self, user_id: str) -> List[WorkoutRecord]:
        return [r for r in self._records if r.user_id == user_id]

    def fetch_all(self) -> List[WorkoutRecord]:
        return list(self._records)


class Store:
    """Users and workout records backed by two append-only CSV files."""

    def __init__(
        self,
        users_path: str = "users.csv",
        workouts_path: str = "workouts.csv",
        presets: Sequence[WorkoutDay] | None = None,
    ) -> None:
        self.users = UserRepository(users_path)
        self.records = WorkoutRecordRepository(workouts_path)
        self._presets = list(presets or [])

    @classmethod
    def from_settings(cls, settings, presets: Sequence[WorkoutDay] | None = None) -> "Store":
        return cls(
            os.path.join(settings.data_dir, settings.users_file),
            os.path.join(settings.data_dir, settings.workouts_file),
            presets,
        )

    def save_user(self, user: User) -> bool:
        return self.users.save(user)

    def append_record(self, record: WorkoutRecord) -> bool:
        return self.records.append_record(record)

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def find_user_by_name(self, name: str) -> Optional[User]:
        return self.users.find_by_name(name)

    def find_user(self, query: str) -> Optional[User]:
        """Look ``query`` up as an id first, then as a name."""
        return self.find_user_by_id(query) or self.find_user_by_name(query)

    def all_users(self) -> List[User]:
        return self.users.fetch_all()

    def records_for_user(self, user_id: str) -> List[WorkoutRecord]:
        return self.records.fetch_for_user(user_id)

    def all_records(self) -> List[WorkoutRecord]:
        return self.records.fetch_all()

    def presets(self) -> List[WorkoutDay]:
        return list(self._presets)
