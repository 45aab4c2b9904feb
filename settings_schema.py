from pydantic import BaseModel, ValidationError, field_validator

from config import YamlConfig

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class SettingsSchema(BaseModel):
    data_dir: str = "."
    users_file: str = "users.csv"
    workouts_file: str = "workouts.csv"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value}")
        return level

    @field_validator("users_file", "workouts_file")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("file name must not be empty")
        return value


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))


def load_settings(path: str | None = None) -> SettingsSchema:
    """Read the YAML settings file, falling back to defaults for missing keys."""
    data = YamlConfig(path).load()
    validate_settings(data)
    return SettingsSchema(**data)
