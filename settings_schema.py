from typing import Optional

from pydantic import BaseModel, ValidationError

from config import YamlConfig


class SettingsSchema(BaseModel):
    db_path: str = "workout.db"
    default_reps: int = 8
    default_weight: float = 50.0
    default_weight_step: str = "5"
    coach_url: str = "http://localhost:3000/api/chat"
    coach_api_key: str = ""
    coach_timeout: float = 30.0
    log_level: str = "INFO"


def validate_settings(data: dict) -> None:
    try:
        SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))


def load_settings(path: Optional[str] = None) -> dict:
    """Return validated settings from ``path`` merged with the defaults."""
    data = YamlConfig(path).load()
    validate_settings(data)
    return SettingsSchema(**data).model_dump()


def update_settings(changes: dict, path: Optional[str] = None) -> dict:
    """Validate ``changes`` against the current file and persist them.

    Values are stored with the types the schema coerces them to, so
    ``{"default_reps": "10"}`` is written as an integer.
    """
    unknown = set(changes) - set(SettingsSchema.model_fields)
    if unknown:
        raise ValueError(f"unknown settings: {', '.join(sorted(unknown))}")
    config = YamlConfig(path)
    merged = config.load()
    merged.update(changes)
    validate_settings(merged)
    coerced = SettingsSchema(**merged).model_dump()
    config.update({key: coerced[key] for key in changes})
    return load_settings(path)
