"""
Workout Tracker Configuration
=============================
All settings in one place. Pydantic Settings validates types at startup
so a typo in the environment fails on load, not on the first save.

Covers the two document paths, default view, autosave flag, UI language
and the user-extensible list of workout type labels used to populate
selection menus.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WORKOUT_TYPES = [
    "грудь",
    "спина",
    "ноги",
    "плечи",
    "руки",
    "пресс",
    "кардио",
    "другое",
]


class Settings(BaseSettings):
    """Loaded from WORKOUT_TRACKER_* environment variables or a .env file."""

    # --- Documents ---
    data_dir: Path = Path(".")
    workout_file: str = "workout-tracker.md"
    exercise_library_file: str = "exercises.json"

    # --- Presentation ---
    default_view: str = "week"  # week | month | year | progress | spec
    color_scheme: str = "default"
    auto_save: bool = True
    language: str = "ru"
    custom_workout_types: list[str] = list(DEFAULT_WORKOUT_TYPES)

    environment: str = "development"

    model_config = SettingsConfigDict(
        env_prefix="WORKOUT_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def workout_path(self) -> Path:
        return self.data_dir / self.workout_file

    @property
    def exercise_library_path(self) -> Path:
        return self.data_dir / self.exercise_library_file


@lru_cache
def get_settings() -> Settings:
    return Settings()
