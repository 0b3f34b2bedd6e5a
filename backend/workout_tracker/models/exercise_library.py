"""
Exercise Library Schemas
========================
Pydantic models for the exercise library document: one template per
exercise name, plus its one-rep-max history.

``difficulty`` is stored as ``beginner | intermediate | advanced``.
Russian tier names (``начинающий``, ``средний``, ``продвинутый``) are
accepted on load and written back in English on the next save, so a
saved library no longer carries the Russian spelling.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from workout_tracker.models.workout import Number, coerce_number, coerce_optional_str

logger = logging.getLogger(__name__)


Difficulty = Literal["beginner", "intermediate", "advanced"]

# Older library documents store the tier in Russian.
_DIFFICULTY_ALIASES: dict[str, str] = {
    "beginner": "beginner",
    "intermediate": "intermediate",
    "advanced": "advanced",
    "начинающий": "beginner",
    "средний": "intermediate",
    "продвинутый": "advanced",
}


class OneRMRecord(BaseModel):
    """A one-rep-max measurement. ``value`` is in kilograms."""

    model_config = ConfigDict(extra="allow")

    date: str = ""
    value: Number
    notes: Optional[str] = None


class ExerciseSpec(BaseModel):
    """Library-level template for a named exercise."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    group: str = ""
    category: Optional[str] = None
    equipment: Optional[str] = None
    difficulty: Optional[Difficulty] = None
    muscle_groups: Optional[list[str]] = Field(default=None, alias="muscleGroups")
    description: Optional[str] = None
    default_sets: Optional[int] = None
    default_reps: Optional[int] = None
    default_weight: Optional[Number] = None
    is_cardio: Optional[bool] = None
    one_rm_history: Optional[list[OneRMRecord]] = Field(default=None, alias="oneRMHistory")
    current_one_rm: Optional[Number] = Field(default=None, alias="currentOneRM")

    @field_validator("difficulty", mode="before")
    @classmethod
    def _difficulty(cls, value: Any) -> Optional[str]:
        if value is None or value == "":
            return None
        normalised = _DIFFICULTY_ALIASES.get(str(value).strip().lower())
        if normalised is None:
            logger.warning("Unknown exercise difficulty %r, ignoring", value)
        return normalised

    @field_validator("group", mode="before")
    @classmethod
    def _group(cls, value: Any) -> str:
        return coerce_optional_str(value) or ""

    @field_validator("category", "equipment", "description", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return coerce_optional_str(value)

    @field_validator("muscle_groups", mode="before")
    @classmethod
    def _muscle_groups(cls, value: Any) -> Optional[list[str]]:
        if value is None:
            return None
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, list):
            return None
        return [str(item).strip() for item in value if str(item).strip()]

    @field_validator("default_sets", "default_reps", mode="before")
    @classmethod
    def _optional_int(cls, value: Any) -> Optional[int]:
        number = coerce_number(value)
        return None if number is None else int(number)

    @field_validator("default_weight", "current_one_rm", mode="before")
    @classmethod
    def _optional_number(cls, value: Any) -> Optional[Number]:
        return coerce_number(value)

    @field_validator("one_rm_history", mode="before")
    @classmethod
    def _history(cls, value: Any) -> Optional[list]:
        if value is None:
            return None
        if not isinstance(value, list):
            return None
        return [
            item for item in value
            if isinstance(item, OneRMRecord)
            or (isinstance(item, dict) and coerce_number(item.get("value")) is not None)
        ]


class ExerciseLibrary(BaseModel):
    """Root of the exercise library document: ``{"exercises": {...}}``."""

    model_config = ConfigDict(extra="allow")

    exercises: dict[str, ExerciseSpec] = Field(default_factory=dict)

    @field_validator("exercises", mode="before")
    @classmethod
    def _exercises(cls, value: Any) -> dict:
        if not isinstance(value, dict):
            return {}
        return {
            str(name): spec for name, spec in value.items()
            if isinstance(spec, (dict, ExerciseSpec))
        }

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
