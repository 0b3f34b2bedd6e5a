"""
Workout Record Schemas
======================
Pydantic models for the date-keyed workout log. These are the contract
between the markdown document and everything that reads it.

Key design decisions:
- JSON keys keep the on-disk spelling (``oneRM``,
  ``currentOneRM``, ``moved_from``) so existing documents load as-is.
  Python attributes are snake_case; dump with ``by_alias=True``.
- Decoding is permissive. Bad scalars fall back to defaults instead of
  failing the whole entry, because a hand-edited document should still
  open. Only an entry that is not an object at all is dropped.
- Unknown keys are kept so a save never discards data another tool wrote.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Allowed values
# ---------------------------------------------------------------------------

WorkoutStatus = Literal["done", "planned", "skipped", "illness"]

VALID_STATUSES = frozenset({"done", "planned", "skipped", "illness"})

DEFAULT_STATUS = "planned"

ILLNESS_TYPE = "болезнь"
OTHER_TYPE = "другое"

Number = Union[int, float]


# ---------------------------------------------------------------------------
# Coercion helpers
# ---------------------------------------------------------------------------

def coerce_number(value: Any) -> Optional[Number]:
    """Return *value* as int/float, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip().replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            return None
        return int(number) if number.is_integer() and "." not in text else number
    return None


def coerce_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class WorkoutSet(_Record):
    """One performed or planned set. Identity is its position in the list."""

    reps: int = 0
    weight: Optional[Number] = None
    duration: Optional[Number] = Field(default=None, description="Seconds, for cardio.")
    distance: Optional[Number] = Field(default=None, description="Meters.")
    intensity: Optional[Number] = Field(
        default=None,
        description="Percentage (0-100) of the one-rep-max.",
    )
    one_rm: Optional[Number] = Field(
        default=None,
        alias="oneRM",
        description="One-rep-max snapshot at the time of the set.",
    )
    notes: Optional[str] = None

    @field_validator("reps", mode="before")
    @classmethod
    def _reps(cls, value: Any) -> int:
        number = coerce_number(value)
        if number is None or number < 0:
            return 0
        return int(number)

    @field_validator("weight", "duration", "distance", "intensity", "one_rm", mode="before")
    @classmethod
    def _optional_number(cls, value: Any) -> Optional[Number]:
        return coerce_number(value)

    @field_validator("notes", mode="before")
    @classmethod
    def _notes(cls, value: Any) -> Optional[str]:
        return coerce_optional_str(value)


class Exercise(_Record):
    """A named movement within one workout. Set order is meaningful."""

    name: str = ""
    sets: list[WorkoutSet] = Field(default_factory=list)
    notes: Optional[str] = None
    current_one_rm: Optional[Number] = Field(default=None, alias="currentOneRM")

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value: Any) -> str:
        return coerce_optional_str(value) or ""

    @field_validator("sets", mode="before")
    @classmethod
    def _sets(cls, value: Any) -> list:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, (dict, WorkoutSet))]

    @field_validator("notes", mode="before")
    @classmethod
    def _notes(cls, value: Any) -> Optional[str]:
        return coerce_optional_str(value)

    @field_validator("current_one_rm", mode="before")
    @classmethod
    def _one_rm(cls, value: Any) -> Optional[Number]:
        return coerce_number(value)


class WorkoutEntry(_Record):
    """One calendar day's workout."""

    status: WorkoutStatus = DEFAULT_STATUS
    type: str = ""
    exercises: Optional[list[Exercise]] = None
    notes: Optional[str] = None
    duration: Optional[Number] = Field(default=None, description="Total minutes.")
    moved_from: Optional[str] = None
    moved_to: Optional[str] = None
    reason: Optional[str] = Field(default=None, description="Why skipped / ill.")

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> str:
        if value in VALID_STATUSES:
            return value
        logger.warning("Unknown workout status %r, defaulting to '%s'", value, DEFAULT_STATUS)
        return DEFAULT_STATUS

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, value: Any) -> str:
        return coerce_optional_str(value) or ""

    @field_validator("exercises", mode="before")
    @classmethod
    def _exercises(cls, value: Any) -> Optional[list]:
        if value is None:
            return None
        if not isinstance(value, list):
            return None
        return [item for item in value if isinstance(item, (dict, Exercise))]

    @field_validator("notes", "moved_from", "moved_to", "reason", mode="before")
    @classmethod
    def _optional_text(cls, value: Any) -> Optional[str]:
        return coerce_optional_str(value)

    @field_validator("duration", mode="before")
    @classmethod
    def _duration(cls, value: Any) -> Optional[Number]:
        return coerce_number(value)

    def to_json(self) -> dict:
        """Plain dict in document spelling, without unset optional fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


WorkoutData = dict[str, WorkoutEntry]


# ---------------------------------------------------------------------------
# Derived views
# ---------------------------------------------------------------------------

class ProgressDataPoint(_Record):
    """One set of a completed workout, flattened for charting."""

    date: str
    value: Number = 0
    exercise: str
    muscle_group: str = Field(alias="muscleGroup")
    reps: Optional[int] = None
    weight: Optional[Number] = None
    volume: Optional[Number] = Field(default=None, description="weight * reps")


class MonthWorkoutStats(_Record):
    total_workouts: int = Field(default=0, alias="totalWorkouts")
    completed_workouts: int = Field(default=0, alias="completedWorkouts")
    workout_types: dict[str, int] = Field(default_factory=dict, alias="workoutTypes")


class GeneralStats(BaseModel):
    total: int = 0
    done: int = 0
    planned: int = 0
    skipped: int = 0
    illness: int = 0


class WorkoutStats(_Record):
    general: GeneralStats = Field(default_factory=GeneralStats)
    by_muscle_group: dict[str, int] = Field(default_factory=dict, alias="byMuscleGroup")
