"""
Workout Document Codec
======================
Reads and writes the two persisted documents.

- The workout log is a markdown note with one fenced ```` ```workout ````
  block whose body is a JSON object keyed by ``YYYY-MM-DD``. The first
  block wins; surrounding text is ignored on read and regenerated on
  write.
- The exercise library is a plain JSON document, ``{"exercises": {...}}``.

Parse failures never reach the caller. A broken document loads as an
empty map and the reason is logged, so the views still open. Callers
cannot tell "empty" from "unreadable" by the return value alone; the log
is the diagnostic.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from workout_tracker.models.exercise_library import ExerciseLibrary, ExerciseSpec
from workout_tracker.models.workout import WorkoutData, WorkoutEntry
from workout_tracker.services.dates import parse_date

logger = logging.getLogger(__name__)

WORKOUT_BLOCK_TAG = "workout"

_WORKOUT_BLOCK = re.compile(r"```workout[ \t]*\r?\n([\s\S]*?)\r?\n```")

DOCUMENT_HEADING = "# Workout Tracker Data"
DOCUMENT_NOTICE = (
    "*Этот файл содержит данные тренировок в формате, совместимом с Dataview. "
    "Не редактируйте его вручную.*"
)


# ---------------------------------------------------------------------------
# Workout log
# ---------------------------------------------------------------------------

def extract_workout_block(text: str) -> str | None:
    """Return the body of the first ``workout`` block, or None."""
    if not text:
        return None
    match = _WORKOUT_BLOCK.search(text)
    return match.group(1) if match else None


def decode_workout_data(raw: Any) -> WorkoutData:
    """Validate an already-parsed JSON object into a WorkoutData map.

    Entries with a key that is not a calendar date, or a value that is not
    an object, are dropped with a warning. Everything else is kept, with
    malformed fields replaced by defaults.
    """
    if not isinstance(raw, dict):
        logger.warning("Workout block is %s, expected an object", type(raw).__name__)
        return {}

    data: WorkoutData = {}
    for key, value in raw.items():
        if parse_date(key) is None or len(key) != 10:
            logger.warning("Dropping workout entry with invalid date key %r", key)
            continue
        if not isinstance(value, dict):
            logger.warning("Dropping workout entry %s: not an object", key)
            continue
        try:
            data[key] = WorkoutEntry.model_validate(value)
        except ValidationError as exc:
            logger.warning("Dropping workout entry %s: %s", key, exc)
    return data


def parse_workout_data(text: str) -> WorkoutData:
    """Parse a workout document. Returns ``{}`` on any failure."""
    body = extract_workout_block(text)
    if body is None:
        logger.info("No ```%s block found in document", WORKOUT_BLOCK_TAG)
        return {}

    try:
        raw = json.loads(body)
    except (ValueError, RecursionError):
        logger.exception("Error parsing workout data")
        return {}

    return decode_workout_data(raw)


def workout_data_to_json(data: WorkoutData) -> dict[str, dict]:
    return {key: entry.to_json() for key, entry in data.items()}


def serialize_workout_data(data: WorkoutData) -> str:
    """Render *data* as the full workout document."""
    json_str = json.dumps(workout_data_to_json(data), indent=2, ensure_ascii=False)
    return (
        f"{DOCUMENT_HEADING}\n"
        f"\n"
        f"```{WORKOUT_BLOCK_TAG}\n"
        f"{json_str}\n"
        f"```\n"
        f"\n"
        f"{DOCUMENT_NOTICE}"
    )


# ---------------------------------------------------------------------------
# Exercise library
# ---------------------------------------------------------------------------

def decode_exercise_library(raw: Any) -> ExerciseLibrary:
    if not isinstance(raw, dict):
        logger.warning("Exercise library is %s, expected an object", type(raw).__name__)
        return ExerciseLibrary()

    exercises = raw.get("exercises")
    if not isinstance(exercises, dict):
        return ExerciseLibrary()

    library = ExerciseLibrary()
    for name, value in exercises.items():
        if not isinstance(value, dict):
            logger.warning("Dropping library exercise %r: not an object", name)
            continue
        try:
            library.exercises[str(name)] = ExerciseSpec.model_validate(value)
        except ValidationError as exc:
            logger.warning("Dropping library exercise %r: %s", name, exc)
    return library


def parse_exercise_library(text: str) -> ExerciseLibrary:
    """Parse an exercise library document. Returns an empty library on failure."""
    if not text or not text.strip():
        return ExerciseLibrary()
    try:
        raw = json.loads(text)
    except (ValueError, RecursionError):
        logger.exception("Error parsing exercise library")
        return ExerciseLibrary()
    return decode_exercise_library(raw)


def serialize_exercise_library(library: ExerciseLibrary) -> str:
    return json.dumps(library.to_json(), indent=2, ensure_ascii=False)
