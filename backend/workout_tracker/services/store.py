"""
Workout Store
=============
Loads and saves the workout log and the exercise library through a
document gateway, and applies mutations as load -> edit -> save.

Responsibilities:
- FileDocumentGateway: read/write one UTF-8 document on disk.
- WorkoutStore: hold the last good in-memory copy of both documents,
  parse on load, serialize and persist immediately after every edit.

Failure policy:
- A missing document loads as empty.
- A document that cannot be read (I/O error, not UTF-8) raises
  WorkoutStoreError and the in-memory copy is left as it was. Edits
  reload first, so a failed read stops the edit before anything is
  written back over the unreadable document.
- A document that cannot be written raises WorkoutStoreError. The
  in-memory copy stays at the last state that was successfully saved, so
  the caller can show a notice and carry on.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from workout_tracker.config import get_settings
from workout_tracker.models.exercise_library import ExerciseLibrary, ExerciseSpec
from workout_tracker.models.workout import WorkoutData, WorkoutEntry
from workout_tracker.services import exercise_library, mutations
from workout_tracker.services.codec import (
    parse_exercise_library,
    parse_workout_data,
    serialize_exercise_library,
    serialize_workout_data,
)
from workout_tracker.services.dates import DateLike

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class WorkoutStoreError(Exception):
    """A document could not be read or persisted."""

    def __init__(self, document: str, cause: Exception, action: str = "save") -> None:
        self.document = document
        self.cause = cause
        self.action = action
        super().__init__(f"Could not {action} {document}: {cause}")


# ---------------------------------------------------------------------------
# Gateways
# ---------------------------------------------------------------------------

class DocumentGateway(Protocol):
    """Where one document lives. ``load`` returns None when it doesn't exist."""

    def load(self) -> Optional[str]: ...

    def save(self, text: str) -> None: ...

    def exists(self) -> bool: ...


class FileDocumentGateway:
    """A document stored as a UTF-8 text file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Optional[str]:
        if not self.path.is_file():
            return None
        return self.path.read_text(encoding="utf-8")

    def save(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(text, encoding="utf-8")

    def __repr__(self) -> str:
        return f"FileDocumentGateway({str(self.path)!r})"


# ---------------------------------------------------------------------------
# Sample content for a brand-new workout document
# ---------------------------------------------------------------------------

SAMPLE_WORKOUT_DATA: dict[str, dict[str, Any]] = {
    "2025-10-06": {
        "status": "done",
        "type": "грудь",
        "exercises": [
            {
                "name": "Жим лёжа",
                "sets": [
                    {"reps": 10, "weight": 60},
                    {"reps": 8, "weight": 65},
                    {"reps": 6, "weight": 70},
                ],
            },
            {
                "name": "Отжимания",
                "sets": [{"reps": 20}, {"reps": 18}, {"reps": 15}],
            },
        ],
        "notes": "Хорошая тренировка грудных мышц",
    },
    "2025-10-08": {
        "status": "planned",
        "type": "спина",
        "notes": "Подтягивания с дополнительным весом",
    },
}


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class WorkoutStore:
    """Single-writer access to the workout log and exercise library."""

    def __init__(self, workout_gateway: DocumentGateway, library_gateway: DocumentGateway) -> None:
        self._workouts = workout_gateway
        self._library = library_gateway
        self.workout_data: WorkoutData = {}
        self.exercise_library: ExerciseLibrary = ExerciseLibrary()

    # ---- Workout log -----------------------------------------------------

    def load_workout_data(self) -> WorkoutData:
        """Re-read the workout document. Missing -> ``{}``.

        Raises WorkoutStoreError when the document exists but cannot be
        read; ``workout_data`` keeps its previous value.
        """
        try:
            text = self._workouts.load()
        except (OSError, UnicodeDecodeError) as exc:
            logger.exception("Error loading workout data from %r", self._workouts)
            raise WorkoutStoreError("workout data", exc, action="load") from exc

        self.workout_data = parse_workout_data(text) if text is not None else {}
        return self.workout_data

    def save_workout_data(self, data: WorkoutData) -> None:
        content = serialize_workout_data(data)
        try:
            self._workouts.save(content)
        except OSError as exc:
            logger.exception("Error saving workout data to %r", self._workouts)
            raise WorkoutStoreError("workout data", exc) from exc
        self.workout_data = data
        logger.info("Saved %d workout entries", len(data))

    def ensure_workout_document(self) -> WorkoutData:
        """Create the workout document with sample entries if it is missing."""
        if self._workouts.exists():
            return self.load_workout_data()
        sample = {key: WorkoutEntry.model_validate(value) for key, value in SAMPLE_WORKOUT_DATA.items()}
        self.save_workout_data(sample)
        return self.workout_data

    def add_workout(self, on_date: DateLike, entry: WorkoutEntry) -> WorkoutData:
        data = mutations.add_workout(self.load_workout_data(), on_date, entry)
        self.save_workout_data(data)
        return data

    def update_workout(self, on_date: DateLike, changes: Union[WorkoutEntry, dict[str, Any]]) -> WorkoutData:
        current = self.load_workout_data()
        data = mutations.update_workout(current, on_date, changes)
        if data != current:
            self.save_workout_data(data)
        return self.workout_data

    def delete_workout(self, on_date: DateLike) -> WorkoutData:
        current = self.load_workout_data()
        data = mutations.delete_workout(current, on_date)
        if len(data) != len(current):
            self.save_workout_data(data)
        return self.workout_data

    def advance_status(self, on_date: DateLike) -> WorkoutData:
        data = mutations.advance_status(self.load_workout_data(), on_date)
        self.save_workout_data(data)
        return data

    def move_workout(self, from_date: DateLike, to_date: DateLike, *, allow_overwrite: bool = True) -> WorkoutData:
        data = mutations.move_workout(
            self.load_workout_data(), from_date, to_date, allow_overwrite=allow_overwrite,
        )
        self.save_workout_data(data)
        return data

    def mark_illness_period(
        self,
        start_date: DateLike,
        end_date: DateLike,
        reason: str,
        *,
        allow_overwrite: bool = True,
    ) -> WorkoutData:
        data = mutations.mark_illness_period(
            self.load_workout_data(), start_date, end_date, reason, allow_overwrite=allow_overwrite,
        )
        self.save_workout_data(data)
        return data

    # ---- Exercise library ------------------------------------------------

    def load_exercise_library(self) -> ExerciseLibrary:
        try:
            text = self._library.load()
        except (OSError, UnicodeDecodeError) as exc:
            logger.exception("Error loading exercise library from %r", self._library)
            raise WorkoutStoreError("exercise library", exc, action="load") from exc

        self.exercise_library = parse_exercise_library(text) if text is not None else ExerciseLibrary()
        return self.exercise_library

    def save_exercise_library(self, library: ExerciseLibrary) -> None:
        content = serialize_exercise_library(library)
        try:
            self._library.save(content)
        except OSError as exc:
            logger.exception("Error saving exercise library to %r", self._library)
            raise WorkoutStoreError("exercise library", exc) from exc
        self.exercise_library = library
        logger.info("Saved exercise library (%d exercises)", len(library.exercises))

    def ensure_exercise_library(self) -> ExerciseLibrary:
        """Create the library document with the base exercise set if missing."""
        if self._library.exists():
            return self.load_exercise_library()
        self.save_exercise_library(exercise_library.default_exercise_library())
        return self.exercise_library

    def add_exercise(self, name: str, spec: ExerciseSpec) -> ExerciseLibrary:
        library = exercise_library.add_exercise(self.ensure_exercise_library(), name, spec)
        self.save_exercise_library(library)
        return library

    def update_exercise(self, name: str, spec: ExerciseSpec) -> ExerciseLibrary:
        library = exercise_library.update_exercise(self.load_exercise_library(), name, spec)
        self.save_exercise_library(library)
        return library

    def delete_exercise(self, name: str) -> ExerciseLibrary:
        library = exercise_library.delete_exercise(self.load_exercise_library(), name)
        self.save_exercise_library(library)
        return library

    def record_one_rm(
        self,
        name: str,
        value: float,
        on_date: Optional[DateLike] = None,
        notes: Optional[str] = None,
    ) -> ExerciseLibrary:
        library = exercise_library.record_one_rm(self.load_exercise_library(), name, value, on_date, notes)
        self.save_exercise_library(library)
        return library


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_store: WorkoutStore | None = None


def get_workout_store() -> WorkoutStore:
    global _default_store
    if _default_store is None:
        settings = get_settings()
        _default_store = WorkoutStore(
            FileDocumentGateway(settings.workout_path),
            FileDocumentGateway(settings.exercise_library_path),
        )
    return _default_store
