"""
Exercise Library Service
========================
One-rep-max arithmetic and copy-on-write edits to the exercise library.

Intensity and weight are two views of the same number once a one-rep-max
is known:

    weight    = round_half_up(intensity / 100 * one_rm, 2 decimals)
    intensity = round_half_up(weight / one_rm * 100)

Nothing keeps the stored pair consistent; the editor recomputes one from
the other as the user types, which is what ``apply_one_rm`` does for a
whole exercise.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Optional

from workout_tracker.models.exercise_library import ExerciseLibrary, ExerciseSpec, OneRMRecord
from workout_tracker.models.workout import Exercise, Number
from workout_tracker.services.dates import DateLike, format_date, parse_date

logger = logging.getLogger(__name__)

UNCATEGORISED = "Без категории"
DEFAULT_GROUP = "Общие"


# ---------------------------------------------------------------------------
# Base library written when the user has none yet
# ---------------------------------------------------------------------------

def _spec(group: str, default_sets: int, default_reps: Optional[int] = None, *, is_cardio: bool = False) -> dict:
    spec: dict = {"group": group, "category": group, "default_sets": default_sets}
    if default_reps is not None:
        spec["default_reps"] = default_reps
    if is_cardio:
        spec["is_cardio"] = True
    return spec


DEFAULT_EXERCISE_LIBRARY: dict[str, dict] = {
    # Грудь
    "Жим лёжа": _spec("грудь", 3, 8),
    "Жим гантелей": _spec("грудь", 3, 10),
    "Отжимания": _spec("грудь", 3, 15),
    "Разводка гантелей": _spec("грудь", 3, 12),
    # Спина
    "Подтягивания": _spec("спина", 3, 8),
    "Тяга штанги": _spec("спина", 3, 8),
    "Тяга гантели": _spec("спина", 3, 10),
    "Становая тяга": _spec("спина", 3, 5),
    # Ноги
    "Приседания": _spec("ноги", 4, 10),
    "Жим ногами": _spec("ноги", 3, 12),
    "Выпады": _spec("ноги", 3, 10),
    "Подъёмы на носки": _spec("ноги", 4, 15),
    # Плечи
    "Жим стоя": _spec("плечи", 3, 8),
    "Махи гантелями": _spec("плечи", 3, 12),
    "Тяга к подбородку": _spec("плечи", 3, 10),
    # Руки
    "Подъём на бицепс": _spec("руки", 3, 10),
    "Жим узким хватом": _spec("руки", 3, 8),
    "Французский жим": _spec("руки", 3, 10),
    # Пресс
    "Скручивания": _spec("пресс", 3, 20),
    "Планка": _spec("пресс", 3, 1),
    "Подъёмы ног": _spec("пресс", 3, 15),
    # Кардио
    "Бег": _spec("кардио", 1, is_cardio=True),
    "Велосипед": _spec("кардио", 1, is_cardio=True),
    "Эллипс": _spec("кардио", 1, is_cardio=True),
}


def default_exercise_library() -> ExerciseLibrary:
    return ExerciseLibrary.model_validate({"exercises": DEFAULT_EXERCISE_LIBRARY})


# ---------------------------------------------------------------------------
# One-rep-max arithmetic
# ---------------------------------------------------------------------------

def calculate_intensity(weight: Optional[Number], one_rm: Optional[Number]) -> int:
    """Weight as a whole-number percentage of *one_rm* (0 if unknown)."""
    if not one_rm or weight is None:
        return 0
    return math.floor(weight / one_rm * 100 + 0.5)


def calculate_weight(intensity: Optional[Number], one_rm: Optional[Number]) -> float:
    """Weight in kg for *intensity* percent of *one_rm*, to 2 decimals."""
    if not one_rm or intensity is None:
        return 0
    return math.floor(intensity / 100 * one_rm * 100 + 0.5) / 100


def apply_one_rm(exercise: Exercise, one_rm: Optional[Number]) -> Exercise:
    """Copy of *exercise* with ``current_one_rm`` set and intensities recomputed.

    Sets without a weight keep their intensity. A missing or non-positive
    one-rep-max clears ``current_one_rm`` and leaves the sets alone.
    """
    if not one_rm or one_rm <= 0:
        return exercise.model_copy(deep=True, update={"current_one_rm": None})

    sets = [
        s.model_copy(update={"intensity": calculate_intensity(s.weight, one_rm)})
        if s.weight is not None else s.model_copy()
        for s in exercise.sets
    ]
    return exercise.model_copy(deep=True, update={"current_one_rm": one_rm, "sets": sets})


def fill_one_rm_from_library(exercise: Exercise, library: ExerciseLibrary) -> Exercise:
    """Take the library's current one-rep-max when the exercise has none."""
    if exercise.current_one_rm:
        return exercise
    spec = library.exercises.get(exercise.name)
    if spec is None or not spec.current_one_rm:
        return exercise
    return apply_one_rm(exercise, spec.current_one_rm)


def record_one_rm(
    library: ExerciseLibrary,
    name: str,
    value: Number,
    on_date: Optional[DateLike] = None,
    notes: Optional[str] = None,
) -> ExerciseLibrary:
    """Append a one-rep-max record for *name* and make it the current value.

    Unknown exercise names leave the library unchanged.
    """
    new_library = library.model_copy(deep=True)
    spec = new_library.exercises.get(name)
    if spec is None:
        logger.warning("Cannot record 1RM for unknown exercise %r", name)
        return new_library

    day = parse_date(on_date) if on_date is not None else date.today()
    record = OneRMRecord(date=format_date(day or date.today()), value=value, notes=notes)
    spec.one_rm_history = [*(spec.one_rm_history or []), record]
    spec.current_one_rm = value
    return new_library


# ---------------------------------------------------------------------------
# Library CRUD
# ---------------------------------------------------------------------------

def add_exercise(library: ExerciseLibrary, name: str, spec: ExerciseSpec) -> ExerciseLibrary:
    """Add or replace *name*. Blank names are ignored."""
    name = name.strip()
    new_library = library.model_copy(deep=True)
    if not name:
        logger.warning("Not adding exercise with a blank name")
        return new_library
    if not spec.group:
        spec = spec.model_copy(update={"group": spec.category or DEFAULT_GROUP})
    new_library.exercises[name] = spec.model_copy(deep=True)
    return new_library


def update_exercise(library: ExerciseLibrary, name: str, spec: ExerciseSpec) -> ExerciseLibrary:
    """Replace the spec for an existing *name*, keeping its 1RM history."""
    new_library = library.model_copy(deep=True)
    existing = new_library.exercises.get(name)
    if existing is None:
        return new_library
    updated = spec.model_copy(deep=True)
    if updated.one_rm_history is None:
        updated.one_rm_history = existing.one_rm_history
    if updated.current_one_rm is None:
        updated.current_one_rm = existing.current_one_rm
    new_library.exercises[name] = updated
    return new_library


def delete_exercise(library: ExerciseLibrary, name: str) -> ExerciseLibrary:
    new_library = library.model_copy(deep=True)
    new_library.exercises.pop(name, None)
    return new_library


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def get_unique_categories(library: ExerciseLibrary) -> list[str]:
    return sorted({spec.category for spec in library.exercises.values() if spec.category})


def filter_exercises(
    library: ExerciseLibrary,
    search_term: str = "",
    category: str = "",
) -> list[tuple[str, ExerciseSpec]]:
    """Exercises whose name or description contains *search_term*
    (case-insensitive) and whose category equals *category*, if given.
    """
    term = search_term.strip().lower()
    matches = []
    for name, spec in library.exercises.items():
        if term and term not in name.lower() and term not in (spec.description or "").lower():
            continue
        if category and spec.category != category:
            continue
        matches.append((name, spec))
    return matches


def group_exercises_by_category(
    items: list[tuple[str, ExerciseSpec]],
) -> dict[str, list[tuple[str, ExerciseSpec]]]:
    grouped: dict[str, list[tuple[str, ExerciseSpec]]] = {}
    for name, spec in items:
        grouped.setdefault(spec.category or UNCATEGORISED, []).append((name, spec))
    return grouped


def suggest_exercises(library: ExerciseLibrary, text: str, limit: int = 10) -> list[str]:
    """Names for autocomplete: prefix matches first, then substring matches."""
    needle = text.strip().lower()
    if not needle:
        return []
    names = sorted(library.exercises)
    prefix = [n for n in names if n.lower().startswith(needle)]
    contains = [n for n in names if needle in n.lower() and n not in prefix]
    return (prefix + contains)[:limit]
