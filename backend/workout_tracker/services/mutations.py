"""
Workout Mutation Service
========================
Copy-on-write edits to a WorkoutData map. Every function returns a new
map and never modifies the input map or any entry in it, so callers can
keep the previous map around (e.g. to restore it if a save fails).

Overwrite policy: moving onto an occupied date and stamping an illness
period over existing entries replace what was there. Callers that want
to ask the user first pass ``allow_overwrite=False`` and handle
``WorkoutConflictError``.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from workout_tracker.models.workout import ILLNESS_TYPE, WorkoutData, WorkoutEntry
from workout_tracker.services.dates import DateLike, format_date, iter_dates, parse_date
from workout_tracker.services.status import next_status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class WorkoutConflictError(Exception):
    """Target date(s) already hold an entry and overwriting was not allowed."""

    def __init__(self, dates: list[str]) -> None:
        self.dates = dates
        super().__init__(f"Workout already exists on: {', '.join(dates)}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _key(value: DateLike) -> str | None:
    day = parse_date(value)
    return format_date(day) if day is not None else None


def _as_changes(changes: Union[WorkoutEntry, dict[str, Any]]) -> dict[str, Any]:
    if isinstance(changes, WorkoutEntry):
        return changes.model_dump(by_alias=True, exclude_unset=True)
    return dict(changes)


# ---------------------------------------------------------------------------
# Single-entry primitives
# ---------------------------------------------------------------------------

def add_workout(data: WorkoutData, on_date: DateLike, entry: WorkoutEntry) -> WorkoutData:
    """Set the entry for *on_date*, replacing any existing one."""
    key = _key(on_date)
    new_data = dict(data)
    if key is None:
        logger.warning("Not adding workout: invalid date %r", on_date)
        return new_data
    new_data[key] = entry.model_copy(deep=True)
    return new_data


def update_workout(
    data: WorkoutData,
    on_date: DateLike,
    changes: Union[WorkoutEntry, dict[str, Any]],
) -> WorkoutData:
    """Shallow-merge *changes* onto the entry at *on_date*.

    No-op when there is no entry on that date. Dict keys may use either
    the document spelling (``currentOneRM``) or attribute names.
    """
    key = _key(on_date)
    new_data = dict(data)
    if key is None or key not in data:
        return new_data
    merged = {**data[key].to_json(), **_as_changes(changes)}
    new_data[key] = WorkoutEntry.model_validate(merged)
    return new_data


def delete_workout(data: WorkoutData, on_date: DateLike) -> WorkoutData:
    key = _key(on_date)
    new_data = dict(data)
    if key is not None:
        new_data.pop(key, None)
    return new_data


def advance_status(data: WorkoutData, on_date: DateLike) -> WorkoutData:
    """Move the entry at *on_date* to the next status in the toggle cycle."""
    key = _key(on_date)
    if key is None or key not in data:
        return dict(data)
    return update_workout(data, key, {"status": next_status(data[key].status)})


# ---------------------------------------------------------------------------
# Bulk operations
# ---------------------------------------------------------------------------

def move_workout(
    data: WorkoutData,
    from_date: DateLike,
    to_date: DateLike,
    *,
    allow_overwrite: bool = True,
) -> WorkoutData:
    """Reschedule the workout at *from_date* onto *to_date*.

    The source entry stays in place marked ``skipped`` with ``moved_to``
    set; its exercises and notes are kept. The target gets a copy of the
    original entry with ``moved_from`` set. Moving a date that has no
    entry, or onto itself, returns the map unchanged.
    """
    source = _key(from_date)
    target = _key(to_date)
    new_data = dict(data)
    if source is None or target is None or source not in data or source == target:
        return new_data

    if target in data and not allow_overwrite:
        raise WorkoutConflictError([target])

    original = data[source]
    new_data[source] = original.model_copy(
        deep=True,
        update={"status": "skipped", "moved_to": target},
    )
    new_data[target] = original.model_copy(deep=True, update={"moved_from": source})

    logger.debug("Moved workout %s -> %s", source, target)
    return new_data


def mark_illness_period(
    data: WorkoutData,
    start_date: DateLike,
    end_date: DateLike,
    reason: str,
    *,
    allow_overwrite: bool = True,
) -> WorkoutData:
    """Replace every day in ``[start_date, end_date]`` with an illness entry.

    Existing entries in the range are discarded, exercises included.
    """
    days = [format_date(d) for d in iter_dates(start_date, end_date)]
    new_data = dict(data)

    if not allow_overwrite:
        conflicts = [day for day in days if day in data]
        if conflicts:
            raise WorkoutConflictError(conflicts)

    for day in days:
        new_data[day] = WorkoutEntry(status="illness", type=ILLNESS_TYPE, reason=reason)

    logger.debug("Marked %d day(s) as illness from %s", len(days), start_date)
    return new_data
