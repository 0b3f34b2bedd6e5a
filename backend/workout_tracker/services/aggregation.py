"""
Aggregation & Query Service
===========================
Derived statistics over a WorkoutData map: date-range slices, volume,
the exercise / muscle-group vocabularies, progress series and the
counters shown by the year and stats views.

All functions are pure: they read the map and return new values.
Keys that are not valid dates are skipped rather than raising.
"""

from __future__ import annotations

import logging
from typing import Optional

from workout_tracker.models.workout import (
    OTHER_TYPE,
    MonthWorkoutStats,
    ProgressDataPoint,
    WorkoutData,
    WorkoutEntry,
    WorkoutStats,
)
from workout_tracker.services.dates import DateLike, parse_date

logger = logging.getLogger(__name__)


def get_data_for_date_range(data: WorkoutData, start_date: DateLike, end_date: DateLike) -> WorkoutData:
    """Sub-map of entries dated within ``[start_date, end_date]``."""
    start = parse_date(start_date)
    end = parse_date(end_date)
    if start is None or end is None:
        logger.debug("Invalid date range %r..%r", start_date, end_date)
        return {}

    result: WorkoutData = {}
    for key, entry in data.items():
        day = parse_date(key)
        if day is not None and start <= day <= end:
            result[key] = entry
    return result


def calculate_workout_volume(entry: WorkoutEntry) -> float:
    """Sum of ``reps * weight`` over every set. Unweighted sets count as 0."""
    if not entry.exercises:
        return 0
    return sum(
        s.reps * (s.weight or 0)
        for exercise in entry.exercises
        for s in exercise.sets
    )


def get_all_exercises(data: WorkoutData) -> list[str]:
    names = {
        exercise.name
        for entry in data.values()
        for exercise in entry.exercises or []
    }
    return sorted(names)


def get_all_muscle_groups(data: WorkoutData) -> list[str]:
    return sorted({entry.type for entry in data.values() if entry.type})


def generate_progress_data(
    data: WorkoutData,
    exercise_name: Optional[str] = None,
    muscle_group: Optional[str] = None,
) -> list[ProgressDataPoint]:
    """One point per set of every completed workout, oldest first.

    Only entries with status ``done`` contribute. *exercise_name* and
    *muscle_group* are exact-match filters on the exercise name and the
    entry's ``type``.
    """
    points: list[ProgressDataPoint] = []

    for key, entry in data.items():
        if entry.status != "done" or not entry.exercises:
            continue
        if muscle_group and entry.type != muscle_group:
            continue

        for exercise in entry.exercises:
            if exercise_name and exercise.name != exercise_name:
                continue
            for s in exercise.sets:
                weight = s.weight or 0
                points.append(ProgressDataPoint(
                    date=key,
                    value=weight,
                    exercise=exercise.name,
                    muscle_group=entry.type,
                    reps=s.reps,
                    weight=s.weight,
                    volume=weight * s.reps,
                ))

    points.sort(key=lambda p: p.date)
    return points


def get_month_workout_stats(year: int, month: int, data: WorkoutData) -> MonthWorkoutStats:
    """Entry counts for one calendar month (``month`` is 1-12)."""
    stats = MonthWorkoutStats()

    for key, entry in data.items():
        day = parse_date(key)
        if day is None or day.year != year or day.month != month:
            continue

        stats.total_workouts += 1
        if entry.status == "done":
            stats.completed_workouts += 1

        workout_type = entry.type or OTHER_TYPE
        stats.workout_types[workout_type] = stats.workout_types.get(workout_type, 0) + 1

    return stats


def get_year_workout_stats(year: int, data: WorkoutData) -> list[MonthWorkoutStats]:
    """Twelve monthly summaries, January first, for the year view."""
    return [get_month_workout_stats(year, month, data) for month in range(1, 13)]


def calculate_stats(data: WorkoutData) -> WorkoutStats:
    """Status counters and per-type counts over the whole map."""
    stats = WorkoutStats()

    for entry in data.values():
        stats.general.total += 1
        setattr(stats.general, entry.status, getattr(stats.general, entry.status) + 1)
        stats.by_muscle_group[entry.type] = stats.by_muscle_group.get(entry.type, 0) + 1

    return stats
