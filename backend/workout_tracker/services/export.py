"""
Export Service
==============
Flattens the workout log into a per-set table for spreadsheets, and
summarises progress points per day for the charts.

Column headers are in Russian, matching the labels used in the log.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import pandas as pd

from workout_tracker.models.workout import ProgressDataPoint, WorkoutData

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Column headers
# ---------------------------------------------------------------------------

COL_DATE = "Дата"
COL_STATUS = "Статус"
COL_TYPE = "Тип тренировки"
COL_EXERCISE = "Упражнение"
COL_SET = "Подход"
COL_REPS = "Повторы"
COL_WEIGHT = "Вес"
COL_DURATION = "Длительность"
COL_DISTANCE = "Дистанция"
COL_VOLUME = "Объём"
COL_NOTES = "Заметки"

EXPORT_COLUMNS = [
    COL_DATE, COL_STATUS, COL_TYPE, COL_EXERCISE, COL_SET, COL_REPS,
    COL_WEIGHT, COL_DURATION, COL_DISTANCE, COL_VOLUME, COL_NOTES,
]

PROGRESS_SUMMARY_COLUMNS = ["date", "exercise", "max_weight", "total_reps", "total_volume", "sets"]


def prepare_export_data(data: WorkoutData) -> list[dict]:
    """One row per set. Entries without exercises (illness, skipped days)
    get a single row carrying their notes or reason.

    Missing optional values are exported as empty strings, not zeros.
    """
    rows: list[dict] = []

    for key, entry in data.items():
        if entry.exercises:
            for exercise in entry.exercises:
                for index, s in enumerate(exercise.sets, start=1):
                    rows.append({
                        COL_DATE: key,
                        COL_STATUS: entry.status,
                        COL_TYPE: entry.type,
                        COL_EXERCISE: exercise.name,
                        COL_SET: index,
                        COL_REPS: s.reps,
                        COL_WEIGHT: s.weight or "",
                        COL_DURATION: s.duration or "",
                        COL_DISTANCE: s.distance or "",
                        COL_VOLUME: (s.weight or 0) * s.reps,
                        COL_NOTES: exercise.notes or entry.notes or "",
                    })
        else:
            rows.append({
                COL_DATE: key,
                COL_STATUS: entry.status,
                COL_TYPE: entry.type,
                COL_EXERCISE: "",
                COL_SET: "",
                COL_REPS: "",
                COL_WEIGHT: "",
                COL_DURATION: "",
                COL_DISTANCE: "",
                COL_VOLUME: "",
                COL_NOTES: entry.notes or entry.reason or "",
            })

    return rows


def export_dataframe(data: WorkoutData) -> pd.DataFrame:
    """Export rows as a DataFrame ordered by date (stable within a day)."""
    df = pd.DataFrame(prepare_export_data(data), columns=EXPORT_COLUMNS)
    if df.empty:
        return df
    return df.sort_values(COL_DATE, kind="stable").reset_index(drop=True)


def export_csv(data: WorkoutData, path: Union[str, Path]) -> Path:
    """Write the export table to *path* as UTF-8 CSV (BOM for Excel)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = export_dataframe(data)
    df.to_csv(path, index=False, encoding="utf-8-sig")
    logger.info("Exported %d rows to %s", len(df), path)
    return path


def summarize_progress(points: list[ProgressDataPoint]) -> pd.DataFrame:
    """Per date and exercise: heaviest set, total reps, total volume, set count."""
    if not points:
        return pd.DataFrame(columns=PROGRESS_SUMMARY_COLUMNS)

    df = pd.DataFrame([
        {
            "date": p.date,
            "exercise": p.exercise,
            "weight": p.value,
            "reps": p.reps or 0,
            "volume": p.volume or 0,
        }
        for p in points
    ])

    summary = (
        df.groupby(["date", "exercise"], sort=True)
        .agg(
            max_weight=("weight", "max"),
            total_reps=("reps", "sum"),
            total_volume=("volume", "sum"),
            sets=("weight", "size"),
        )
        .reset_index()
    )
    return summary[PROGRESS_SUMMARY_COLUMNS]
