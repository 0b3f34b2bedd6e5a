"""
Tests for the export service
============================
Covers:
- prepare_export_data: one row per set, 1-based set index, volume,
  entries without exercises -> single row with notes / reason
- export_dataframe: column order, sorted by date
- export_csv: file written as UTF-8 with BOM, readable back with pandas
- summarize_progress: per-day aggregation, empty input

Run: pytest tests/test_export.py -v
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from workout_tracker.models.workout import Exercise, WorkoutEntry, WorkoutSet
from workout_tracker.services.aggregation import generate_progress_data
from workout_tracker.services.export import (
    COL_DATE,
    COL_EXERCISE,
    COL_NOTES,
    COL_REPS,
    COL_SET,
    COL_VOLUME,
    COL_WEIGHT,
    EXPORT_COLUMNS,
    PROGRESS_SUMMARY_COLUMNS,
    export_csv,
    export_dataframe,
    prepare_export_data,
    summarize_progress,
)


@pytest.fixture
def log() -> dict[str, WorkoutEntry]:
    return {
        "2025-10-08": WorkoutEntry(status="illness", type="болезнь", reason="простуда"),
        "2025-10-06": WorkoutEntry(
            status="done",
            type="грудь",
            notes="бодро",
            exercises=[
                Exercise(name="Жим лёжа", sets=[WorkoutSet(reps=10, weight=60), WorkoutSet(reps=8, weight=65)]),
                Exercise(name="Отжимания", notes="до отказа", sets=[WorkoutSet(reps=20)]),
            ],
        ),
        "2025-10-07": WorkoutEntry(status="planned", type="спина"),
    }


class TestPrepareExportData:

    def test_one_row_per_set(self, log):
        rows = [r for r in prepare_export_data(log) if r[COL_DATE] == "2025-10-06"]
        assert [(r[COL_EXERCISE], r[COL_SET], r[COL_REPS]) for r in rows] == [
            ("Жим лёжа", 1, 10), ("Жим лёжа", 2, 8), ("Отжимания", 1, 20),
        ]

    def test_volume_and_blank_weight(self, log):
        rows = [r for r in prepare_export_data(log) if r[COL_DATE] == "2025-10-06"]
        assert rows[0][COL_VOLUME] == 600
        assert rows[2][COL_WEIGHT] == ""
        assert rows[2][COL_VOLUME] == 0

    def test_exercise_notes_win_over_entry_notes(self, log):
        rows = [r for r in prepare_export_data(log) if r[COL_DATE] == "2025-10-06"]
        assert rows[0][COL_NOTES] == "бодро"
        assert rows[2][COL_NOTES] == "до отказа"

    def test_entry_without_exercises_gets_one_row(self, log):
        rows = [r for r in prepare_export_data(log) if r[COL_DATE] == "2025-10-08"]
        assert len(rows) == 1
        assert rows[0][COL_EXERCISE] == ""
        assert rows[0][COL_NOTES] == "простуда"

    def test_empty_log(self):
        assert prepare_export_data({}) == []


class TestExportDataFrame:

    def test_columns_and_order(self, log):
        df = export_dataframe(log)
        assert list(df.columns) == EXPORT_COLUMNS
        assert df[COL_DATE].tolist() == ["2025-10-06"] * 3 + ["2025-10-07", "2025-10-08"]

    def test_sets_keep_their_order_within_a_day(self, log):
        df = export_dataframe(log)
        assert df[COL_EXERCISE].tolist()[:3] == ["Жим лёжа", "Жим лёжа", "Отжимания"]

    def test_empty_log(self):
        df = export_dataframe({})
        assert df.empty
        assert list(df.columns) == EXPORT_COLUMNS


class TestExportCsv:

    def test_writes_file_with_bom(self, log, tmp_path: Path):
        path = export_csv(log, tmp_path / "out" / "export.csv")
        assert path.is_file()
        assert path.read_bytes().startswith(b"\xef\xbb\xbf")

    def test_readable_back(self, log, tmp_path: Path):
        path = export_csv(log, tmp_path / "export.csv")
        df = pd.read_csv(path, encoding="utf-8-sig")
        assert list(df.columns) == EXPORT_COLUMNS
        assert len(df) == 5
        assert "Жим лёжа" in df[COL_EXERCISE].tolist()


class TestSummarizeProgress:

    def test_per_day_summary(self, log):
        summary = summarize_progress(generate_progress_data(log, exercise_name="Жим лёжа"))
        assert list(summary.columns) == PROGRESS_SUMMARY_COLUMNS
        assert len(summary) == 1
        row = summary.iloc[0]
        assert row["date"] == "2025-10-06"
        assert row["max_weight"] == 65
        assert row["total_reps"] == 18
        assert row["total_volume"] == 1120
        assert row["sets"] == 2

    def test_groups_by_exercise(self, log):
        summary = summarize_progress(generate_progress_data(log))
        assert summary["exercise"].tolist() == ["Жим лёжа", "Отжимания"]

    def test_empty(self):
        summary = summarize_progress([])
        assert summary.empty
        assert list(summary.columns) == PROGRESS_SUMMARY_COLUMNS
