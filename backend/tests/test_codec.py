"""
Tests for the workout document codec
====================================
Covers:
- Round-trip: parse(serialize(data)) == data, including Cyrillic text,
  optional set fields and the camelCase oneRM keys
- Serialized document layout: heading, workout block, trailing notice,
  2-space indent, unset optional fields omitted
- Parse resilience: empty text, no block, invalid JSON, non-object JSON,
  first block wins
- Validating decode: unknown status -> planned, invalid date keys and
  non-object entries dropped, bad reps -> 0, numeric strings accepted,
  unknown keys preserved
- Exercise library: whole-document JSON, Russian difficulty names,
  malformed exercises dropped, invalid JSON -> empty library

Run: pytest tests/test_codec.py -v
"""

from __future__ import annotations

import json

import pytest

from workout_tracker.models.exercise_library import ExerciseLibrary, ExerciseSpec
from workout_tracker.models.workout import Exercise, WorkoutEntry, WorkoutSet
from workout_tracker.services.codec import (
    DOCUMENT_HEADING,
    DOCUMENT_NOTICE,
    extract_workout_block,
    parse_exercise_library,
    parse_workout_data,
    serialize_exercise_library,
    serialize_workout_data,
)

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _sample_data() -> dict[str, WorkoutEntry]:
    return {
        "2025-10-06": WorkoutEntry(
            status="done",
            type="грудь",
            exercises=[
                Exercise(
                    name="Жим лёжа",
                    current_one_rm=100,
                    sets=[
                        WorkoutSet(reps=10, weight=60, intensity=60, one_rm=100),
                        WorkoutSet(reps=8, weight=65.5, notes="тяжело"),
                    ],
                ),
                Exercise(name="Отжимания", sets=[WorkoutSet(reps=20)]),
            ],
            notes="Хорошая тренировка",
            duration=75,
        ),
        "2025-10-08": WorkoutEntry(status="planned", type="спина"),
        "2025-10-09": WorkoutEntry(status="skipped", type="ноги", moved_to="2025-10-10", reason="работа"),
        "2025-10-10": WorkoutEntry(status="planned", type="ноги", moved_from="2025-10-09"),
    }


def _document(body: str) -> str:
    return f"# Heading\n\nSome prose.\n\n```workout\n{body}\n```\n\nMore prose.\n"


# ---------------------------------------------------------------------------
# Round-trip and layout
# ---------------------------------------------------------------------------

class TestRoundTrip:

    def test_parse_of_serialize_is_identity(self):
        data = _sample_data()
        assert parse_workout_data(serialize_workout_data(data)) == data

    def test_empty_map_round_trips(self):
        assert parse_workout_data(serialize_workout_data({})) == {}

    def test_key_order_is_irrelevant(self):
        data = _sample_data()
        reversed_data = dict(reversed(list(data.items())))
        assert parse_workout_data(serialize_workout_data(reversed_data)) == data


class TestSerializeLayout:

    def test_document_structure(self):
        text = serialize_workout_data(_sample_data())
        assert text.startswith(DOCUMENT_HEADING + "\n")
        assert "```workout\n{" in text
        assert text.rstrip().endswith(DOCUMENT_NOTICE)

    def test_json_uses_two_space_indent_and_keeps_cyrillic(self):
        text = serialize_workout_data({"2025-10-08": WorkoutEntry(status="planned", type="спина")})
        assert '\n  "2025-10-08": {\n    "status": "planned",' in text
        assert "спина" in text

    def test_unset_optional_fields_are_omitted(self):
        text = serialize_workout_data({"2025-10-08": WorkoutEntry(status="planned", type="спина")})
        body = json.loads(extract_workout_block(text))
        assert body == {"2025-10-08": {"status": "planned", "type": "спина"}}

    def test_one_rm_keys_use_document_spelling(self):
        body = json.loads(extract_workout_block(serialize_workout_data(_sample_data())))
        exercise = body["2025-10-06"]["exercises"][0]
        assert exercise["currentOneRM"] == 100
        assert exercise["sets"][0]["oneRM"] == 100
        assert "current_one_rm" not in exercise

    def test_integer_weights_stay_integers(self):
        text = serialize_workout_data(_sample_data())
        assert '"weight": 60,' in text
        assert '"weight": 65.5,' in text


# ---------------------------------------------------------------------------
# Parse resilience
# ---------------------------------------------------------------------------

class TestParseResilience:

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "# Just a note\n\nNo data here.",
            "```json\n{\"2025-10-06\": {\"status\": \"done\", \"type\": \"x\"}}\n```",
            _document("{not json"),
            _document("[1, 2, 3]"),
            _document("\"a string\""),
        ],
    )
    def test_returns_empty_map(self, text: str):
        assert parse_workout_data(text) == {}

    def test_invalid_json_is_logged(self, caplog: pytest.LogCaptureFixture):
        parse_workout_data(_document("{not json"))
        assert "Error parsing workout data" in caplog.text

    def test_deeply_nested_block_returns_empty(self, caplog: pytest.LogCaptureFixture):
        assert parse_workout_data(_document("[" * 200_000)) == {}
        assert "Error parsing workout data" in caplog.text

    def test_first_block_wins(self):
        text = (
            _document('{"2025-10-06": {"status": "done", "type": "первый"}}')
            + _document('{"2025-10-07": {"status": "done", "type": "второй"}}')
        )
        data = parse_workout_data(text)
        assert list(data) == ["2025-10-06"]
        assert data["2025-10-06"].type == "первый"

    def test_surrounding_prose_is_ignored(self):
        data = parse_workout_data(_document('{"2025-10-06": {"status": "planned", "type": "спина"}}'))
        assert data["2025-10-06"].status == "planned"


# ---------------------------------------------------------------------------
# Validating decode
# ---------------------------------------------------------------------------

class TestValidatingDecode:

    def _parse(self, payload: dict) -> dict[str, WorkoutEntry]:
        return parse_workout_data(_document(json.dumps(payload, ensure_ascii=False)))

    def test_unknown_status_defaults_to_planned(self, caplog: pytest.LogCaptureFixture):
        data = self._parse({"2025-10-06": {"status": "finished", "type": "грудь"}})
        assert data["2025-10-06"].status == "planned"
        assert "Unknown workout status" in caplog.text

    def test_missing_type_becomes_empty_string(self):
        data = self._parse({"2025-10-06": {"status": "done"}})
        assert data["2025-10-06"].type == ""

    @pytest.mark.parametrize("key", ["2025-13-01", "tomorrow", "2025-10-06T10:00", ""])
    def test_invalid_date_keys_are_dropped(self, key: str):
        data = self._parse({key: {"status": "done", "type": "x"}, "2025-10-07": {"status": "done", "type": "y"}})
        assert list(data) == ["2025-10-07"]

    @pytest.mark.parametrize("value", [None, 42, "done", ["done"]])
    def test_non_object_entries_are_dropped(self, value):
        data = self._parse({"2025-10-06": value, "2025-10-07": {"status": "done", "type": "y"}})
        assert "2025-10-06" not in data
        assert "2025-10-07" in data

    def test_bad_reps_become_zero(self):
        data = self._parse({
            "2025-10-06": {
                "status": "done",
                "type": "грудь",
                "exercises": [{"name": "Жим", "sets": [{"reps": -3}, {"reps": "abc"}, {}]}],
            }
        })
        assert [s.reps for s in data["2025-10-06"].exercises[0].sets] == [0, 0, 0]

    def test_numeric_strings_are_accepted(self):
        data = self._parse({
            "2025-10-06": {
                "status": "done",
                "type": "грудь",
                "exercises": [{"name": "Жим", "sets": [{"reps": "10", "weight": "62,5"}]}],
            }
        })
        s = data["2025-10-06"].exercises[0].sets[0]
        assert s.reps == 10
        assert s.weight == 62.5

    def test_non_numeric_weight_becomes_none(self):
        data = self._parse({
            "2025-10-06": {
                "status": "done",
                "type": "грудь",
                "exercises": [{"name": "Жим", "sets": [{"reps": 5, "weight": "heavy"}]}],
            }
        })
        assert data["2025-10-06"].exercises[0].sets[0].weight is None

    def test_malformed_exercise_list_is_cleared(self):
        data = self._parse({"2025-10-06": {"status": "done", "type": "x", "exercises": "bench"}})
        assert data["2025-10-06"].exercises is None

    def test_unknown_keys_survive_a_round_trip(self):
        data = self._parse({"2025-10-06": {"status": "done", "type": "x", "rpe": 8}})
        body = json.loads(extract_workout_block(serialize_workout_data(data)))
        assert body["2025-10-06"]["rpe"] == 8


# ---------------------------------------------------------------------------
# Exercise library
# ---------------------------------------------------------------------------

class TestExerciseLibrary:

    def test_round_trip(self):
        library = ExerciseLibrary(exercises={
            "Жим лёжа": ExerciseSpec(
                group="грудь",
                category="грудь",
                difficulty="intermediate",
                muscle_groups=["грудь", "трицепс"],
                default_sets=3,
                default_reps=8,
                current_one_rm=100,
            ),
            "Бег": ExerciseSpec(group="кардио", is_cardio=True),
        })
        assert parse_exercise_library(serialize_exercise_library(library)) == library

    def test_whole_document_is_json(self):
        library = ExerciseLibrary(exercises={"Бег": ExerciseSpec(group="кардио")})
        text = serialize_exercise_library(library)
        assert json.loads(text) == {"exercises": {"Бег": {"group": "кардио"}}}
        assert text.startswith('{\n  "exercises"')

    def test_camel_case_keys(self):
        text = json.dumps({
            "exercises": {
                "Жим лёжа": {
                    "group": "грудь",
                    "muscleGroups": ["грудь"],
                    "currentOneRM": 110,
                    "oneRMHistory": [{"date": "2025-10-01", "value": 110, "notes": "рекорд"}],
                }
            }
        })
        spec = parse_exercise_library(text).exercises["Жим лёжа"]
        assert spec.muscle_groups == ["грудь"]
        assert spec.current_one_rm == 110
        assert spec.one_rm_history[0].notes == "рекорд"

    @pytest.mark.parametrize(
        ("stored", "expected"),
        [("начинающий", "beginner"), ("средний", "intermediate"), ("продвинутый", "advanced"), ("legendary", None)],
    )
    def test_difficulty_names(self, stored: str, expected):
        text = json.dumps({"exercises": {"Жим": {"group": "грудь", "difficulty": stored}}})
        assert parse_exercise_library(text).exercises["Жим"].difficulty == expected

    def test_russian_difficulty_is_saved_in_english(self):
        text = json.dumps({"exercises": {"Жим": {"group": "грудь", "difficulty": "средний"}}}, ensure_ascii=False)
        saved = json.loads(serialize_exercise_library(parse_exercise_library(text)))
        assert saved["exercises"]["Жим"]["difficulty"] == "intermediate"

    def test_malformed_exercises_are_dropped(self):
        text = json.dumps({"exercises": {"Жим": {"group": "грудь"}, "Broken": "nope"}})
        assert list(parse_exercise_library(text).exercises) == ["Жим"]

    @pytest.mark.parametrize("text", ["", "{broken", "[]", '{"exercises": []}'])
    def test_unreadable_library_is_empty(self, text: str):
        assert parse_exercise_library(text).exercises == {}

    def test_deeply_nested_library_is_empty(self, caplog: pytest.LogCaptureFixture):
        assert parse_exercise_library('{"exercises": ' + "[" * 200_000).exercises == {}
        assert "Error parsing exercise library" in caplog.text
