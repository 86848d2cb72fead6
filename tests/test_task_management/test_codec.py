"""Tests for the durable task record codec."""

import json
from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from todo_app.task_management.codec import (
    decode_tasks,
    encode_tasks,
    format_timestamp,
    parse_timestamp,
    task_to_dict,
)
from todo_app.task_management.exceptions import PersistenceReadError
from todo_app.task_management.models import Category, Task


@pytest.fixture
def sample_tasks() -> list[Task]:
    """Create a small well-formed collection."""
    return [
        Task(
            id="lq2x8k1abc",
            text="Study for exam",
            category=Category.STUDY,
            created_at=datetime(2026, 10, 18, 9, 30, 0, 125000, tzinfo=UTC),
            due_date=date(2099, 1, 1),
        ),
        Task(
            id="lq2x8k0xyz",
            text="Write report",
            category=Category.WORK,
            created_at=datetime(2026, 10, 17, 8, 0, tzinfo=UTC),
            completed=True,
            completed_at=datetime(2026, 10, 18, 12, 15, 30, 5, tzinfo=UTC),
        ),
    ]


@pytest.mark.unit
class TestTimestamps:
    """Test timestamp formatting and parsing."""

    def test_utc_timestamp_uses_z_suffix_and_milliseconds(self) -> None:
        value = datetime(2026, 10, 19, 14, 5, 9, 120000, tzinfo=UTC)
        assert format_timestamp(value) == "2026-10-19T14:05:09.120Z"

    def test_parses_browser_style_timestamp(self) -> None:
        parsed = parse_timestamp("2026-10-19T14:05:09.120Z")
        assert parsed == datetime(2026, 10, 19, 14, 5, 9, 120000, tzinfo=UTC)

    def test_naive_timestamp_is_taken_as_utc(self) -> None:
        parsed = parse_timestamp("2026-10-19T14:05:09")
        assert parsed.tzinfo is not None
        assert parsed.utcoffset() == timedelta(0)

    def test_offset_timestamp_keeps_instant(self) -> None:
        tz = timezone(timedelta(hours=2))
        value = datetime(2026, 10, 19, 16, 0, tzinfo=tz)
        assert parse_timestamp(format_timestamp(value)) == value


@pytest.mark.unit
class TestEncode:
    """Test serialization of the task collection."""

    def test_field_names_match_stored_record(self, sample_tasks: list[Task]) -> None:
        data = task_to_dict(sample_tasks[0])
        assert data == {
            "id": "lq2x8k1abc",
            "text": "Study for exam",
            "completed": False,
            "category": "study",
            "dueDate": "2099-01-01",
            "createdAt": "2026-10-18T09:30:00.125Z",
            "completedAt": None,
        }

    def test_encodes_json_array_in_collection_order(
        self, sample_tasks: list[Task]
    ) -> None:
        data = json.loads(encode_tasks(sample_tasks))
        assert [entry["id"] for entry in data] == ["lq2x8k1abc", "lq2x8k0xyz"]

    def test_empty_collection(self) -> None:
        assert encode_tasks([]) == "[]"

    def test_round_trip_reproduces_tasks(self, sample_tasks: list[Task]) -> None:
        assert decode_tasks(encode_tasks(sample_tasks)) == sample_tasks


@pytest.mark.unit
class TestDecode:
    """Test deserialization and tolerance of stored records."""

    def test_decodes_browser_record(self) -> None:
        raw = json.dumps(
            [
                {
                    "id": "m1abc",
                    "text": "Buy milk",
                    "completed": False,
                    "category": "personal",
                    "dueDate": "2026-10-18",
                    "createdAt": "2026-10-17T10:00:00.000Z",
                    "completedAt": None,
                }
            ]
        )

        tasks = decode_tasks(raw)

        assert len(tasks) == 1
        assert tasks[0].text == "Buy milk"
        assert tasks[0].category is Category.PERSONAL
        assert tasks[0].due_date == date(2026, 10, 18)
        assert tasks[0].completed_at is None

    def test_unknown_category_falls_back_to_other(self) -> None:
        raw = json.dumps(
            [{"id": "a", "text": "x", "category": "errands", "createdAt": "2026-01-01T00:00:00Z"}]
        )
        assert decode_tasks(raw)[0].category is Category.OTHER

    def test_over_length_text_is_tolerated(self) -> None:
        text = "x" * 500
        raw = json.dumps([{"id": "a", "text": text, "createdAt": "2026-01-01T00:00:00Z"}])
        assert decode_tasks(raw)[0].text == text

    def test_missing_optional_fields_use_defaults(self) -> None:
        raw = json.dumps([{"id": "a", "text": "x", "createdAt": "2026-01-01T00:00:00Z"}])
        task = decode_tasks(raw)[0]
        assert task.completed is False
        assert task.due_date is None
        assert task.completed_at is None

    @pytest.mark.parametrize("raw", ["{not json", '{"id": "a"}', '"tasks"', "null"])
    def test_unreadable_record_raises_read_error(self, raw: str) -> None:
        with pytest.raises(PersistenceReadError):
            decode_tasks(raw)

    @pytest.mark.parametrize(
        "bad_entry",
        [
            1,
            {"text": "no id", "createdAt": "2026-01-01T00:00:00Z"},
            {"id": "b", "text": "no timestamp"},
            {"id": "b", "text": 5, "createdAt": "2026-01-01T00:00:00Z"},
            {"id": "b", "text": "x", "createdAt": "yesterday"},
        ],
    )
    def test_malformed_entry_is_skipped(self, bad_entry: object) -> None:
        good = {"id": "a", "text": "Keep me", "createdAt": "2026-01-01T00:00:00Z"}
        tasks = decode_tasks(json.dumps([good, bad_entry]))
        assert [task.text for task in tasks] == ["Keep me"]

    @pytest.mark.parametrize("due_date", ["2026-02-30", "soon", 17])
    def test_unreadable_due_date_becomes_absent(self, due_date: object) -> None:
        raw = json.dumps(
            [
                {
                    "id": "a",
                    "text": "Keep me",
                    "createdAt": "2026-01-01T00:00:00Z",
                    "dueDate": due_date,
                }
            ]
        )
        task = decode_tasks(raw)[0]
        assert task.text == "Keep me"
        assert task.due_date is None

    def test_unreadable_completed_at_becomes_absent(self) -> None:
        raw = json.dumps(
            [
                {
                    "id": "a",
                    "text": "x",
                    "completed": True,
                    "createdAt": "2026-01-01T00:00:00Z",
                    "completedAt": "whenever",
                }
            ]
        )
        task = decode_tasks(raw)[0]
        assert task.completed is True
        assert task.completed_at is None

    @pytest.mark.parametrize("completed", ["false", "true", 1, None])
    def test_non_boolean_completed_is_false(self, completed: object) -> None:
        raw = json.dumps(
            [
                {
                    "id": "a",
                    "text": "x",
                    "completed": completed,
                    "createdAt": "2026-01-01T00:00:00Z",
                }
            ]
        )
        assert decode_tasks(raw)[0].completed is False
