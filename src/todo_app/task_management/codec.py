"""JSON codec for the durable task record."""

import json
import logging
from collections.abc import Callable
from datetime import UTC, date, datetime
from typing import Any

from todo_app.task_management.exceptions import PersistenceReadError
from todo_app.task_management.models import Category, Task

logger = logging.getLogger(__name__)


def format_timestamp(value: datetime) -> str:
    """
    Format a timestamp as ISO-8601 the way browsers serialize dates.

    UTC values get a ``Z`` suffix and millisecond precision; values carrying
    sub-millisecond digits keep them so decoding reproduces them exactly.

    Args:
        value: Timestamp to format

    Returns:
        ISO-8601 string
    """
    timespec = "milliseconds" if value.microsecond % 1000 == 0 else "microseconds"
    text = value.isoformat(timespec=timespec)
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp; naive values are taken to be UTC.

    Args:
        value: ISO-8601 string, optionally ``Z``-suffixed

    Returns:
        Timezone-aware datetime

    Raises:
        ValueError: If the string is not a valid timestamp
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def task_to_dict(task: Task) -> dict[str, Any]:
    """Convert a task to its stored JSON object."""
    return {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "category": task.category.value,
        "dueDate": task.due_date.isoformat() if task.due_date else None,
        "createdAt": format_timestamp(task.created_at),
        "completedAt": (
            format_timestamp(task.completed_at) if task.completed_at else None
        ),
    }


def _parse_optional(
    data: dict[str, Any], field: str, parser: Callable[[str], Any]
) -> Any:
    # Unparsable optional fields degrade to absent instead of dropping the task
    value = data.get(field)
    if not value:
        return None
    try:
        return parser(value)
    except (TypeError, ValueError) as e:
        logger.warning(
            f"Ignoring unreadable {field} {value!r} of task {data.get('id')!r}: {e}"
        )
        return None


def task_from_dict(data: dict[str, Any]) -> Task:
    """
    Convert a stored JSON object to a task.

    Text length is not re-validated and unknown categories map to
    ``Category.OTHER``. Unreadable ``dueDate``/``completedAt`` values become
    None and a non-boolean ``completed`` is treated as False.

    Args:
        data: Stored task object

    Returns:
        Task object

    Raises:
        KeyError: If ``id``, ``text`` or ``createdAt`` is missing
        TypeError: If ``id`` or ``text`` has the wrong type
        ValueError: If ``createdAt`` cannot be parsed
    """
    task_id = data["id"]
    if isinstance(task_id, bool) or not isinstance(task_id, (str, int)):
        raise TypeError(f"Task id must be a string, got {type(task_id).__name__}")
    text = data["text"]
    if not isinstance(text, str):
        raise TypeError(f"Task text must be a string, got {type(text).__name__}")

    completed = data.get("completed", False)

    return Task(
        id=str(task_id),
        text=text,
        completed=completed if isinstance(completed, bool) else False,
        category=Category.parse(data.get("category")),
        due_date=_parse_optional(data, "dueDate", date.fromisoformat),
        created_at=parse_timestamp(data["createdAt"]),
        completed_at=_parse_optional(data, "completedAt", parse_timestamp),
    )


def encode_tasks(tasks: list[Task]) -> str:
    """Serialize the whole task collection to the stored JSON array."""
    return json.dumps([task_to_dict(task) for task in tasks], ensure_ascii=False)


def decode_tasks(raw: str) -> list[Task]:
    """
    Deserialize the stored JSON array into tasks.

    Entries that cannot be turned into a task are logged and skipped so the
    readable tasks survive (and are kept by the next write).

    Args:
        raw: Stored record contents

    Returns:
        Readable tasks in stored order

    Raises:
        PersistenceReadError: If the record is not valid JSON or not an array
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise PersistenceReadError(f"Stored task record is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise PersistenceReadError(
            f"Stored task record must be a JSON array, got {type(data).__name__}"
        )

    tasks = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            logger.warning(f"Skipping stored task at index {index}: not an object")
            continue
        try:
            tasks.append(task_from_dict(entry))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed stored task at index {index}: {e!r}")

    return tasks
