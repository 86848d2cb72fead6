"""Search, filter and sort pipeline producing the displayed task order."""

import locale
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from todo_app.logging_utils import get_logger
from todo_app.task_management.config import (
    DEFAULT_CATEGORY_FILTER,
    DEFAULT_SORT_KEY,
    DEFAULT_STATUS_FILTER,
)
from todo_app.task_management.models import Category, SortKey, StatusFilter, Task

logger = get_logger(__name__)


def is_overdue(task: Task, now: datetime) -> bool:
    """
    Check whether a task is overdue.

    A task is overdue when it is not completed, has a due date, and that
    date falls on a calendar day strictly before ``now``'s day.

    Only ``now.date()`` is used, in whatever timezone ``now`` carries: pass
    the user's local time (``datetime.now()``) for the user's calendar day.
    An aware UTC value such as ``utc_now()`` yields the UTC day instead.

    Args:
        task: Task to check
        now: Current wall-clock time

    Returns:
        True if the task is overdue
    """
    return (
        not task.completed and task.due_date is not None and task.due_date < now.date()
    )


@dataclass(frozen=True)
class TaskQuery:
    """Current search/filter/sort selections of the task view."""

    search: str = ""
    status: StatusFilter = StatusFilter.ALL
    category: Category | None = None
    sort: SortKey = SortKey.NEWEST

    @classmethod
    def from_values(
        cls,
        search: str = "",
        status: str = DEFAULT_STATUS_FILTER,
        category: str = DEFAULT_CATEGORY_FILTER,
        sort: str = DEFAULT_SORT_KEY,
    ) -> "TaskQuery":
        """
        Build a query from raw selection values.

        Unknown status and sort values fall back to "all" and "newest";
        a category of "all" (or empty) disables category filtering.

        Args:
            search: Search text
            status: Status filter value
            category: Category filter value
            sort: Sort key value

        Returns:
            TaskQuery instance
        """
        return cls(
            search=search or "",
            status=parse_status_filter(status),
            category=parse_category_filter(category),
            sort=parse_sort_key(sort),
        )


def parse_status_filter(value: str | StatusFilter | None) -> StatusFilter:
    """Parse a status filter value, defaulting to ALL."""
    try:
        return StatusFilter(value)
    except ValueError:
        logger.debug(f"Unknown status filter {value!r}, using 'all'")
        return StatusFilter.ALL


def parse_sort_key(value: str | SortKey | None) -> SortKey:
    """Parse a sort key value, defaulting to NEWEST."""
    try:
        return SortKey(value)
    except ValueError:
        logger.debug(f"Unknown sort key {value!r}, using 'newest'")
        return SortKey.NEWEST


def parse_category_filter(value: str | Category | None) -> Category | None:
    """Parse a category filter value; "all" and empty values mean no filter."""
    if value is None or value == "" or value == DEFAULT_CATEGORY_FILTER:
        return None
    return Category.parse(value)


def search_tasks(tasks: Iterable[Task], search: str) -> list[Task]:
    """Keep tasks whose text contains ``search``, ignoring case."""
    needle = search.lower()
    if not needle:
        return list(tasks)
    return [task for task in tasks if needle in task.text.lower()]


def filter_by_status(
    tasks: Iterable[Task], status: StatusFilter, now: datetime
) -> list[Task]:
    """Keep tasks matching a status filter."""
    if status == StatusFilter.COMPLETED:
        return [task for task in tasks if task.completed]
    if status == StatusFilter.PENDING:
        return [task for task in tasks if not task.completed]
    if status == StatusFilter.OVERDUE:
        return [task for task in tasks if is_overdue(task, now)]
    return list(tasks)


def filter_by_category(tasks: Iterable[Task], category: Category | None) -> list[Task]:
    """Keep tasks in ``category``; None keeps everything."""
    if category is None:
        return list(tasks)
    return [task for task in tasks if task.category == category]


def _created_key(task: Task) -> datetime:
    return task.created_at


def _due_date_key(task: Task) -> tuple[bool, date]:
    # Tasks without a due date sort after every task that has one
    return (task.due_date is None, task.due_date or date.min)


def _category_key(task: Task) -> str:
    return task.category.value


def _collate(text: str) -> str:
    # strxfrm rejects embedded NUL characters
    return locale.strxfrm(text.replace("\x00", ""))


def _text_key(task: Task) -> tuple[str, str, str]:
    # Case-insensitive primary ordering, then locale collation of the original
    return (_collate(task.text.casefold()), _collate(task.text), task.text)


_SORT_KEYS: dict[SortKey, Callable[[Task], Any]] = {
    SortKey.NEWEST: _created_key,
    SortKey.OLDEST: _created_key,
    SortKey.DUE_DATE: _due_date_key,
    SortKey.CATEGORY: _category_key,
    SortKey.ALPHABETICAL: _text_key,
}


def sort_tasks(tasks: Iterable[Task], sort: SortKey) -> list[Task]:
    """
    Sort tasks by a sort key.

    All orderings are stable: tasks with equal keys keep their input order.

    Args:
        tasks: Tasks to sort
        sort: Sort key

    Returns:
        New sorted list
    """
    # sorted() with reverse=True still keeps equal elements in input order
    return sorted(tasks, key=_SORT_KEYS[sort], reverse=sort == SortKey.NEWEST)


def apply_query(tasks: Iterable[Task], query: TaskQuery, now: datetime) -> list[Task]:
    """
    Run the full pipeline: search, status filter, category filter, then sort.

    The input collection is never mutated.

    Args:
        tasks: Full task collection
        query: Current selections
        now: Current wall-clock time, used for the overdue filter

    Returns:
        Ordered list of tasks to display
    """
    result = search_tasks(tasks, query.search)
    logger.trace(f"search {query.search!r}: {len(result)} tasks")  # type: ignore[attr-defined]

    result = filter_by_status(result, query.status, now)
    logger.trace(f"status {query.status.value}: {len(result)} tasks")  # type: ignore[attr-defined]

    result = filter_by_category(result, query.category)
    logger.trace(  # type: ignore[attr-defined]
        f"category {query.category.value if query.category else 'all'}: "
        f"{len(result)} tasks"
    )

    return sort_tasks(result, query.sort)
