"""Summary counts over the full task collection."""

from collections.abc import Iterable
from datetime import datetime

from todo_app.task_management.models import Task, TaskSummary
from todo_app.task_management.query import is_overdue


def summarize(tasks: Iterable[Task], now: datetime | None = None) -> TaskSummary:
    """
    Count total, completed, pending and overdue tasks.

    Overdue uses the same predicate as the "overdue" status filter, so the
    count always matches the size of that view.

    Args:
        tasks: Full (unfiltered) task collection
        now: Current wall-clock time; defaults to naive local time
            (``datetime.now()``), so "today" is the local calendar day even
            though task timestamps are stored in UTC

    Returns:
        TaskSummary with the four counts
    """
    if now is None:
        now = datetime.now()

    total = 0
    completed = 0
    overdue = 0
    for task in tasks:
        total += 1
        if task.completed:
            completed += 1
        elif is_overdue(task, now):
            overdue += 1

    return TaskSummary(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
    )
