"""View-facing controller combining the Task Store with the current selections."""

import asyncio
import dataclasses
import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from .config import (
    DEFAULT_CATEGORY,
    DELETE_ANIMATION_DELAY,
    MSG_EMPTY_TEXT,
    MSG_SAVE_FAILED,
    MSG_TASK_ADDED,
    MSG_TASK_DELETED,
    MSG_TEXT_TOO_LONG,
)
from .exceptions import PersistenceWriteError, StorageError, ValidationError
from .models import Category, Task, TaskSummary
from .query import (
    TaskQuery,
    parse_category_filter,
    parse_sort_key,
    parse_status_filter,
)
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class NotificationLevel(str, Enum):
    """Notification level enumeration."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """Non-blocking, toast-style message for the user."""

    level: NotificationLevel
    message: str


@dataclass
class AddTaskOutcome:
    """Result of submitting the add-task form."""

    task: Task | None = None
    field_error: str | None = None
    constraint: str | None = None

    @property
    def success(self) -> bool:
        return self.task is not None


@dataclass(frozen=True)
class EmptyState:
    """Placeholder shown when the task view has nothing to display."""

    title: str
    message: str


NO_TASKS_YET = EmptyState("No tasks yet", "Add your first task to get started!")
NO_TASKS_FOUND = EmptyState("No tasks found", "Try adjusting your search or filters.")


class TodoApp:
    """
    Controller between a view and the Task Store.

    Holds the current search/filter/sort selections, the pending delete of
    the two-phase delete protocol, and the queue of notifications the view
    should display.
    """

    def __init__(
        self, store: TaskStore, delete_delay: float = DELETE_ANIMATION_DELAY
    ) -> None:
        """
        Initialize the controller.

        Args:
            store: Task Store owning the task collection
            delete_delay: Seconds to wait between confirming a delete and
                removing the task, so the view can play its animation
        """
        self._store = store
        self._delete_delay = delete_delay
        self._query = TaskQuery()
        self._pending_delete: str | None = None
        self._notifications: list[Notification] = []
        self._store.set_error_callback(self._on_storage_error)

    @property
    def store(self) -> TaskStore:
        return self._store

    @property
    def query(self) -> TaskQuery:
        """Current selections."""
        return self._query

    @property
    def pending_delete(self) -> str | None:
        """ID of the task awaiting delete confirmation, if any."""
        return self._pending_delete

    async def initialize(self) -> None:
        """Load the stored collection."""
        await self._store.initialize()

    async def shutdown(self) -> None:
        """Close the store."""
        self._pending_delete = None
        await self._store.shutdown()

    def _notify(self, level: NotificationLevel, message: str) -> None:
        self._notifications.append(Notification(level, message))

    def _on_storage_error(self, error: StorageError) -> None:
        # Read errors are recovered silently; only failed writes reach the user
        if isinstance(error, PersistenceWriteError):
            self._notify(NotificationLevel.ERROR, MSG_SAVE_FAILED)

    def drain_notifications(self) -> list[Notification]:
        """Return and clear the queued notifications."""
        notifications, self._notifications = self._notifications, []
        return notifications

    def set_search(self, search: str) -> None:
        self._query = dataclasses.replace(self._query, search=search or "")

    def clear_search(self) -> None:
        self.set_search("")

    def set_status_filter(self, status: str) -> None:
        self._query = dataclasses.replace(
            self._query, status=parse_status_filter(status)
        )

    def set_category_filter(self, category: str) -> None:
        self._query = dataclasses.replace(
            self._query, category=parse_category_filter(category)
        )

    def set_sort(self, sort: str) -> None:
        self._query = dataclasses.replace(self._query, sort=parse_sort_key(sort))

    async def add_task(
        self,
        text: str,
        category: Category | str = DEFAULT_CATEGORY,
        due_date: date | str | None = None,
    ) -> AddTaskOutcome:
        """
        Handle the add-task form.

        Args:
            text: Task text as typed
            category: Selected category
            due_date: Selected due date, if any

        Returns:
            AddTaskOutcome with the new task, or the message to show next to
            the offending field
        """
        try:
            task = await self._store.add(text, category, due_date)
        except ValidationError as e:
            if e.constraint == ValidationError.EMPTY:
                message = MSG_EMPTY_TEXT
            elif e.constraint == ValidationError.TOO_LONG:
                message = MSG_TEXT_TOO_LONG
            else:
                message = e.message
            logger.debug(f"Add task rejected ({e.constraint}): {e.message}")
            return AddTaskOutcome(field_error=message, constraint=e.constraint)

        self._notify(NotificationLevel.SUCCESS, MSG_TASK_ADDED)
        return AddTaskOutcome(task=task)

    async def toggle_task(self, task_id: str) -> Task | None:
        """Toggle completion; unknown IDs are ignored."""
        task = await self._store.toggle(task_id)
        if task is not None:
            action = "completed" if task.completed else "uncompleted"
            self._notify(NotificationLevel.SUCCESS, f"Task {action}!")
        return task

    def request_delete(self, task_id: str) -> Task | None:
        """
        First phase of a delete: remember the task awaiting confirmation.

        Returns:
            The task to preview in the confirmation prompt, or None if no
            task has this ID
        """
        task = self._store.find_task(task_id)
        self._pending_delete = task.id if task else None
        return task

    def cancel_delete(self) -> None:
        """Abandon the pending delete; the collection is untouched."""
        self._pending_delete = None

    async def confirm_delete(self) -> bool:
        """
        Second phase of a delete: wait for the animation, then remove.

        The delete is dropped if it was cancelled, or replaced by a request
        for another task, while waiting.

        Returns:
            True if a task was removed
        """
        task_id = self._pending_delete
        if task_id is None:
            return False

        if self._delete_delay > 0:
            await asyncio.sleep(self._delete_delay)
            if self._pending_delete != task_id:
                logger.debug(f"Delete of task {task_id} abandoned during animation")
                return False

        removed = await self._store.remove(task_id)
        self._pending_delete = None
        if removed:
            self._notify(NotificationLevel.SUCCESS, MSG_TASK_DELETED)
        return removed

    def visible_tasks(self, now: datetime | None = None) -> list[Task]:
        """Tasks to display, in display order.

        ``now`` defaults to naive local time, so the overdue filter follows
        the local calendar day.
        """
        return self._store.query(self._query, now or datetime.now())

    def summary(self, now: datetime | None = None) -> TaskSummary:
        """Summary counts; ``now`` defaults to naive local time."""
        return self._store.get_summary(now)

    def empty_state(self, now: datetime | None = None) -> EmptyState | None:
        """
        Placeholder to show instead of the task list.

        Returns:
            None when there are tasks to display, otherwise the placeholder
            for an empty collection or for filters matching nothing
        """
        if self.visible_tasks(now):
            return None
        return NO_TASKS_YET if len(self._store) == 0 else NO_TASKS_FOUND
