"""Task Store owning the task collection and its durable record."""

import logging
import secrets
import time
from collections.abc import Callable
from datetime import UTC, date, datetime

from .codec import decode_tasks, encode_tasks
from .config import DEFAULT_STORAGE_KEY, MAX_TASK_TEXT_LENGTH
from .exceptions import (
    PersistenceReadError,
    PersistenceWriteError,
    StorageError,
    TaskNotFoundError,
    ValidationError,
)
from .models import Category, Task, TaskSummary
from .query import TaskQuery, apply_query
from .storage import LocalStorage
from .summary import summarize

logger = logging.getLogger(__name__)

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

ErrorCallback = Callable[[StorageError], None]


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def generate_task_id() -> str:
    """
    Generate an opaque task identifier.

    Millisecond timestamp in base 36 followed by 52 random bits in base 36.
    """
    return _to_base36(time.time_ns() // 1_000_000) + _to_base36(secrets.randbits(52))


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds, matching the stored precision."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond - now.microsecond % 1000)


def validate_text(text: str) -> str:
    """
    Trim and validate task text.

    Args:
        text: Raw text from the add form

    Returns:
        Trimmed text

    Raises:
        ValidationError: If the text is empty after trimming or too long
    """
    trimmed = text.strip()
    if not trimmed:
        raise ValidationError(ValidationError.EMPTY, "Task text must not be empty")
    if len(trimmed) > MAX_TASK_TEXT_LENGTH:
        raise ValidationError(
            ValidationError.TOO_LONG,
            f"Task text must be at most {MAX_TASK_TEXT_LENGTH} characters "
            f"(got {len(trimmed)})",
        )
    return trimmed


def _parse_due_date(value: date | str | None) -> date | None:
    if value is None or isinstance(value, date):
        return value
    if not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError as e:
        raise ValidationError(
            ValidationError.INVALID_DUE_DATE, f"Invalid due date: {value!r}"
        ) from e


class TaskStore:
    """
    Owns the task collection and mediates all mutation and persistence.

    Every mutating operation writes the whole collection exactly once.
    Storage failures never propagate: they are logged, kept in
    ``last_error`` and passed to the error callback, while the in-memory
    collection stays authoritative.
    """

    def __init__(
        self,
        storage: LocalStorage,
        storage_key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = generate_task_id,
    ) -> None:
        """
        Initialize Task Store.

        Args:
            storage: Durable storage holding the task record
            storage_key: Name of the entry holding the task record
            clock: Source of creation/completion timestamps
            id_factory: Source of new task identifiers
        """
        self._storage = storage
        self._storage_key = storage_key
        self._clock = clock
        self._id_factory = id_factory
        self._tasks: list[Task] = []
        self._error_callback: ErrorCallback | None = None
        self._initialized = False
        self.last_error: StorageError | None = None

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Tasks in stored order (newest first)."""
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def set_error_callback(self, callback: ErrorCallback | None) -> None:
        """
        Set callback for recoverable storage errors.

        Args:
            callback: Function called with the PersistenceReadError or
                PersistenceWriteError that was recovered from
        """
        self._error_callback = callback

    def _report_error(self, error: StorageError) -> None:
        self.last_error = error
        if self._error_callback:
            self._error_callback(error)

    async def initialize(self) -> None:
        """
        Open storage and load the stored collection.

        Raises:
            StorageError: If the storage itself cannot be opened
        """
        logger.info("Initializing Task Store")
        await self._storage.initialize()
        await self.load()
        self._initialized = True
        logger.info(f"Task Store initialized with {len(self._tasks)} tasks")

    async def load(self) -> list[Task]:
        """
        Load the collection from durable storage.

        A missing record yields an empty collection. A corrupt record also
        yields an empty collection; the PersistenceReadError is logged and
        reported rather than raised.

        Returns:
            Loaded tasks in stored order
        """
        try:
            raw = await self._storage.get_item(self._storage_key)
            tasks = decode_tasks(raw) if raw is not None else []
        except PersistenceReadError as e:
            logger.warning(f"Error loading tasks, starting with an empty list: {e}")
            self._report_error(e)
            tasks = []

        self._tasks = tasks
        return list(tasks)

    async def save(self, tasks: list[Task] | None = None) -> bool:
        """
        Write the whole collection to durable storage.

        Args:
            tasks: Collection to write; defaults to the store's own collection

        Returns:
            True if written, False if the write failed (error is reported)
        """
        payload = encode_tasks(self._tasks if tasks is None else tasks)
        try:
            await self._storage.set_item(self._storage_key, payload)
        except PersistenceWriteError as e:
            logger.error(f"Error saving tasks: {e}")
            self._report_error(e)
            return False
        return True

    def get_task(self, task_id: str) -> Task:
        """
        Get a task by ID.

        Args:
            task_id: Task identifier

        Returns:
            Task object

        Raises:
            TaskNotFoundError: If task not found
        """
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise TaskNotFoundError(f"Task with ID {task_id} not found")

    def find_task(self, task_id: str) -> Task | None:
        """Get a task by ID, or None if it does not exist."""
        try:
            return self.get_task(task_id)
        except TaskNotFoundError:
            return None

    def _new_id(self) -> str:
        existing = {task.id for task in self._tasks}
        task_id = self._id_factory()
        while task_id in existing:
            logger.debug(f"Generated task ID {task_id} collides, regenerating")
            task_id = self._id_factory()
        return task_id

    async def add(
        self,
        text: str,
        category: Category | str = Category.PERSONAL,
        due_date: date | str | None = None,
    ) -> Task:
        """
        Add a new task at the front of the collection.

        Args:
            text: Task text; surrounding whitespace is trimmed
            category: Task category; unknown values map to Category.OTHER
            due_date: Optional due date (date or YYYY-MM-DD string)

        Returns:
            The created task

        Raises:
            ValidationError: If the text is empty or too long, or the due
                date cannot be parsed; the collection is left unchanged
        """
        trimmed = validate_text(text)
        parsed_due_date = _parse_due_date(due_date)

        task = Task(
            id=self._new_id(),
            text=trimmed,
            category=Category.parse(category),
            created_at=self._clock(),
            due_date=parsed_due_date,
        )

        self._tasks.insert(0, task)
        await self.save()

        logger.info(f"Added task {task.id}: {task.text}")
        return task

    async def toggle(self, task_id: str) -> Task | None:
        """
        Flip a task's completion state.

        Args:
            task_id: Task identifier

        Returns:
            The updated task, or None if no task has this ID (nothing is
            written in that case)
        """
        task = self.find_task(task_id)
        if task is None:
            logger.debug(f"Toggle ignored, task {task_id} not found")
            return None

        task.completed = not task.completed
        task.completed_at = self._clock() if task.completed else None
        await self.save()

        logger.info(
            f"Task {task_id} marked {'completed' if task.completed else 'pending'}"
        )
        return task

    async def remove(self, task_id: str) -> bool:
        """
        Delete a task.

        Args:
            task_id: Task identifier

        Returns:
            True if a task was removed, False if no task has this ID
        """
        remaining = [task for task in self._tasks if task.id != task_id]
        if len(remaining) == len(self._tasks):
            logger.debug(f"Remove ignored, task {task_id} not found")
            return False

        self._tasks = remaining
        await self.save()

        logger.info(f"Deleted task {task_id}")
        return True

    def query(self, query: TaskQuery, now: datetime) -> list[Task]:
        """Run the query pipeline over the current collection."""
        return apply_query(self._tasks, query, now)

    def get_summary(self, now: datetime | None = None) -> TaskSummary:
        """Summary counts over the current collection."""
        return summarize(self._tasks, now)

    async def shutdown(self) -> None:
        """
        Shutdown the store and close storage.

        Handles errors gracefully to ensure cleanup completes.
        """
        logger.info("Shutting down Task Store")
        try:
            await self._storage.close()
        except Exception as e:
            logger.error(f"Error closing storage: {e}")

        self._tasks.clear()
        self._initialized = False
