"""Data models for task management functionality."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class Category(str, Enum):
    """Task category enumeration.

    ``OTHER`` doubles as the fallback for values written by older or
    hand-edited stores that are not one of the known categories.
    """

    PERSONAL = "personal"
    WORK = "work"
    STUDY = "study"
    OTHER = "other"

    @classmethod
    def parse(cls, value: "str | Category | None") -> "Category":
        """Map a raw category value to a member, falling back to OTHER."""
        if isinstance(value, Category):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


class StatusFilter(str, Enum):
    """Status filter enumeration for the task view."""

    ALL = "all"
    COMPLETED = "completed"
    PENDING = "pending"
    OVERDUE = "overdue"


class SortKey(str, Enum):
    """Sort order enumeration for the task view."""

    NEWEST = "newest"
    OLDEST = "oldest"
    DUE_DATE = "dueDate"
    CATEGORY = "category"
    ALPHABETICAL = "alphabetical"


@dataclass
class Task:
    """Represents a task item."""

    id: str
    text: str
    category: Category
    created_at: datetime
    completed: bool = False
    due_date: date | None = None
    completed_at: datetime | None = None


@dataclass(frozen=True)
class TaskSummary:
    """Counts derived from the full task collection."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    overdue: int = 0
