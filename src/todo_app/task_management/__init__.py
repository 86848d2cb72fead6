"""Task management module: task store, query pipeline and summary counts."""

from .app import TodoApp
from .exceptions import (
    PersistenceReadError,
    PersistenceWriteError,
    TaskNotFoundError,
    ValidationError,
)
from .models import Category, SortKey, StatusFilter, Task, TaskSummary
from .query import TaskQuery, apply_query, is_overdue
from .storage import LocalStorage
from .summary import summarize
from .task_store import TaskStore

__all__ = [
    "Task",
    "Category",
    "StatusFilter",
    "SortKey",
    "TaskSummary",
    "TaskQuery",
    "apply_query",
    "is_overdue",
    "summarize",
    "LocalStorage",
    "TaskStore",
    "TodoApp",
    "ValidationError",
    "TaskNotFoundError",
    "PersistenceReadError",
    "PersistenceWriteError",
]
