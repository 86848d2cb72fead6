"""Custom exceptions for task management functionality."""


class TaskManagementError(Exception):
    """Base exception for task management errors."""

    pass


class ValidationError(TaskManagementError):
    """Exception raised when task input violates a creation constraint."""

    EMPTY = "empty"
    TOO_LONG = "too_long"
    INVALID_DUE_DATE = "invalid_due_date"

    def __init__(self, constraint: str, message: str) -> None:
        super().__init__(message)
        self.constraint = constraint
        self.message = message


class TaskNotFoundError(TaskManagementError):
    """Exception raised when a task is not found."""

    pass


class StorageError(TaskManagementError):
    """Exception raised for durable storage related errors."""

    pass


class PersistenceReadError(StorageError):
    """Exception raised when the stored task record cannot be decoded."""

    pass


class PersistenceWriteError(StorageError):
    """Exception raised when the task record cannot be written."""

    pass
