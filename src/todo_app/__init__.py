"""Todo App - task list engine with durable local storage."""

__version__ = "0.1.0"
