"""Configuration constants for task management functionality."""

import os

# Storage Configuration
DEFAULT_STORAGE_PATH = os.environ.get(
    "TODO_APP_STORAGE_PATH", os.path.expanduser("~/.todo-app/storage.db")
)
DEFAULT_STORAGE_KEY = "modernTodoTasks"
DEFAULT_WAL_MODE = True

# Task Validation
MAX_TASK_TEXT_LENGTH = 200

# View Defaults
DEFAULT_STATUS_FILTER = "all"
DEFAULT_SORT_KEY = "newest"
DEFAULT_CATEGORY_FILTER = "all"
DEFAULT_CATEGORY = "personal"

# Seconds the view waits for the removal animation before deleting
DELETE_ANIMATION_DELAY = 0.3

# Category Display
CATEGORY_EMOJIS = {
    "personal": "📱",
    "work": "💼",
    "study": "📚",
}
FALLBACK_CATEGORY_EMOJI = "📝"

# User-facing Messages
MSG_EMPTY_TEXT = "Please enter a task description"
MSG_TEXT_TOO_LONG = (
    f"Task description must be less than {MAX_TASK_TEXT_LENGTH} characters"
)
MSG_TASK_ADDED = "Task added successfully!"
MSG_TASK_DELETED = "Task deleted successfully!"
MSG_SAVE_FAILED = "Failed to save tasks. Storage might be full."
