"""Display formatting for task fields."""

from datetime import date, datetime

from .config import CATEGORY_EMOJIS, FALLBACK_CATEGORY_EMOJI
from .models import Category


def category_emoji(category: Category | str) -> str:
    """Emoji marker for a category, with a generic marker for unknown ones."""
    value = category.value if isinstance(category, Category) else category
    return CATEGORY_EMOJIS.get(value, FALLBACK_CATEGORY_EMOJI)


def category_label(category: Category | str) -> str:
    """Capitalized category name, e.g. "Work"."""
    value = category.value if isinstance(category, Category) else category
    return value[:1].upper() + value[1:]


def format_due_date(due_date: date, today: date) -> str:
    """
    Format a due date relative to today.

    Within a week either side the label is relative ("Today", "Tomorrow",
    "In 3 days", "2 days ago"); further out it is an absolute short date,
    with the year only when it differs from the current year.

    Args:
        due_date: Due date to format
        today: Current calendar date

    Returns:
        Display label
    """
    diff_days = (due_date - today).days

    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Tomorrow"
    if diff_days == -1:
        return "Yesterday"
    if 0 < diff_days <= 7:
        return f"In {diff_days} days"
    if -7 <= diff_days < 0:
        return f"{abs(diff_days)} days ago"

    label = f"{due_date:%b} {due_date.day}"
    if due_date.year != today.year:
        label += f", {due_date.year}"
    return label


def format_current_date(now: datetime) -> str:
    """Long form of the current date, e.g. "Monday, October 19, 2026"."""
    return f"{now:%A}, {now:%B} {now.day}, {now.year}"
