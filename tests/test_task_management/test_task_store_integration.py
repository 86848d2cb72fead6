"""Integration tests for the Task Store with real SQLite storage."""

import json
from datetime import date, datetime
from pathlib import Path

import pytest

from todo_app.task_management.codec import decode_tasks
from todo_app.task_management.exceptions import PersistenceReadError, ValidationError
from todo_app.task_management.models import StatusFilter
from todo_app.task_management.query import TaskQuery
from todo_app.task_management.storage import LocalStorage
from todo_app.task_management.task_store import TaskStore


@pytest.mark.integration
@pytest.mark.asyncio
class TestTaskStoreIntegration:
    """Integration tests with real storage."""

    async def test_end_to_end_task_lifecycle(self) -> None:
        """Test the study-for-exam lifecycle from creation to deletion."""
        storage = LocalStorage(":memory:")
        store = TaskStore(storage)
        await store.initialize()

        try:
            task = await store.add("Study for exam", "study", "2099-01-01")

            toggled = await store.toggle(task.id)
            assert toggled.completed is True
            assert isinstance(toggled.completed_at, datetime)

            toggled = await store.toggle(task.id)
            assert toggled.completed is False
            assert toggled.completed_at is None

            raw = await storage.get_item("modernTodoTasks")
            assert decode_tasks(raw) == [task]

            assert await store.remove(task.id) is True
            assert await store.remove(task.id) is False
            assert decode_tasks(await storage.get_item("modernTodoTasks")) == []
        finally:
            await store.shutdown()

    async def test_collection_survives_restart(self, tmp_path: Path) -> None:
        db_path = str(tmp_path / "storage.db")

        store = TaskStore(LocalStorage(db_path))
        await store.initialize()
        await store.add("Buy milk", "personal", date(2026, 10, 18))
        report = await store.add("Write report", "work")
        await store.toggle(report.id)
        saved = list(store.tasks)
        await store.shutdown()

        reopened = TaskStore(LocalStorage(db_path))
        await reopened.initialize()
        try:
            assert list(reopened.tasks) == saved
            assert [t.text for t in reopened.tasks] == ["Write report", "Buy milk"]

            now = datetime(2026, 10, 19, 9, 0)
            overdue = reopened.query(TaskQuery(status=StatusFilter.OVERDUE), now)
            assert [t.text for t in overdue] == ["Buy milk"]
            assert reopened.get_summary(now).overdue == 1
        finally:
            await reopened.shutdown()

    async def test_save_then_load_round_trip(self) -> None:
        storage = LocalStorage(":memory:")
        writer = TaskStore(storage)
        await writer.initialize()

        try:
            await writer.add("One", "work")
            await writer.add("Two", "study", "2030-05-05")
            expected = list(writer.tasks)

            reader = TaskStore(storage)
            assert await reader.save(expected) is True
            assert await reader.load() == expected
        finally:
            await writer.shutdown()

    async def test_corrupt_record_starts_empty(self) -> None:
        storage = LocalStorage(":memory:")
        await storage.initialize()
        await storage.set_item("modernTodoTasks", "not json at all")

        store = TaskStore(storage)
        await store.initialize()

        try:
            assert store.tasks == ()
            assert isinstance(store.last_error, PersistenceReadError)

            # The store stays usable and overwrites the corrupt record
            await store.add("Fresh start")
            assert len(decode_tasks(await storage.get_item("modernTodoTasks"))) == 1
        finally:
            await store.shutdown()

    async def test_bad_entry_does_not_lose_good_tasks(self) -> None:
        storage = LocalStorage(":memory:")
        await storage.initialize()
        await storage.set_item(
            "modernTodoTasks",
            json.dumps(
                [
                    {"id": "a", "text": "Keep me", "createdAt": "2026-01-01T00:00:00Z"},
                    {
                        "id": "b",
                        "text": "Bad date",
                        "createdAt": "2026-01-02T00:00:00Z",
                        "dueDate": "2026-02-30",
                    },
                    {"id": "c", "text": "No timestamp"},
                ]
            ),
        )

        store = TaskStore(storage)
        await store.initialize()

        try:
            assert [t.text for t in store.tasks] == ["Keep me", "Bad date"]
            assert store.last_error is None

            await store.add("New")
            stored = decode_tasks(await storage.get_item("modernTodoTasks"))
            assert [t.text for t in stored] == ["New", "Keep me", "Bad date"]
        finally:
            await store.shutdown()

    async def test_validation_error_writes_nothing(self) -> None:
        storage = LocalStorage(":memory:")
        store = TaskStore(storage)
        await store.initialize()

        try:
            with pytest.raises(ValidationError):
                await store.add("", "work", None)
            assert await storage.get_item("modernTodoTasks") is None
        finally:
            await store.shutdown()

    async def test_custom_storage_key(self) -> None:
        storage = LocalStorage(":memory:")
        store = TaskStore(storage, storage_key="otherList")
        await store.initialize()

        try:
            await store.add("Scoped")
            assert await storage.get_item("otherList") is not None
            assert await storage.get_item("modernTodoTasks") is None
        finally:
            await store.shutdown()
