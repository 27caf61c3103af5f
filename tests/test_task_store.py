# tests/test_task_store.py

from __future__ import annotations

import pytest

from taskdash.schemas import TaskPriority, TaskStatus, TaskUpdate
from taskdash.store import TaskStore

from .conftest import OWNER_A, OWNER_B


@pytest.mark.asyncio
async def test_create_then_load_has_one_pending_entry(store: TaskStore) -> None:
    await store.load()
    assert store.tasks == []

    created = await store.create("Water plants", TaskPriority.HIGH)
    assert created is not None

    await store.load()
    matching = [t for t in store.tasks if t.title == "Water plants"]
    assert len(matching) == 1
    assert matching[0].status == TaskStatus.PENDING
    assert matching[0].priority == TaskPriority.HIGH
    assert matching[0].owner_id == OWNER_A


@pytest.mark.asyncio
@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
async def test_blank_create_is_noop_without_remote_call(store: TaskStore, table, title: str) -> None:
    table.seed(OWNER_A, "Existing")
    await store.load()
    before = store.tasks
    table.calls.clear()

    assert await store.create(title, TaskPriority.LOW) is None

    assert store.tasks == before
    assert table.calls == []


@pytest.mark.asyncio
async def test_overlong_title_is_rejected_locally(store: TaskStore, table) -> None:
    assert await store.create("x" * 201) is None
    assert table.calls == []


@pytest.mark.asyncio
async def test_create_defaults_to_medium_priority(store: TaskStore) -> None:
    task = await store.create("Read a book")
    assert task is not None
    assert task.priority == TaskPriority.MEDIUM


@pytest.mark.asyncio
async def test_delete_removes_only_matching_entry(store: TaskStore, table) -> None:
    first = table.seed(OWNER_A, "First")
    second = table.seed(OWNER_A, "Second")
    third = table.seed(OWNER_A, "Third")
    await store.load()
    assert [t.id for t in store.tasks] == [third.id, second.id, first.id]

    assert await store.delete(second.id) is True

    assert store.find(second.id) is None
    assert store.tasks == [third, first]


@pytest.mark.asyncio
async def test_update_status_changes_only_status_and_is_idempotent(store: TaskStore, table) -> None:
    task = table.seed(OWNER_A, "Laundry", priority="low")
    await store.load()

    assert await store.update_status(task.id, TaskStatus.DONE)
    once = store.find(task.id)
    assert await store.update_status(task.id, TaskStatus.DONE)
    twice = store.find(task.id)

    assert once == twice
    assert once.status == TaskStatus.DONE
    assert once.model_dump(exclude={"status"}) == task.model_dump(exclude={"status"})


@pytest.mark.asyncio
async def test_update_priority_changes_only_priority(store: TaskStore, table) -> None:
    task = table.seed(OWNER_A, "Taxes", status="in-progress")
    await store.load()

    assert await store.update_priority(task.id, TaskPriority.HIGH)

    updated = store.find(task.id)
    assert updated.priority == TaskPriority.HIGH
    assert updated.model_dump(exclude={"priority"}) == task.model_dump(exclude={"priority"})


@pytest.mark.asyncio
async def test_status_transitions_are_free(store: TaskStore, table) -> None:
    task = table.seed(OWNER_A, "Anything", status="done")
    await store.load()

    assert await store.update_status(task.id, TaskStatus.PENDING)
    assert store.find(task.id).status == TaskStatus.PENDING
    assert await store.update_status(task.id, TaskStatus.DONE)
    assert await store.update_status(task.id, TaskStatus.IN_PROGRESS)
    assert store.find(task.id).status == TaskStatus.IN_PROGRESS


@pytest.mark.asyncio
async def test_scenario_newest_first(store: TaskStore) -> None:
    await store.load()

    await store.create("Buy milk", TaskPriority.LOW)
    assert len(store.tasks) == 1
    assert store.tasks[0].title == "Buy milk"
    assert store.tasks[0].status == TaskStatus.PENDING
    assert store.tasks[0].priority == TaskPriority.LOW

    await store.create("Call Aai", TaskPriority.HIGH)
    assert [t.title for t in store.tasks] == ["Call Aai", "Buy milk"]

    buy_milk = store.tasks[1]
    await store.delete(buy_milk.id)
    assert [t.title for t in store.tasks] == ["Call Aai"]

    # local prepend order agrees with the table's ordering
    local = store.tasks
    await store.load()
    assert store.tasks == local


@pytest.mark.asyncio
async def test_failed_load_keeps_previous_list(store: TaskStore, table) -> None:
    table.seed(OWNER_A, "Kept")
    await store.load()
    before = store.tasks

    table.seed(OWNER_A, "Never seen")
    table.fail.add("query")

    assert await store.load() is False
    assert store.tasks == before


@pytest.mark.asyncio
async def test_failed_mutations_leave_list_unchanged(store: TaskStore, table) -> None:
    task = table.seed(OWNER_A, "Stable")
    await store.load()
    before = store.tasks
    table.fail.update({"insert", "update", "delete"})

    assert await store.create("New one") is None
    assert await store.update_status(task.id, TaskStatus.DONE) is False
    assert await store.update_priority(task.id, TaskPriority.HIGH) is False
    assert await store.delete(task.id) is False

    assert store.tasks == before


@pytest.mark.asyncio
async def test_owner_cannot_touch_another_owners_task(table) -> None:
    other = table.seed(OWNER_B, "Not yours")
    store = TaskStore(table, OWNER_A)
    await store.load()

    assert store.tasks == []
    assert await store.delete(other.id) is False
    assert await store.update_status(other.id, TaskStatus.DONE) is False
    assert table.rows[other.id] == other


@pytest.mark.asyncio
async def test_filter_is_local_and_keeps_order(store: TaskStore, table) -> None:
    table.seed(OWNER_A, "a", priority="high", status="done")
    table.seed(OWNER_A, "b", priority="low", status="pending")
    table.seed(OWNER_A, "c", priority="high", status="pending")
    await store.load()
    table.calls.clear()

    assert [t.title for t in store.filter(priority=TaskPriority.HIGH)] == ["c", "a"]
    assert [t.title for t in store.filter(status=TaskStatus.PENDING)] == ["c", "b"]
    assert [t.title for t in store.filter(TaskStatus.PENDING, TaskPriority.HIGH)] == ["c"]
    assert len(store.filter()) == 3
    assert table.calls == []


@pytest.mark.asyncio
async def test_update_with_two_fields_fails_as_a_whole(store: TaskStore, table) -> None:
    task = table.seed(OWNER_A, "Both", priority="low")
    await store.load()
    table.fail.add("update")

    patch = TaskUpdate(status=TaskStatus.DONE, priority=TaskPriority.HIGH)
    assert await store.update(task.id, patch) is False
    assert store.find(task.id) == task

    table.fail.clear()
    assert await store.update(task.id, patch) is True
    current = store.find(task.id)
    assert (current.status, current.priority) == (TaskStatus.DONE, TaskPriority.HIGH)
    assert table.rows[task.id] == current
