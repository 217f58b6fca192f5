# tests/test_persistence.py

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

from memtodo.store.models import NewTask, Priority, Snapshot, TaskPatch, User, utcnow
from memtodo.store.persistence import (
    CURRENT_USER_KEY,
    TASKS_KEY,
    USERS_KEY,
    InMemoryStorage,
    JsonFileStorage,
    StoragePersistence,
)
from memtodo.store.record_store import RecordStore

from .conftest import DEMO_ID
from .fakes import FailingPersistence, RecordingPersistence


def test_round_trip_through_storage(storage: InMemoryStorage) -> None:
    store = RecordStore(StoragePersistence(storage))
    store.set_current_user(DEMO_ID)
    due = utcnow() + timedelta(days=2)
    task = store.create_task(
        DEMO_ID,
        NewTask(title="Buy milk", description="2 litres", priority=Priority.MEDIUM, due_date=due),
    )

    reloaded = RecordStore(StoragePersistence(storage))

    assert reloaded.find_task_by_id(task.id, DEMO_ID) == task
    assert reloaded.current_user_id == DEMO_ID
    assert [u.id for u in reloaded.get_all_users()] == ["1", "2"]


def test_three_fixed_keys_are_written(storage: InMemoryStorage) -> None:
    store = RecordStore(StoragePersistence(storage))
    store.set_current_user(DEMO_ID)

    assert set(storage.keys()) == {USERS_KEY, TASKS_KEY, CURRENT_USER_KEY}
    users = json.loads(storage.get_item(USERS_KEY))
    assert users[0]["created_at"].endswith("+00:00")

    store.set_current_user(None)
    assert storage.get_item(CURRENT_USER_KEY) is None


def test_seed_is_not_persisted_until_first_mutation(storage: InMemoryStorage) -> None:
    RecordStore(StoragePersistence(storage))
    assert storage.keys() == []


def test_corrupt_storage_falls_back_to_seed() -> None:
    storage = InMemoryStorage({USERS_KEY: "{not json", TASKS_KEY: "[]"})

    store = RecordStore(StoragePersistence(storage))

    assert [u.email for u in store.get_all_users()] == ["demo@example.com", "test@example.com"]
    assert store.get_all_tasks() == []


def test_load_failure_and_save_failure_never_propagate() -> None:
    persistence = FailingPersistence()
    store = RecordStore(persistence)

    task = store.create_task(DEMO_ID, NewTask(title="still works"))
    store.update_task(task.id, DEMO_ID, TaskPatch(completed=True))
    store.clear()

    assert persistence.save_calls == 2
    assert [u.id for u in store.get_all_users()] == ["1", "2"]


def test_snapshot_with_users_is_used_as_is() -> None:
    now = utcnow()
    only = User(id="42", email="solo@x.com", password="pw", name="Solo", created_at=now, updated_at=now)
    persistence = RecordingPersistence(initial=Snapshot(users=[only], tasks=[], current_user_id="42"))

    store = RecordStore(persistence)

    assert store.get_all_users() == [only]
    assert store.get_current_user() == only


def test_snapshot_without_users_gets_seeded() -> None:
    persistence = RecordingPersistence(initial=Snapshot())
    store = RecordStore(persistence)
    assert len(store.get_all_users()) == 2


def test_every_mutation_saves_full_snapshot() -> None:
    persistence = RecordingPersistence()
    store = RecordStore(persistence)

    store.set_current_user(DEMO_ID)
    task = store.create_task(DEMO_ID, NewTask(title="t"))
    store.delete_task(task.id, DEMO_ID)
    store.clear()

    assert len(persistence.saved) == 3
    assert persistence.saved[1].tasks[0].id == task.id
    assert persistence.saved[2].tasks == []
    assert persistence.cleared == 1


def test_json_file_storage_survives_new_instance(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    first = JsonFileStorage(path)
    first.set_item("a", "1")
    first.set_item("b", "2")
    first.remove_item("a")

    second = JsonFileStorage(path)
    assert second.get_item("a") is None
    assert second.get_item("b") == "2"
    assert json.loads(path.read_text("utf-8")) == {"b": "2"}


def test_store_over_json_file_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    store = RecordStore(StoragePersistence(JsonFileStorage(path)))
    user = store.create_user(email="new@x.com", password="pw1", name="new")
    task = store.create_task(user.id, NewTask(title="Buy milk"))

    reloaded = RecordStore(StoragePersistence(JsonFileStorage(path)))

    assert reloaded.find_user_by_email("new@x.com") == user
    assert reloaded.find_task_by_id(task.id, user.id) == task


def test_json_file_that_is_not_an_object_falls_back_to_seed(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[1, 2, 3]", "utf-8")

    store = RecordStore(StoragePersistence(JsonFileStorage(path)))

    assert len(store.get_all_users()) == 2


def test_corrupt_json_file_is_replaced_by_the_next_mutation(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{not json", "utf-8")

    store = RecordStore(StoragePersistence(JsonFileStorage(path)))
    assert len(store.get_all_users()) == 2
    task = store.create_task(DEMO_ID, NewTask(title="after corruption"))

    reloaded = RecordStore(StoragePersistence(JsonFileStorage(path)))

    assert reloaded.find_task_by_id(task.id, DEMO_ID) == task
    assert json.loads(path.read_text("utf-8"))[TASKS_KEY]


def test_clear_repairs_corrupt_json_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("{not json", "utf-8")

    store = RecordStore(StoragePersistence(JsonFileStorage(path)))
    store.clear()

    assert json.loads(path.read_text("utf-8")) == {}
