# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from memtodo.core.state import AppState
from memtodo.providers.auth_provider import AuthProvider
from memtodo.providers.data_provider import DataProvider
from memtodo.store.persistence import InMemoryStorage, StoragePersistence
from memtodo.store.record_store import RecordStore

DEMO_ID = "1"
TEST_ID = "2"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="memtodo-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        storage_path=tmp_path / "data" / "storage.json",
        persist=True,
        login_redirect="/dashboard",
        logout_redirect="/login",
        default_page_size=10,
    )


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def store(storage: InMemoryStorage) -> RecordStore:
    """
    Persistent store backed by an in-memory key-value storage.

    Re-creating RecordStore(StoragePersistence(storage)) simulates a reload.
    """
    return RecordStore(StoragePersistence(storage))


@pytest.fixture()
def data(store: RecordStore) -> DataProvider:
    return DataProvider(store)


@pytest.fixture()
def auth(store: RecordStore) -> AuthProvider:
    return AuthProvider(store)


@pytest.fixture()
def as_demo(store: RecordStore) -> RecordStore:
    """Store with the demo account signed in."""
    store.set_current_user(DEMO_ID)
    return store


@pytest.fixture()
def state(settings: SimpleNamespace, store: RecordStore, data: DataProvider, auth: AuthProvider) -> AppState:
    return AppState(settings=settings, store=store, data=data, auth=auth)
