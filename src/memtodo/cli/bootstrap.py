# src/memtodo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks persistence (JSON file or none) and wires RecordStore + providers into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import Persistence
from ..core.state import AppState
from ..providers.auth_provider import AuthProvider
from ..providers.data_provider import DataProvider
from ..store.persistence import JsonFileStorage, StoragePersistence
from ..store.record_store import RecordStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def build_persistence(settings) -> Persistence | None:
    if not getattr(settings, "persist", False):
        logger.info("Persistence disabled; state lives in memory only.")
        return None
    return StoragePersistence(JsonFileStorage(settings.storage_path))


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    store = RecordStore(build_persistence(settings))
    return AppState(
        settings=settings,
        store=store,
        data=DataProvider(store),
        auth=AuthProvider(
            store,
            login_redirect=settings.login_redirect,
            logout_redirect=settings.logout_redirect,
        ),
    )
