# src/memtodo/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..providers.auth_provider import AuthProvider
from ..providers.data_provider import DataProvider
from ..store.record_store import RecordStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    store: RecordStore
    data: DataProvider
    auth: AuthProvider
