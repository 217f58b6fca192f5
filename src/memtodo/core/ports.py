# src/memtodo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the store and the providers.

The record store depends on Protocols instead of concrete storage backends.
This keeps durable storage swappable (JSON file, plain dict, nothing at all)
and makes testing easier.
"""

from typing import Protocol

from ..store.models import Snapshot


class KeyValueStorage(Protocol):
    """String key -> string value slots (localStorage-like)."""

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


class Persistence(Protocol):
    """
    Snapshot persistence for the RecordStore.

    - load() returns None when no durable state exists yet
    - load() may raise on corrupt data; the store falls back to the seed
    - save()/clear() may raise; the store logs and carries on
    """

    def load(self) -> Snapshot | None: ...
    def save(self, snapshot: Snapshot) -> None: ...
    def clear(self) -> None: ...
