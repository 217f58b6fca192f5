# src/memtodo/store/persistence.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

from ..core.ports import KeyValueStorage
from .models import Snapshot, Task, User

logger = logging.getLogger(__name__)

USERS_KEY = "memory_store_users"
TASKS_KEY = "memory_store_todos"
CURRENT_USER_KEY = "memory_store_current_user_id"


class InMemoryStorage:
    """Dict-backed KeyValueStorage. Survives store re-creation, not the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileStorage:
    """
    KeyValueStorage kept as a single JSON object on disk.

    - the file is read lazily, once; later reads come from the cache
    - every write rewrites the whole file via tmp + os.replace
    - the file holds plaintext passwords, so it is chmod 0600 (best-effort)
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._items: dict[str, str] | None = None

    def _read(self) -> dict[str, str]:
        if self._items is not None:
            return self._items
        if not self._path.exists():
            self._items = {}
            return self._items
        data = json.loads(self._path.read_text("utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self._path}: expected a JSON object, got {type(data).__name__}")
        self._items = {str(k): str(v) for k, v in data.items()}
        return self._items

    def _read_for_write(self) -> dict[str, str]:
        """Like _read, but an unreadable file is reset to an empty object first."""
        try:
            return self._read()
        except ValueError:
            logger.warning("Unreadable storage file %s; resetting it", self._path)
            self._items = {}
            self._write()
            return self._items

    def _write(self) -> None:
        items = self._items or {}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(items, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(OSError):
            os.chmod(self._path, 0o600)

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        self._read_for_write()[key] = value
        self._write()

    def remove_item(self, key: str) -> None:
        items = self._read_for_write()
        if key in items:
            del items[key]
            self._write()


class StoragePersistence:
    """
    Persistence port over three fixed key-value slots:

      memory_store_users            JSON list of users
      memory_store_todos            JSON list of tasks
      memory_store_current_user_id  plain user id (absent when signed out)

    Dates are stored as ISO-8601 strings and parsed back on load.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def load(self) -> Snapshot | None:
        raw_users = self._storage.get_item(USERS_KEY)
        raw_tasks = self._storage.get_item(TASKS_KEY)
        current_user_id = self._storage.get_item(CURRENT_USER_KEY)

        if raw_users is None and raw_tasks is None and current_user_id is None:
            return None

        users = [User.from_dict(u) for u in _json_list(raw_users, USERS_KEY)]
        tasks = [Task.from_dict(t) for t in _json_list(raw_tasks, TASKS_KEY)]

        logger.debug(
            "Loaded snapshot users=%d tasks=%d current_user_id=%s",
            len(users),
            len(tasks),
            current_user_id,
        )
        return Snapshot(users=users, tasks=tasks, current_user_id=current_user_id or None)

    def save(self, snapshot: Snapshot) -> None:
        self._storage.set_item(USERS_KEY, json.dumps([u.to_dict() for u in snapshot.users], ensure_ascii=False))
        self._storage.set_item(TASKS_KEY, json.dumps([t.to_dict() for t in snapshot.tasks], ensure_ascii=False))
        if snapshot.current_user_id:
            self._storage.set_item(CURRENT_USER_KEY, snapshot.current_user_id)
        else:
            self._storage.remove_item(CURRENT_USER_KEY)

    def clear(self) -> None:
        for key in (USERS_KEY, TASKS_KEY, CURRENT_USER_KEY):
            self._storage.remove_item(key)


def _json_list(raw: str | None, key: str) -> list[dict[str, Any]]:
    if not raw:
        return []
    val = json.loads(raw)
    if not isinstance(val, list):
        raise ValueError(f"{key}: expected a JSON list")
    return [v for v in val if isinstance(v, dict)]
