# src/memtodo/store/record_store.py

from __future__ import annotations

import logging
import time
from dataclasses import replace
from datetime import datetime, timedelta

from ..core.ports import Persistence
from .models import NewTask, Priority, Snapshot, Task, TaskPatch, User, utcnow

logger = logging.getLogger(__name__)

DEMO_ACCOUNTS: tuple[tuple[str, str, str, str], ...] = (
    # (id, email, password, name)
    ("1", "demo@example.com", "demo123", "Demo User"),
    ("2", "test@example.com", "test123", "Test User"),
)


def _demo_users() -> list[User]:
    now = utcnow()
    return [
        User(id=uid, email=email, password=password, name=name, created_at=now, updated_at=now)
        for uid, email, password, name in DEMO_ACCOUNTS
    ]


class RecordStore:
    """
    In-memory store for users, tasks and the active session pointer.

    Persistence:
    - `persistence` is optional; without it the store seeds demo accounts and
      never persists (non-persistent context)
    - state is loaded once at construction; on missing or unreadable state the
      store starts from the demo seed
    - every mutation hands a full Snapshot to persistence.save(); failures are
      logged and never propagate

    Tenant isolation:
    - find_task_by_id(task_id, user_id) is the only lookup used by update/delete;
      a task owned by someone else is reported as absent

    Thread-safety:
    - none; single writer per process is assumed (last write wins)
    """

    def __init__(self, persistence: Persistence | None = None) -> None:
        self._persistence = persistence
        self._users: list[User] = []
        self._tasks: list[Task] = []
        self._current_user_id: str | None = None
        self._last_id = 0

        if persistence is None:
            self._seed()
        else:
            self._load()

        logger.info(
            "RecordStore ready users=%d tasks=%d persistent=%s",
            len(self._users),
            len(self._tasks),
            persistence is not None,
        )

    # ---- low-level helpers ----

    def _seed(self) -> None:
        if not self._users:
            self._users = _demo_users()
            logger.debug("Seeded %d demo accounts", len(self._users))

    def _load(self) -> None:
        assert self._persistence is not None
        try:
            snapshot = self._persistence.load()
        except Exception:
            logger.exception("Failed to load persisted state; starting from demo seed.")
            snapshot = None

        if snapshot is not None:
            self._users = list(snapshot.users)
            self._tasks = list(snapshot.tasks)
            self._current_user_id = snapshot.current_user_id

        self._seed()

    def _snapshot(self) -> Snapshot:
        return Snapshot(
            users=list(self._users),
            tasks=list(self._tasks),
            current_user_id=self._current_user_id,
        )

    def _persist(self) -> None:
        if self._persistence is None:
            return
        try:
            self._persistence.save(self._snapshot())
        except Exception:
            logger.exception("Failed to persist store state (in-memory state kept).")

    def _next_id(self) -> str:
        """Millisecond timestamp, bumped when it would repeat or clash with a stored id."""
        candidate = time.time_ns() // 1_000_000
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        taken = {u.id for u in self._users} | {t.id for t in self._tasks}
        while str(candidate) in taken:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    def _task_index(self, task_id: str) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return -1

    # ---- users ----

    def find_user_by_email(self, email: str) -> User | None:
        for u in self._users:
            if u.email == email:
                return u
        return None

    def find_user_by_id(self, user_id: str) -> User | None:
        for u in self._users:
            if u.id == user_id:
                return u
        return None

    def get_all_users(self) -> list[User]:
        return list(self._users)

    def create_user(self, *, email: str, password: str, name: str) -> User:
        """Raises ValueError if the email is already taken (exact match)."""
        if self.find_user_by_email(email) is not None:
            raise ValueError(f"email already registered: {email}")
        now = utcnow()
        user = User(
            id=self._next_id(),
            email=email,
            password=password,
            name=name,
            created_at=now,
            updated_at=now,
        )
        self._users.append(user)
        self._persist()
        logger.debug("User created id=%s email=%s", user.id, user.email)
        return user

    # ---- session ----

    @property
    def current_user_id(self) -> str | None:
        return self._current_user_id

    def get_current_user(self) -> User | None:
        if not self._current_user_id:
            return None
        return self.find_user_by_id(self._current_user_id)

    def set_current_user(self, user_id: str | None) -> None:
        self._current_user_id = user_id
        self._persist()
        logger.debug("Session user set to %s", user_id)

    # ---- tasks ----

    def get_all_tasks(self, user_id: str | None = None) -> list[Task]:
        if user_id:
            return [t for t in self._tasks if t.user_id == user_id]
        return list(self._tasks)

    def find_task_by_id(self, task_id: str, user_id: str | None = None) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                if user_id and t.user_id != user_id:
                    return None
                return t
        return None

    def create_task(self, user_id: str, data: NewTask) -> Task:
        if not data.title or not data.title.strip():
            raise ValueError("title is required")

        now = utcnow()
        task = Task(
            id=self._next_id(),
            user_id=user_id,
            title=data.title.strip(),
            description=data.description,
            completed=False,
            priority=Priority.parse(data.priority),
            due_date=data.due_date,
            created_at=now,
            updated_at=now,
        )
        self._tasks.append(task)
        self._persist()
        logger.debug("Task created id=%s user_id=%s", task.id, user_id)
        return task

    def update_task(self, task_id: str, user_id: str, patch: TaskPatch) -> Task | None:
        existing = self.find_task_by_id(task_id, user_id)
        if existing is None:
            return None

        changes = patch.changes()
        # updated_at must move forward even within one clock tick
        updated_at = max(utcnow(), existing.updated_at + timedelta(microseconds=1))
        updated = replace(existing, **changes, updated_at=updated_at)

        idx = self._task_index(task_id)
        if idx == -1:
            return None
        self._tasks[idx] = updated
        self._persist()
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(changes))
        return updated

    def delete_task(self, task_id: str, user_id: str) -> bool:
        if self.find_task_by_id(task_id, user_id) is None:
            return False

        idx = self._task_index(task_id)
        if idx == -1:
            return False
        del self._tasks[idx]
        self._persist()
        logger.debug("Task deleted id=%s", task_id)
        return True

    # ---- query helpers ----

    def tasks_by_status(self, user_id: str, completed: bool) -> list[Task]:
        return [t for t in self._tasks if t.user_id == user_id and t.completed == completed]

    def tasks_by_priority(self, user_id: str, priority: Priority | str) -> list[Task]:
        wanted = Priority.parse(priority)
        return [t for t in self._tasks if t.user_id == user_id and t.priority == wanted]

    def overdue_tasks(self, user_id: str, now: datetime | None = None) -> list[Task]:
        now = now or utcnow()
        return [t for t in self._tasks if t.user_id == user_id and t.is_overdue(now)]

    # ---- maintenance ----

    def clear(self) -> None:
        """Drop everything (memory and durable storage), then re-seed demo accounts."""
        self._users = []
        self._tasks = []
        self._current_user_id = None
        if self._persistence is not None:
            try:
                self._persistence.clear()
            except Exception:
                logger.exception("Failed to clear durable storage.")
        self._seed()
        logger.info("RecordStore cleared")
