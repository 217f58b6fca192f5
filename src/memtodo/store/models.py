# src/memtodo/store/models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any


class _Unset:
    """Marker for "field not supplied" in a TaskPatch (distinct from None)."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, raw: Priority | str | None) -> Priority | None:
        if raw is None or isinstance(raw, Priority):
            return raw
        s = str(raw).strip().lower()
        if not s:
            return None
        try:
            return cls(s)
        except ValueError:
            raise ValueError(f"Unknown priority: {raw!r} (expected low, medium or high)") from None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_datetime(raw: datetime | str | None) -> datetime | None:
    """
    Accept a datetime or an ISO-8601 string ("2026-10-20", "2026-10-20T09:00:00Z", ...).
    Naive values are taken as UTC.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        dt = raw
    else:
        s = str(raw).strip()
        if not s:
            return None
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            raise ValueError(f"Invalid date: {raw!r} (expected ISO-8601)") from None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_datetime(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


@dataclass(frozen=True, slots=True)
class User:
    """
    Registered account.

    NOTE: password is stored and compared in plaintext (demo accounts rely on it).
    Do not point this at real credentials.
    """

    id: str
    email: str
    password: str
    name: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "password": self.password,
            "name": self.name,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> User:
        return cls(
            id=str(raw["id"]),
            email=str(raw["email"]),
            password=str(raw.get("password") or ""),
            name=str(raw.get("name") or ""),
            created_at=parse_datetime(raw["created_at"]) or utcnow(),
            updated_at=parse_datetime(raw["updated_at"]) or utcnow(),
        )


@dataclass(frozen=True, slots=True)
class AuthUser:
    """Minimal identity exposed to front ends."""

    id: str
    email: str
    name: str | None = None


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    user_id: str
    title: str
    completed: bool
    created_at: datetime
    updated_at: datetime

    description: str | None = None
    priority: Priority | None = None
    due_date: datetime | None = None

    def is_overdue(self, now: datetime) -> bool:
        return not self.completed and self.due_date is not None and self.due_date < now

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "priority": self.priority.value if self.priority else None,
            "due_date": format_datetime(self.due_date),
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        return cls(
            id=str(raw["id"]),
            user_id=str(raw["user_id"]),
            title=str(raw.get("title") or ""),
            description=raw.get("description"),
            completed=bool(raw.get("completed", False)),
            priority=Priority.parse(raw.get("priority")),
            due_date=parse_datetime(raw.get("due_date")),
            created_at=parse_datetime(raw["created_at"]) or utcnow(),
            updated_at=parse_datetime(raw["updated_at"]) or utcnow(),
        )


def _clean_title(raw: Any) -> str:
    title = "" if raw is None else str(raw).strip()
    if not title:
        raise ValueError("title is required")
    return title


@dataclass(frozen=True, slots=True)
class NewTask:
    """Create input. `completed` is not part of it: new tasks always start open."""

    title: str
    description: str | None = None
    priority: Priority | None = None
    due_date: datetime | None = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> NewTask:
        return cls(
            title=_clean_title(values.get("title")),
            description=values.get("description") or None,
            priority=Priority.parse(values.get("priority")),
            due_date=parse_datetime(values.get("due_date")),
        )


def _parse_completed(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().lower() in ("true", "false"):
        return raw.strip().lower() == "true"
    raise ValueError(f"completed must be a boolean, got {raw!r}")


@dataclass(frozen=True, slots=True)
class TaskPatch:
    """
    Partial update for a Task.

    Every field defaults to UNSET, meaning "leave as is". An explicit None clears
    an optional field (description, priority, due_date). Identity and ownership
    are not patchable.
    """

    title: Any = UNSET
    description: Any = UNSET
    completed: Any = UNSET
    priority: Any = UNSET
    due_date: Any = UNSET

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> TaskPatch:
        kwargs: dict[str, Any] = {}
        if "title" in values:
            kwargs["title"] = _clean_title(values["title"])
        if "description" in values:
            kwargs["description"] = values["description"] or None
        if "completed" in values:
            kwargs["completed"] = _parse_completed(values["completed"])
        if "priority" in values:
            kwargs["priority"] = Priority.parse(values["priority"])
        if "due_date" in values:
            kwargs["due_date"] = parse_datetime(values["due_date"])
        return cls(**kwargs)

    def changes(self) -> dict[str, Any]:
        """Only the fields that were supplied."""
        out: dict[str, Any] = {}
        for f in fields(self):
            val = getattr(self, f.name)
            if val is not UNSET:
                out[f.name] = val
        if "title" in out:
            out["title"] = _clean_title(out["title"])
        if "completed" in out and not isinstance(out["completed"], bool):
            raise ValueError("completed must be a boolean")
        if "priority" in out:
            out["priority"] = Priority.parse(out["priority"])
        if "due_date" in out:
            out["due_date"] = parse_datetime(out["due_date"])
        return out


@dataclass(slots=True)
class Snapshot:
    """Full store state handed to / returned by a persistence port."""

    users: list[User] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    current_user_id: str | None = None
