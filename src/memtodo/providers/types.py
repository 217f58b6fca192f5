# src/memtodo/providers/types.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..core.errors import AuthError
from ..store.models import Task


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class CrudFilter:
    """
    One list filter. Supported combinations:
      completed eq <bool | "true">
      priority  eq <low|medium|high>
      title     contains <text>   (case-insensitive)
    Anything else is ignored.
    """

    field: str
    operator: str
    value: Any


@dataclass(frozen=True, slots=True)
class CrudSort:
    field: str
    order: SortOrder | str = SortOrder.ASC


@dataclass(frozen=True, slots=True)
class Pagination:
    current: int = 1
    page_size: int = 10

    def window(self) -> tuple[int, int]:
        current = max(1, int(self.current))
        size = max(0, int(self.page_size))
        start = (current - 1) * size
        return start, start + size


@dataclass(slots=True)
class ListResult:
    data: list[Task]
    total: int


@dataclass(frozen=True, slots=True)
class DeleteResult:
    id: str


@dataclass(slots=True)
class AuthActionResult:
    """Outcome of login/logout/register."""

    success: bool
    redirect_to: str | None = None
    error: AuthError | None = None


@dataclass(frozen=True, slots=True)
class CheckResult:
    authenticated: bool
    redirect_to: str | None = None
    logout: bool = False


@dataclass(slots=True)
class OnErrorResult:
    error: Any = None
    logout: bool = False
    redirect_to: str | None = None
