# src/memtodo/providers/dashboard.py

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from ..store.models import Priority, Task, utcnow
from .data_provider import DataProvider


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int
    completed: int
    pending: int
    high_priority: int  # open tasks only
    overdue: int  # open tasks only

    @property
    def completion_percent(self) -> int:
        if self.total == 0:
            return 0
        return round(self.completed / self.total * 100)


@dataclass(slots=True)
class TaskBoard:
    overdue: list[Task] = field(default_factory=list)
    pending: list[Task] = field(default_factory=list)
    completed: list[Task] = field(default_factory=list)


def summarize(tasks: Iterable[Task], now: datetime | None = None) -> TaskStats:
    now = now or utcnow()
    items = list(tasks)
    completed = sum(1 for t in items if t.completed)
    return TaskStats(
        total=len(items),
        completed=completed,
        pending=len(items) - completed,
        high_priority=sum(1 for t in items if t.priority == Priority.HIGH and not t.completed),
        overdue=sum(1 for t in items if t.is_overdue(now)),
    )


def group_for_board(tasks: Iterable[Task], now: datetime | None = None) -> TaskBoard:
    """Split into overdue / pending (not overdue) / completed, keeping input order."""
    now = now or utcnow()
    board = TaskBoard()
    for t in tasks:
        if t.completed:
            board.completed.append(t)
        elif t.is_overdue(now):
            board.overdue.append(t)
        else:
            board.pending.append(t)
    return board


async def load_dashboard(data_provider: DataProvider, now: datetime | None = None) -> TaskStats:
    """Stats for the signed-in user (all zeros when signed out)."""
    result = await data_provider.get_list("todos")
    return summarize(result.data, now=now)
