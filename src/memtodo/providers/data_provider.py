# src/memtodo/providers/data_provider.py

from __future__ import annotations

import functools
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..core.errors import NotFoundError, UnauthenticatedError, UnsupportedResourceError
from ..store.models import NewTask, Task, TaskPatch
from ..store.record_store import RecordStore
from .types import CrudFilter, CrudSort, DeleteResult, ListResult, Pagination, SortOrder

logger = logging.getLogger(__name__)

SUPPORTED_RESOURCES = frozenset({"todos", "todo"})

FilterInput = CrudFilter | Mapping[str, Any]
SortInput = CrudSort | Mapping[str, Any]


def _as_filter(raw: FilterInput) -> CrudFilter:
    if isinstance(raw, CrudFilter):
        return raw
    return CrudFilter(field=str(raw.get("field", "")), operator=str(raw.get("operator", "")), value=raw.get("value"))


def _as_sort(raw: SortInput) -> CrudSort:
    if isinstance(raw, CrudSort):
        return raw
    return CrudSort(field=str(raw.get("field", "")), order=str(raw.get("order", SortOrder.ASC)))


def _as_pagination(raw: Pagination | Mapping[str, Any]) -> Pagination:
    if isinstance(raw, Pagination):
        return raw
    return Pagination(
        current=int(raw.get("current", 1)),
        page_size=int(raw.get("page_size", raw.get("pageSize", 10))),
    )


def apply_filter(tasks: list[Task], flt: CrudFilter) -> list[Task]:
    """Narrow `tasks` by one filter; unknown field/operator pairs leave it untouched."""
    if flt.operator == "eq":
        if flt.field == "completed":
            wanted = flt.value is True or flt.value == "true"
            return [t for t in tasks if t.completed == wanted]
        if flt.field == "priority":
            return [t for t in tasks if t.priority == flt.value]
    elif flt.operator == "contains":
        if flt.field == "title":
            needle = str(flt.value).lower()
            return [t for t in tasks if needle in t.title.lower()]

    logger.debug("Ignoring unsupported filter field=%s operator=%s", flt.field, flt.operator)
    return tasks


def _compare(sorter: CrudSort, a: Task, b: Task) -> int:
    av = getattr(a, sorter.field, None)
    bv = getattr(b, sorter.field, None)

    # Missing values go last in both directions.
    if av is None and bv is None:
        return 0
    if av is None:
        return 1
    if bv is None:
        return -1

    asc = str(sorter.order).lower() != SortOrder.DESC
    if av < bv:
        return -1 if asc else 1
    if av > bv:
        return 1 if asc else -1
    return 0


def apply_sorters(tasks: list[Task], sorters: list[CrudSort]) -> list[Task]:
    """
    Multi-key ordering: the first sorter is the primary key, later ones break ties.

    Implemented as stable sort passes from the last sorter to the first.
    """
    out = list(tasks)
    for sorter in reversed(sorters):
        out.sort(key=functools.cmp_to_key(functools.partial(_compare, sorter)))
    return out


class DataProvider:
    """
    Resource CRUD over the signed-in user's tasks.

    - only the "todos" / "todo" resource is served; anything else fails fast
    - every read and write is scoped to store.current_user_id
    - methods are async for interface compatibility; nothing inside awaits I/O
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    @staticmethod
    def _check_resource(resource: str) -> None:
        if resource not in SUPPORTED_RESOURCES:
            raise UnsupportedResourceError(resource)

    def _require_user_id(self) -> str:
        user_id = self._store.current_user_id
        if not user_id:
            raise UnauthenticatedError()
        return user_id

    async def get_list(
        self,
        resource: str,
        *,
        filters: Iterable[FilterInput] | None = None,
        sorters: Iterable[SortInput] | None = None,
        pagination: Pagination | Mapping[str, Any] | None = None,
    ) -> ListResult:
        self._check_resource(resource)

        user_id = self._store.current_user_id
        if not user_id:
            return ListResult(data=[], total=0)

        tasks = self._store.get_all_tasks(user_id)

        for raw in filters or ():
            tasks = apply_filter(tasks, _as_filter(raw))

        sort_list = [_as_sort(s) for s in sorters or ()]
        if sort_list:
            tasks = apply_sorters(tasks, sort_list)

        total = len(tasks)

        if pagination is not None:
            start, end = _as_pagination(pagination).window()
            tasks = tasks[start:end]

        return ListResult(data=tasks, total=total)

    async def get_one(self, resource: str, task_id: str) -> Task:
        self._check_resource(resource)
        user_id = self._require_user_id()

        task = self._store.find_task_by_id(str(task_id), user_id)
        if task is None:
            raise NotFoundError(f"Todo with id {task_id} not found", resource=resource, id=str(task_id))
        return task

    async def create(self, resource: str, values: NewTask | Mapping[str, Any]) -> Task:
        self._check_resource(resource)
        user_id = self._require_user_id()

        data = values if isinstance(values, NewTask) else NewTask.from_mapping(values)
        return self._store.create_task(user_id, data)

    async def update(self, resource: str, task_id: str, values: TaskPatch | Mapping[str, Any]) -> Task:
        self._check_resource(resource)
        user_id = self._require_user_id()

        patch = values if isinstance(values, TaskPatch) else TaskPatch.from_mapping(values)
        updated = self._store.update_task(str(task_id), user_id, patch)
        if updated is None:
            raise NotFoundError(f"Todo with id {task_id} not found", resource=resource, id=str(task_id))
        return updated

    async def delete_one(self, resource: str, task_id: str) -> DeleteResult:
        self._check_resource(resource)
        user_id = self._require_user_id()

        if not self._store.delete_task(str(task_id), user_id):
            raise NotFoundError(f"Todo with id {task_id} not found", resource=resource, id=str(task_id))
        return DeleteResult(id=str(task_id))

    def get_api_url(self) -> str:
        return ""
