# src/memtodo/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Awaitable, Callable

from ..core.errors import NotFoundError, TodoError, UnauthenticatedError
from ..core.state import AppState
from ..providers.dashboard import group_for_board, load_dashboard
from ..providers.types import CrudFilter, CrudSort, Pagination
from ..store.models import Task, TaskPatch, format_datetime

CommandHandler = Callable[[AppState, list[str]], Awaitable[str]]

RESOURCE = "todos"

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /list, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Could not parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return await handler(state, args)
        except UnauthenticatedError:
            return "Not signed in. Use /login <email> <password> or /register."
        except NotFoundError as e:
            return str(e)
        except (TodoError, ValueError) as e:
            logger.debug("Command /%s rejected: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def split_options(args: list[str], known: set[str]) -> tuple[list[str], dict[str, str]]:
    """Separate `key=value` options (for known keys) from positional words."""
    words: list[str] = []
    opts: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key.lower() in known:
            opts[key.lower()] = value
        else:
            words.append(a)
    return words, opts


def format_task(t: Task) -> str:
    mark = "x" if t.completed else " "
    meta: list[str] = []
    if t.priority:
        meta.append(t.priority.value)
    if t.due_date:
        meta.append(f"due {t.due_date.date().isoformat()}")
    suffix = f"  ({', '.join(meta)})" if meta else ""
    return f"[{mark}] {t.id}  {t.title}{suffix}"


def format_task_details(t: Task) -> str:
    return "\n".join(
        [
            format_task(t),
            f"  description: {t.description or '-'}",
            f"  created: {format_datetime(t.created_at)}",
            f"  updated: {format_datetime(t.updated_at)}",
        ]
    )


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_register(state: AppState, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /register <email> <password> [name]"
    name = " ".join(args[2:]) or None
    result = await state.auth.register(args[0], args[1], name)
    if not result.success:
        return f"Registration failed: {result.error}"
    ident = await state.auth.get_identity()
    return f"Welcome, {ident.name if ident else args[0]}! You are signed in."


async def cmd_login(state: AppState, args: list[str]) -> str:
    if len(args) != 2:
        return "Usage: /login <email> <password>"
    result = await state.auth.login(args[0], args[1])
    if not result.success:
        return f"Login failed: {result.error}"
    ident = await state.auth.get_identity()
    return f"Signed in as {ident.email if ident else args[0]}."


async def cmd_logout(state: AppState, args: list[str]) -> str:
    await state.auth.logout()
    return "Signed out."


async def cmd_whoami(state: AppState, args: list[str]) -> str:
    ident = await state.auth.get_identity()
    if ident is None:
        return "Not signed in."
    return f"{ident.name} <{ident.email}> (id={ident.id})"


_LIST_OPTS = {"status", "priority", "q", "sort", "page", "size"}


async def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list [status=open|done] [priority=low|medium|high] [q=text]
          [sort=field[:asc|desc][,field...]] [page=N] [size=N]
    """
    check = await state.auth.check()
    if not check.authenticated:
        raise UnauthenticatedError()

    _, opts = split_options(args, _LIST_OPTS)

    filters: list[CrudFilter] = []
    status = opts.get("status", "").lower()
    if status in ("done", "completed"):
        filters.append(CrudFilter("completed", "eq", True))
    elif status in ("open", "pending"):
        filters.append(CrudFilter("completed", "eq", False))
    elif status:
        raise ValueError(f"Unknown status: {status!r} (use open or done)")
    if opts.get("priority"):
        filters.append(CrudFilter("priority", "eq", opts["priority"].lower()))
    if opts.get("q"):
        filters.append(CrudFilter("title", "contains", opts["q"]))

    sorters: list[CrudSort] = []
    for item in filter(None, opts.get("sort", "").split(",")):
        field_name, _, order = item.partition(":")
        sorters.append(CrudSort(field_name, order or "asc"))

    default_size = int(getattr(state.settings, "default_page_size", 10))
    pagination = Pagination(
        current=int(opts.get("page") or 1),
        page_size=int(opts.get("size") or default_size),
    )

    result = await state.data.get_list(RESOURCE, filters=filters, sorters=sorters, pagination=pagination)
    if not result.data:
        return f"No todos (total {result.total})."
    lines = [format_task(t) for t in result.data]
    lines.append(f"-- page {max(1, pagination.current)}, showing {len(result.data)} of {result.total}")
    return "\n".join(lines)


_TASK_OPTS = {"title", "desc", "priority", "due"}


def _values_from_opts(opts: dict[str, str]) -> dict[str, object]:
    values: dict[str, object] = {}
    if "title" in opts:
        values["title"] = opts["title"]
    if "desc" in opts:
        values["description"] = opts["desc"] or None
    if "priority" in opts:
        values["priority"] = opts["priority"] or None
    if "due" in opts:
        values["due_date"] = opts["due"] or None
    return values


async def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title words...> [priority=..] [due=YYYY-MM-DD] [desc=..]"""
    words, opts = split_options(args, _TASK_OPTS - {"title"})
    values = _values_from_opts(opts)
    values["title"] = " ".join(words)
    task = await state.data.create(RESOURCE, values)
    return f"Added: {format_task(task)}"


async def cmd_show(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /show <id>"
    task = await state.data.get_one(RESOURCE, args[0])
    return format_task_details(task)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> [title=..] [desc=..] [priority=..] [due=..]  (empty value clears)"""
    words, opts = split_options(args, _TASK_OPTS)
    if len(words) != 1 or not opts:
        return "Usage: /edit <id> title=.. desc=.. priority=.. due=.."
    task = await state.data.update(RESOURCE, words[0], _values_from_opts(opts))
    return f"Updated: {format_task(task)}"


async def cmd_done(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /done <id>"
    task = await state.data.update(RESOURCE, args[0], TaskPatch(completed=True))
    return f"Completed: {format_task(task)}"


async def cmd_undo(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /undo <id>"
    task = await state.data.update(RESOURCE, args[0], TaskPatch(completed=False))
    return f"Reopened: {format_task(task)}"


async def cmd_rm(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /rm <id>"
    result = await state.data.delete_one(RESOURCE, args[0])
    return f"Deleted todo {result.id}."


async def cmd_stats(state: AppState, args: list[str]) -> str:
    check = await state.auth.check()
    if not check.authenticated:
        raise UnauthenticatedError()

    stats = await load_dashboard(state.data)
    board = group_for_board((await state.data.get_list(RESOURCE)).data)
    lines = [
        "Dashboard:",
        f"  Total: {stats.total}",
        f"  Completed: {stats.completed} ({stats.completion_percent}%)",
        f"  Pending: {stats.pending}",
        f"  High priority (open): {stats.high_priority}",
        f"  Overdue: {stats.overdue}",
    ]
    if board.overdue:
        lines.append("Overdue:")
        lines.extend(f"  {format_task(t)}" for t in board.overdue)
    return "\n".join(lines)


async def cmd_reset(state: AppState, args: list[str]) -> str:
    if args != ["--yes"]:
        return "This wipes all users and todos. Run /reset --yes to confirm."
    state.store.clear()
    return "Store reset. Demo accounts restored."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("register", cmd_register, help_text="Create an account: /register <email> <password> [name].")
registry.register("login", cmd_login, help_text="Sign in: /login <email> <password>.")
registry.register("logout", cmd_logout, help_text="Sign out.")
registry.register("whoami", cmd_whoami, help_text="Show the signed-in user.")
registry.register(
    "list",
    cmd_list,
    help_text="List todos: /list status=open|done priority=.. q=.. sort=due_date:asc page=1 size=10.",
    aliases=["ls"],
)
registry.register("add", cmd_add, help_text="Add a todo: /add <title> priority=high due=2026-01-31 desc=...")
registry.register("show", cmd_show, help_text="Show one todo: /show <id>.")
registry.register("edit", cmd_edit, help_text="Edit a todo: /edit <id> title=.. priority=.. due=.. desc=..")
registry.register("done", cmd_done, help_text="Mark a todo completed: /done <id>.")
registry.register("undo", cmd_undo, help_text="Reopen a todo: /undo <id>.")
registry.register("rm", cmd_rm, help_text="Delete a todo: /rm <id>.", aliases=["delete"])
registry.register("stats", cmd_stats, help_text="Dashboard counts for your todos.")
registry.register("reset", cmd_reset, help_text="Wipe the store and restore demo accounts: /reset --yes.")
