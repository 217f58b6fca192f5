# tests/test_bootstrap.py

from __future__ import annotations

import logging
from pathlib import Path
from types import SimpleNamespace

import pytest

from memtodo.cli.bootstrap import build_persistence, create_initial_state
from memtodo.config import Settings
from memtodo.logging_setup import _ConsoleNoiseFilter, setup_logging


@pytest.mark.asyncio
async def test_state_persists_to_configured_file(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    await state.auth.login("demo@example.com", "demo123")
    await state.data.create("todos", {"title": "survive restart"})

    assert settings.storage_path.exists()

    restarted = create_initial_state(settings=settings)
    assert (await restarted.auth.get_identity()).email == "demo@example.com"
    titles = [t.title for t in (await restarted.data.get_list("todos")).data]
    assert titles == ["survive restart"]


def test_persistence_can_be_disabled(settings: SimpleNamespace) -> None:
    settings.persist = False
    assert build_persistence(settings) is None

    state = create_initial_state(settings=settings)
    state.store.set_current_user("1")
    assert not settings.storage_path.exists()


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("MEMTODO_DATA_DIR", str(tmp_path / "d"))
    monkeypatch.setenv("MEMTODO_PERSIST", "no")
    monkeypatch.setenv("MEMTODO_PAGE_SIZE", "not-a-number")
    monkeypatch.setenv("MEMTODO_LOGIN_REDIRECT", "/home")
    monkeypatch.delenv("MEMTODO_STORAGE_PATH", raising=False)
    monkeypatch.delenv("MEMTODO_LOGOUT_REDIRECT", raising=False)

    s = Settings.from_env()

    assert s.data_dir == tmp_path / "d"
    assert s.storage_path == tmp_path / "d" / "storage.json"
    assert s.persist is False
    assert s.default_page_size == 10
    assert s.login_redirect == "/home"
    assert s.logout_redirect == "/login"


def test_setup_logging_writes_log_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        log_file = setup_logging(log_dir=tmp_path / "logs")
        logging.getLogger("memtodo.test").debug("hello from test")
        for h in root.handlers:
            h.flush()
        assert "hello from test" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)


def test_settings_read_dotenv_without_overriding_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("MEMTODO_APP_NAME=from-dotenv\nMEMTODO_LOGOUT_REDIRECT=/dotenv\n", "utf-8")
    monkeypatch.chdir(tmp_path)
    # set then delete so monkeypatch restores the variables after load_dotenv writes them
    monkeypatch.setenv("MEMTODO_APP_NAME", "placeholder")
    monkeypatch.delenv("MEMTODO_APP_NAME")
    monkeypatch.setenv("MEMTODO_LOGOUT_REDIRECT", "/from-env")

    s = Settings.from_env()

    assert s.app_name == "from-dotenv"
    assert s.logout_redirect == "/from-env"


@pytest.mark.parametrize(
    ("logger_name", "level", "shown"),
    [
        ("memtodo.store.record_store", logging.DEBUG, True),
        ("memtodo", logging.INFO, True),
        ("memtodo_other", logging.INFO, False),
        ("py.warnings", logging.WARNING, False),
        ("urllib3", logging.WARNING, False),
        ("urllib3", logging.ERROR, True),
    ],
)
def test_console_filter_hides_foreign_noise(logger_name: str, level: int, shown: bool) -> None:
    record = logging.LogRecord(logger_name, level, __file__, 1, "msg", None, None)
    assert _ConsoleNoiseFilter().filter(record) is shown
