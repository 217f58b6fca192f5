# src/memtodo/providers/auth_provider.py

from __future__ import annotations

import hmac
import logging
from collections.abc import Mapping
from typing import Any

from ..core.errors import LoginError, LoginFailure, RegisterError
from ..store.models import AuthUser
from ..store.record_store import RecordStore
from .types import AuthActionResult, CheckResult, OnErrorResult

logger = logging.getLogger(__name__)

DEFAULT_LOGIN_REDIRECT = "/dashboard"
DEFAULT_LOGOUT_REDIRECT = "/login"


def _http_status(error: Any) -> Any:
    """Read `status` or `status_code` from an exception-like object or a mapping."""
    for name in ("status", "status_code"):
        if isinstance(error, Mapping):
            val = error.get(name)
        else:
            val = getattr(error, name, None)
        if val is not None:
            return val
    return None


class AuthProvider:
    """
    Session lifecycle over the store's session pointer.

    States: anonymous <-> authenticated (one session per store).

    Failures of login/register are returned inside AuthActionResult.error,
    not raised. Passwords are compared in plaintext (see User).
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        login_redirect: str = DEFAULT_LOGIN_REDIRECT,
        logout_redirect: str = DEFAULT_LOGOUT_REDIRECT,
    ) -> None:
        self._store = store
        self._login_redirect = login_redirect
        self._logout_redirect = logout_redirect

    async def login(self, email: str, password: str) -> AuthActionResult:
        user = self._store.find_user_by_email(email)
        if user is None:
            logger.info("Login failed: unknown email")
            return AuthActionResult(success=False, error=LoginError(LoginFailure.USER_NOT_FOUND))

        if not hmac.compare_digest(user.password.encode("utf-8"), password.encode("utf-8")):
            logger.info("Login failed: bad password for user_id=%s", user.id)
            return AuthActionResult(success=False, error=LoginError(LoginFailure.INCORRECT_PASSWORD))

        self._store.set_current_user(user.id)
        logger.info("Login ok user_id=%s", user.id)
        return AuthActionResult(success=True, redirect_to=self._login_redirect)

    async def logout(self) -> AuthActionResult:
        self._store.set_current_user(None)
        return AuthActionResult(success=True, redirect_to=self._logout_redirect)

    async def register(self, email: str, password: str, name: str | None = None) -> AuthActionResult:
        if self._store.find_user_by_email(email) is not None:
            return AuthActionResult(success=False, error=RegisterError())

        user = self._store.create_user(
            email=email,
            password=password,
            name=name or email.split("@")[0],
        )
        self._store.set_current_user(user.id)
        logger.info("Registered user_id=%s", user.id)
        return AuthActionResult(success=True, redirect_to=self._login_redirect)

    async def check(self) -> CheckResult:
        if self._store.get_current_user() is not None:
            return CheckResult(authenticated=True)
        return CheckResult(authenticated=False, redirect_to=self._logout_redirect, logout=True)

    async def get_identity(self) -> AuthUser | None:
        user = self._store.get_current_user()
        if user is None:
            return None
        return AuthUser(id=user.id, email=user.email, name=user.name)

    async def on_error(self, error: Any) -> OnErrorResult:
        if _http_status(error) == 401:
            return OnErrorResult(error=error, logout=True, redirect_to=self._logout_redirect)
        return OnErrorResult(error=error)

    async def get_permissions(self) -> None:
        return None
