# src/memtodo/core/errors.py

"""
Error kinds raised (data side) or returned (auth side) by the providers.

Hierarchy:
- TodoError
  - NotFoundError            entity absent or owned by someone else
    - UnauthenticatedError   no active session
  - UnsupportedResourceError resource name the provider does not serve
  - AuthError
    - LoginError             bad credentials (reason tells which)
    - RegisterError          duplicate email
"""

from __future__ import annotations

from enum import StrEnum


class TodoError(Exception):
    """Base class for all memtodo errors."""


class NotFoundError(TodoError):
    def __init__(self, message: str = "Not found", *, resource: str | None = None, id: str | None = None) -> None:
        super().__init__(message)
        self.resource = resource
        self.id = id


class UnauthenticatedError(NotFoundError):
    def __init__(self, message: str = "User not authenticated") -> None:
        super().__init__(message)


class UnsupportedResourceError(TodoError, ValueError):
    def __init__(self, resource: str) -> None:
        super().__init__(f"Resource {resource} is not supported")
        self.resource = resource


class AuthError(TodoError):
    """Login or registration failure, returned inside AuthActionResult."""


class LoginFailure(StrEnum):
    USER_NOT_FOUND = "user_not_found"
    INCORRECT_PASSWORD = "incorrect_password"


_LOGIN_MESSAGES = {
    LoginFailure.USER_NOT_FOUND: "User not found",
    LoginFailure.INCORRECT_PASSWORD: "Incorrect password",
}


class LoginError(AuthError):
    def __init__(self, reason: LoginFailure) -> None:
        super().__init__(_LOGIN_MESSAGES[reason])
        self.reason = reason


class RegisterError(AuthError):
    def __init__(self, message: str = "Email is already registered") -> None:
        super().__init__(message)
