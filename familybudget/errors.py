"""Application error taxonomy.

Services raise these; ``familybudget.main`` turns them into ``{"detail": ...}``
JSON responses with the matching status code.
"""

from __future__ import annotations


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = 401
    default_message = "Authentication required"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class ServerError(AppError):
    status_code = 500
    default_message = "Internal server error"


__all__ = [
    "AppError",
    "ValidationError",
    "AuthError",
    "NotFoundError",
    "ConflictError",
    "ServerError",
]
