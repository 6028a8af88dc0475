"""
Error taxonomy shared by every feature.

Each error carries an explicit `kind` tag plus the HTTP status and message
the client sees. The responder in `core/error_handlers.py` dispatches on
`kind`.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    PERSISTENCE = "persistence"


class AppError(RuntimeError):
    """
    Base for classified failures; concrete subclasses set `kind` and `default_status`.
    """

    kind: ErrorKind
    default_status: int

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = self.default_status if status_code is None else status_code

    def to_response(self) -> dict[str, str]:
        return {"message": self.message}


class ValidationFailed(AppError):
    kind = ErrorKind.VALIDATION
    default_status = 400

    def __init__(self, errors: list[tuple[str, str]]) -> None:
        super().__init__(format_field_errors(errors))

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationFailed":
        return cls([(field, message)])


class AuthError(AppError):
    kind = ErrorKind.AUTH
    default_status = 403


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    default_status = 404


class PersistenceError(AppError):
    kind = ErrorKind.PERSISTENCE
    default_status = 400


def format_field_errors(errors: list[tuple[str, str]]) -> str:
    """
    Join (field, message) pairs as "message: field, message: field".

    Order is preserved as given.
    """
    return ", ".join(f"{message}: {field}" for field, message in errors)
