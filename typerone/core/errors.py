"""
Application error type.

Every expected failure is raised as an ``AppError`` tagged with an
``ErrorKind``.  The global exception handler turns the kind into an
HTTP status exactly once — services never build responses themselves.
"""

import enum
from typing import Any

from fastapi import status


class ErrorKind(str, enum.Enum):
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION = "VALIDATION"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
}

FieldErrors = dict[str, list[str]]


class AppError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        details: FieldErrors | None = None,
    ):
        self.kind = kind
        self.message = message
        self.details = details
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"<AppError {self.kind.value}: {self.message}>"

    # ── Constructors ─────────────────────────────────────────────────

    @classmethod
    def bad_request(cls, message: str = "Bad request", details: FieldErrors | None = None) -> "AppError":
        return cls(ErrorKind.BAD_REQUEST, message, details)

    @classmethod
    def validation(cls, message: str = "Validation failed", details: FieldErrors | None = None) -> "AppError":
        return cls(ErrorKind.VALIDATION, message, details)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> "AppError":
        return cls(ErrorKind.UNAUTHORIZED, message)

    @classmethod
    def not_found(cls, message: str = "Resource not found") -> "AppError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str = "Resource conflict", details: FieldErrors | None = None) -> "AppError":
        return cls(ErrorKind.CONFLICT, message, details)
