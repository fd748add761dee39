"""Database repository exceptions.

Custom exceptions for repository and pagination operations that provide
better error messages and typing than raw SQLAlchemy exceptions. Errors
raised by the database driver itself are never wrapped: they propagate to
the caller unchanged.
"""
from __future__ import annotations

from typing import Any


class RepositoryError(Exception):
    """Base for errors raised while building or running a paginated read.

    ``details`` holds structured context (field names, expected and actual
    cursor arity) for logs and HTTP problem responses.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class MalformedCursorError(RepositoryError):
    """Cursor cannot be decoded against the active ordering.

    Raised when the token is not valid base64/JSON, carries an unknown
    format version, or holds a different number of values than the
    ordering has sort keys.
    """

    def __init__(self, message: str, cursor: str | None = None, **details: Any):
        """Initialize malformed cursor error.

        Args:
            message: Error description
            cursor: The offending cursor token (if available)
            **details: Extra context such as expected/actual arity
        """
        self.cursor = cursor
        super().__init__(message, details=details)


class InvalidOrderSpecError(RepositoryError):
    """Order declaration is empty or of an unsupported shape."""

    def __init__(self, message: str, order_by: Any = None):
        details = {"order_by": order_by} if order_by is not None else {}
        super().__init__(message, details=details)


class UnknownFieldError(RepositoryError):
    """Sort field cannot be resolved on the statement or row.

    Attributes:
        field: The unresolved field name
    """

    def __init__(self, field: str, source: str | None = None):
        """Initialize unknown field error.

        Args:
            field: Field name that failed to resolve
            source: Description of where it was looked up
        """
        self.field = field
        details: dict[str, Any] = {"field": field}
        if source:
            details["source"] = source
        super().__init__(f"Unknown sort field {field!r}", details=details)


__all__ = [
    "InvalidOrderSpecError",
    "MalformedCursorError",
    "RepositoryError",
    "UnknownFieldError",
]
