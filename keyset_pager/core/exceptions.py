"""HTTP-facing exceptions rendered as RFC 7807 problem details."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any

from keyset_pager.core.schemas.problem_details import ProblemDetails


class AppException(Exception):
    """Error carrying everything needed for a Problem Details response.

    Attributes:
        status_code: HTTP status code
        detail: Human-readable explanation of this occurrence
        type: Problem type identifier (``"invalid-cursor"``, ...)
        title: Short summary; defaults to the status code's reason phrase
        instance: URI of this occurrence; handlers fill in the request URL
        extra: Additional problem members
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or _reason_phrase(status_code)
        self.instance = instance
        self.extra = extra or {}

    def to_problem(self, instance: str | None = None) -> ProblemDetails:
        """Build the response body, using ``instance`` when none was set."""
        return ProblemDetails(
            type=self.type,
            title=self.title,
            status=self.status_code,
            detail=self.detail,
            instance=self.instance or instance,
            **self.extra,
        )


class BadRequestException(AppException):
    """400 for client input that cannot be paginated: a corrupt cursor,
    an unusable order declaration, or an unknown sort field.
    """

    def __init__(
        self,
        detail: str,
        type: str = "bad-request",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(400, detail, type=type, instance=instance, extra=extra)


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


__all__ = ["AppException", "BadRequestException"]
