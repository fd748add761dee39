"""RFC 7807 response body for pagination errors."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProblemDetails(BaseModel):
    """Problem Details body (https://datatracker.ietf.org/doc/html/rfc7807).

    Members beyond the RFC's five (for a cursor error, ``expected`` and
    ``actual`` key counts) are accepted and serialized at the top level.
    """

    type: str = Field(default="about:blank", min_length=1)
    title: str = Field(min_length=1)
    status: int = Field(ge=400, le=599)
    detail: str | None = None
    instance: str | None = None

    model_config = ConfigDict(extra="allow")

    def to_response_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
