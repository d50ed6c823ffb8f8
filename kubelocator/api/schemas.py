"""Pydantic request and response models for the REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

_NAMESPACE_PATTERN = r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$"


class LocateRequest(BaseModel):
    """Body of POST /locate.

    ``locator`` is the raw locator document (``start``, ``path``,
    ``connections``); it is parsed and validated by the locator models so
    that the API and the CLI share one parser.
    """

    locator: dict[str, Any]
    namespace: str | None = Field(default=None, max_length=63, pattern=_NAMESPACE_PATTERN)


class LocateResponse(BaseModel):
    """The resolved object and its namespace/name key."""

    key: str
    object: dict[str, Any]


class HealthResponse(BaseModel):
    status: str
    version: str


class ErrorResponse(BaseModel):
    """Error envelope returned for every non-2xx response."""

    error: str
    detail: str
    candidates: list[str] | None = None
