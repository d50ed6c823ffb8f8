"""FastAPI application factory for kubelocator.

Usage::

    from kubelocator.api.app import create_app

    app = create_app(locator=locator, config=config)

The factory is used by both the production bootstrap (``kubelocator.app``)
and unit tests.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from kubernetes_asyncio.client.exceptions import ApiException  # type: ignore[import-untyped]
from prometheus_client import make_asgi_app

from kubelocator.api.routes import router
from kubelocator.api.schemas import ErrorResponse
from kubelocator.errors import (
    AmbiguousKindError,
    AmbiguousResultError,
    DisconnectedEdgeError,
    InvalidLocatorError,
    KindNotFoundError,
    LocatorError,
    ObjectNotFoundError,
    PathEdgeNotFoundError,
    TraversalLimitError,
)

_log = structlog.get_logger(component="api.app")

_API_PREFIX = "/api/v1"

# (error class, HTTP status, error code); first match wins.
_ERROR_MAP: tuple[tuple[type[LocatorError], int, str], ...] = (
    (ObjectNotFoundError, 404, "OBJECT_NOT_FOUND"),
    (KindNotFoundError, 404, "KIND_NOT_FOUND"),
    (AmbiguousResultError, 409, "AMBIGUOUS_RESULT"),
    (AmbiguousKindError, 409, "AMBIGUOUS_KIND"),
    (PathEdgeNotFoundError, 422, "PATH_EDGE_NOT_FOUND"),
    (DisconnectedEdgeError, 422, "DISCONNECTED_EDGE"),
    (TraversalLimitError, 422, "TRAVERSAL_LIMIT_EXCEEDED"),
    (InvalidLocatorError, 422, "INVALID_LOCATOR"),
)


def error_status(exc: LocatorError) -> tuple[int, str]:
    """Return the HTTP status and error code for a locator error."""
    for exc_type, status, code in _ERROR_MAP:
        if isinstance(exc, exc_type):
            return status, code
    return 500, "LOCATOR_ERROR"


def create_app(locator: Any, config: Any = None) -> FastAPI:
    """Create and configure the kubelocator FastAPI application.

    Args:
        locator: ObjectLocatorService instance.
        config:  LocatorConfig.  Supplies the namespace used when a request
                 does not name one.

    Returns:
        Configured FastAPI application, ready to be served by uvicorn.
    """
    from kubelocator import __version__

    default_namespace = "default"
    if config is not None and hasattr(config, "kubernetes"):
        default_namespace = config.kubernetes.default_namespace or "default"

    app = FastAPI(
        title="kubelocator",
        summary="Resolve one Kubernetes object through a declared relationship path",
        version=__version__,
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
        openapi_url="/api/v1/openapi.json",
    )

    app.state.locator = locator
    app.state.config = config
    app.state.default_namespace = default_namespace

    app.include_router(router, prefix=_API_PREFIX)
    app.mount("/metrics", make_asgi_app())

    # -----------------------------------------------------------------------
    # Exception handlers
    # -----------------------------------------------------------------------

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = exc.errors()
        first_msg = ""
        if errors:
            locs = errors[0].get("loc", ())
            field = ".".join(str(loc) for loc in locs[1:]) if len(locs) > 1 else ""
            first_msg = f"{field}: {errors[0].get('msg', '')}" if field else str(errors[0].get("msg", ""))
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error="INVALID_REQUEST", detail=first_msg).model_dump(exclude_none=True),
        )

    @app.exception_handler(LocatorError)
    async def locator_exception_handler(
        _request: Request,
        exc: LocatorError,
    ) -> JSONResponse:
        status, code = error_status(exc)
        candidates = exc.keys if isinstance(exc, AmbiguousResultError) else None
        return JSONResponse(
            status_code=status,
            content=ErrorResponse(error=code, detail=str(exc), candidates=candidates).model_dump(exclude_none=True),
        )

    @app.exception_handler(ApiException)
    async def store_exception_handler(
        request: Request,
        exc: ApiException,
    ) -> JSONResponse:
        """Kubernetes API failures are upstream errors, not request errors."""
        _log.warning(
            "store_error",
            path=str(request.url.path),
            status=exc.status,
            reason=exc.reason,
        )
        return JSONResponse(
            status_code=502,
            content=ErrorResponse(
                error="STORE_ERROR",
                detail=f"Kubernetes API returned {exc.status}: {exc.reason}",
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Catch-all for unhandled exceptions; never expose stack traces."""
        _log.error(
            "unhandled_exception",
            path=str(request.url.path),
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="INTERNAL_ERROR",
                detail="An unexpected error occurred.",
            ).model_dump(exclude_none=True),
        )

    return app
