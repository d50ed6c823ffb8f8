"""REST API routes."""

from __future__ import annotations

from fastapi import APIRouter, Request

from kubelocator.api.schemas import HealthResponse, LocateRequest, LocateResponse
from kubelocator.models.locator import ObjectLocator, object_key

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    from kubelocator import __version__

    return HealthResponse(status="ok", version=__version__)


@router.post("/locate", response_model=LocateResponse)
async def locate(body: LocateRequest, request: Request) -> LocateResponse:
    """Resolve one object from a locator document.

    Locator errors are raised to the app-level exception handlers, which map
    them onto the error envelope.
    """
    locator = ObjectLocator.from_dict(body.locator)
    namespace = body.namespace or request.app.state.default_namespace
    obj = await request.app.state.locator.locate(locator, namespace)
    return LocateResponse(key=object_key(obj), object=obj)
