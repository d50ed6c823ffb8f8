"""Kind resolution and object access through the kubernetes-asyncio dynamic client.

Discovery results are cached by the DynamicClient itself; these adapters keep
no state of their own beyond the client handle.
"""

from __future__ import annotations

from typing import Any

from kubernetes_asyncio.dynamic import DynamicClient  # type: ignore[import-untyped]
from kubernetes_asyncio.dynamic.exceptions import (  # type: ignore[import-untyped]
    NotFoundError,
    ResourceNotFoundError,
    ResourceNotUniqueError,
)

from kubelocator.errors import AmbiguousKindError, KindNotFoundError, ObjectNotFoundError
from kubelocator.locator.interfaces import KindResolver, KubeObject, ObjectStore
from kubelocator.models.locator import ResourceHandle, TypeDescriptor


def _to_dict(instance: Any) -> KubeObject:
    if isinstance(instance, dict):
        return instance
    return instance.to_dict()  # type: ignore[no-any-return]


class DynamicKindResolver(KindResolver):
    """Resolves kinds via API discovery."""

    def __init__(self, client: DynamicClient) -> None:
        self._client = client

    async def resolve(self, target: TypeDescriptor) -> ResourceHandle:
        try:
            resource = await self._client.resources.get(api_version=target.api_version, kind=target.kind)
        except ResourceNotUniqueError as exc:
            raise AmbiguousKindError(target) from exc
        except ResourceNotFoundError as exc:
            raise KindNotFoundError(target) from exc
        return ResourceHandle(
            group=resource.group or "",
            version=resource.api_version,
            resource=resource.name,
            kind=resource.kind,
            namespaced=bool(resource.namespaced),
        )


class DynamicObjectStore(ObjectStore):
    """Lists and gets objects as plain dicts."""

    def __init__(self, client: DynamicClient) -> None:
        self._client = client

    async def _resource(self, handle: ResourceHandle) -> Any:
        return await self._client.resources.get(api_version=handle.api_version, kind=handle.kind)

    async def list(self, handle: ResourceHandle, namespace: str, label_selector: str = "") -> list[KubeObject]:
        resource = await self._resource(handle)
        kwargs: dict[str, Any] = {}
        if namespace:
            kwargs["namespace"] = namespace
        if label_selector:
            kwargs["label_selector"] = label_selector
        result = _to_dict(await self._client.get(resource, **kwargs))
        return list(result.get("items") or [])

    async def get(self, handle: ResourceHandle, namespace: str, name: str) -> KubeObject:
        resource = await self._resource(handle)
        kwargs: dict[str, Any] = {"name": name}
        if namespace:
            kwargs["namespace"] = namespace
        try:
            return _to_dict(await self._client.get(resource, **kwargs))
        except NotFoundError as exc:
            raise ObjectNotFoundError(handle, name) from exc
