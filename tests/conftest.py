"""Shared fakes and factories for kubelocator tests.

Provides an in-memory kind resolver and object store that behave like the
Kubernetes adapters (including label-selector strings and cluster-scoped
resources) so that the locator core and the graph walker can be exercised
without a cluster.
"""

from __future__ import annotations

import copy
import re
from collections.abc import Sequence
from typing import Any

import pytest

from kubelocator.errors import KindNotFoundError, ObjectNotFoundError
from kubelocator.graph.models import TraversalStep
from kubelocator.locator.interfaces import GraphTraversal, KindResolver, KubeObject, ObjectStore
from kubelocator.models.locator import (
    ConnectionSpec,
    ConnectionType,
    EdgeDeclaration,
    LabelSelector,
    ResourceHandle,
    RootSelection,
    TypeDescriptor,
)

# ---------------------------------------------------------------------------
# Kinds and handles
# ---------------------------------------------------------------------------

DEPLOYMENT = TypeDescriptor(api_version="apps/v1", kind="Deployment")
REPLICASET = TypeDescriptor(api_version="apps/v1", kind="ReplicaSet")
POD = TypeDescriptor(api_version="v1", kind="Pod")
SECRET = TypeDescriptor(api_version="v1", kind="Secret")
SERVICE = TypeDescriptor(api_version="v1", kind="Service")
ENDPOINTS = TypeDescriptor(api_version="v1", kind="Endpoints")
NODE = TypeDescriptor(api_version="v1", kind="Node")

DEPLOYMENT_HANDLE = ResourceHandle(group="apps", version="v1", resource="deployments", kind="Deployment")
REPLICASET_HANDLE = ResourceHandle(group="apps", version="v1", resource="replicasets", kind="ReplicaSet")
POD_HANDLE = ResourceHandle(group="", version="v1", resource="pods", kind="Pod")
SECRET_HANDLE = ResourceHandle(group="", version="v1", resource="secrets", kind="Secret")
SERVICE_HANDLE = ResourceHandle(group="", version="v1", resource="services", kind="Service")
ENDPOINTS_HANDLE = ResourceHandle(group="", version="v1", resource="endpoints", kind="Endpoints")
NODE_HANDLE = ResourceHandle(group="", version="v1", resource="nodes", kind="Node", namespaced=False)

HANDLES: dict[TypeDescriptor, ResourceHandle] = {
    DEPLOYMENT: DEPLOYMENT_HANDLE,
    REPLICASET: REPLICASET_HANDLE,
    POD: POD_HANDLE,
    SECRET: SECRET_HANDLE,
    SERVICE: SERVICE_HANDLE,
    ENDPOINTS: ENDPOINTS_HANDLE,
    NODE: NODE_HANDLE,
}

SECRET_VOLUME_REF = "spec.template.spec.volumes[*].secret.secretName"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeKindResolver(KindResolver):
    """Resolves the kinds in HANDLES; anything else is KindNotFound."""

    def __init__(self, handles: dict[TypeDescriptor, ResourceHandle] | None = None) -> None:
        self.handles = dict(HANDLES if handles is None else handles)
        self.calls: list[TypeDescriptor] = []

    async def resolve(self, target: TypeDescriptor) -> ResourceHandle:
        self.calls.append(target)
        handle = self.handles.get(target)
        if handle is None:
            raise KindNotFoundError(target)
        return handle


_REQUIREMENT = re.compile(r"[^,(]+(?:\([^)]*\))?")


def selector_matches(selector: str, labels: dict[str, str]) -> bool:
    """Evaluate a Kubernetes label-selector string against *labels*."""
    for raw in _REQUIREMENT.findall(selector):
        req = raw.strip()
        if not req:
            continue
        if " notin " in req:
            key, values = req.split(" notin ", 1)
            if labels.get(key) in values.strip("()").split(","):
                return False
        elif " in " in req:
            key, values = req.split(" in ", 1)
            if labels.get(key) not in values.strip("()").split(","):
                return False
        elif "=" in req:
            key, value = req.split("=", 1)
            if labels.get(key) != value:
                return False
        elif req.startswith("!"):
            if req[1:] in labels:
                return False
        elif req not in labels:
            return False
    return True


class InMemoryObjectStore(ObjectStore):
    """Object store over a list of raw objects, keyed by kind."""

    def __init__(self, objects: Sequence[KubeObject] = ()) -> None:
        self.objects: list[KubeObject] = list(objects)
        self.list_calls: list[tuple[str, str, str]] = []
        self.get_calls: list[tuple[str, str, str]] = []

    def add(self, *objects: KubeObject) -> None:
        self.objects.extend(objects)

    def _of(self, handle: ResourceHandle, namespace: str) -> list[KubeObject]:
        return [
            obj
            for obj in self.objects
            if obj["kind"] == handle.kind and (not namespace or obj["metadata"].get("namespace", "") == namespace)
        ]

    async def list(self, handle: ResourceHandle, namespace: str, label_selector: str = "") -> list[KubeObject]:
        self.list_calls.append((handle.kind, namespace, label_selector))
        return [
            copy.deepcopy(obj)
            for obj in self._of(handle, namespace)
            if selector_matches(label_selector, obj["metadata"].get("labels") or {})
        ]

    async def get(self, handle: ResourceHandle, namespace: str, name: str) -> KubeObject:
        self.get_calls.append((handle.kind, namespace, name))
        for obj in self._of(handle, namespace):
            if obj["metadata"]["name"] == name:
                return copy.deepcopy(obj)
        raise ObjectNotFoundError(handle, name)

    @property
    def calls(self) -> int:
        return len(self.list_calls) + len(self.get_calls)


class FailingObjectStore(InMemoryObjectStore):
    """In-memory store whose list and/or get raise a given exception instance."""

    def __init__(
        self,
        objects: Sequence[KubeObject] = (),
        list_error: BaseException | None = None,
        get_error: BaseException | None = None,
    ) -> None:
        super().__init__(objects)
        self.list_error = list_error
        self.get_error = get_error

    async def list(self, handle: ResourceHandle, namespace: str, label_selector: str = "") -> list[KubeObject]:
        if self.list_error is not None:
            self.list_calls.append((handle.kind, namespace, label_selector))
            raise self.list_error
        return await super().list(handle, namespace, label_selector)

    async def get(self, handle: ResourceHandle, namespace: str, name: str) -> KubeObject:
        if self.get_error is not None:
            self.get_calls.append((handle.kind, namespace, name))
            raise self.get_error
        return await super().get(handle, namespace, name)


class FakeWalker(GraphTraversal):
    """Returns a canned candidate set and records every walk."""

    def __init__(self, result: Sequence[KubeObject] = ()) -> None:
        self.result = list(result)
        self.walks: list[tuple[KubeObject, list[TraversalStep]]] = []

    async def walk(self, root: KubeObject, steps: Sequence[TraversalStep]) -> list[KubeObject]:
        self.walks.append((root, list(steps)))
        return list(self.result)


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def make_object(
    kind: str,
    name: str,
    namespace: str = "ns",
    labels: dict[str, str] | None = None,
    uid: str | None = None,
    owners: list[KubeObject] | None = None,
    spec: dict[str, Any] | None = None,
    api_version: str | None = None,
) -> KubeObject:
    """Build a raw Kubernetes object dict."""
    metadata: dict[str, Any] = {"name": name, "labels": labels or {}, "uid": uid or f"uid-{kind}-{namespace}-{name}"}
    if namespace:
        metadata["namespace"] = namespace
    if owners:
        metadata["ownerReferences"] = [
            {
                "apiVersion": owner["apiVersion"],
                "kind": owner["kind"],
                "name": owner["metadata"]["name"],
                "uid": owner["metadata"]["uid"],
                "controller": True,
            }
            for owner in owners
        ]
    default_api_version = "apps/v1" if kind in ("Deployment", "ReplicaSet") else "v1"
    return {
        "apiVersion": api_version or default_api_version,
        "kind": kind,
        "metadata": metadata,
        "spec": spec or {},
    }


def make_deployment(name: str = "foo", namespace: str = "ns", secrets: Sequence[str] = (), **kwargs: Any) -> KubeObject:
    volumes = [{"name": f"vol-{s}", "secret": {"secretName": s}} for s in secrets]
    spec = {
        "selector": {"matchLabels": {"app": name}},
        "template": {"metadata": {"labels": {"app": name}}, "spec": {"volumes": volumes}},
    }
    kwargs.setdefault("labels", {"app": name})
    return make_object("Deployment", name, namespace, spec=spec, **kwargs)


def edge(
    name: str,
    src: TypeDescriptor,
    dst: TypeDescriptor,
    conn_type: ConnectionType = ConnectionType.MATCH_REF,
    references: Sequence[str] = (SECRET_VOLUME_REF,),
    selector_path: str = "spec.selector",
) -> EdgeDeclaration:
    return EdgeDeclaration(
        name=name,
        src=src,
        dst=dst,
        connection=ConnectionSpec(
            type=conn_type,
            selector_path=selector_path,
            references=tuple(references) if conn_type == ConnectionType.MATCH_REF else (),
        ),
    )


def root_by_selector(target: TypeDescriptor = DEPLOYMENT, **labels: str) -> RootSelection:
    return RootSelection(target=target, selector=LabelSelector.from_labels(labels or {"app": "foo"}))


def root_by_name(name: str, target: TypeDescriptor = DEPLOYMENT) -> RootSelection:
    return RootSelection(target=target, name_template=name)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def kinds() -> FakeKindResolver:
    return FakeKindResolver()


@pytest.fixture
def store() -> InMemoryObjectStore:
    return InMemoryObjectStore()
