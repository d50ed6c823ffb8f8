"""Graph traversal engine backed by an ObjectStore.

Applies each compiled step to every object of the current frontier and
collects the objects it reaches.  The connection semantics are always stated
from the declared src to dst; a ReverseStep applies them the other way round:

    OwnedBy        dst.metadata.ownerReferences names src
    MatchName      dst has the same name as src
    MatchSelector  the selector at ``selector_path`` of src selects dst
    MatchRef       a ``references`` field path of src names dst

Objects reached more than once are kept once (by uid, else kind + key).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from kubelocator.errors import ObjectNotFoundError, TraversalLimitError
from kubelocator.graph.models import TraversalStep
from kubelocator.locator.interfaces import GraphTraversal, KubeObject, ObjectStore
from kubelocator.models.locator import ConnectionType, LabelSelector, ResourceHandle, object_key
from kubelocator.observability.logging import get_logger

_logger = get_logger("graph.walker")


def field_values(obj: Any, path: str) -> list[Any]:
    """Return every value found at a dotted *path*; ``name[*]`` fans out over a list."""
    current: list[Any] = [obj]
    for segment in path.split("."):
        fan_out = segment.endswith("[*]")
        key = segment[:-3] if fan_out else segment
        found: list[Any] = []
        for value in current:
            if not isinstance(value, Mapping) or key not in value:
                continue
            child = value[key]
            if fan_out:
                if isinstance(child, list):
                    found.extend(child)
            else:
                found.append(child)
        current = found
    return [v for v in current if v is not None]


def _metadata(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("metadata") or {}


def _selector_at(obj: Mapping[str, Any], path: str) -> LabelSelector | None:
    values = field_values(obj, path)
    if not values or not isinstance(values[0], Mapping):
        return None
    raw = values[0]
    if "matchLabels" in raw or "matchExpressions" in raw:
        selector = LabelSelector.from_dict(raw)
    else:
        selector = LabelSelector.from_labels(raw)
    # An empty selector on a Service or workload selects nothing.
    return None if selector.is_empty else selector


def _referenced_names(obj: Mapping[str, Any], paths: Sequence[str]) -> list[str]:
    names: list[str] = []
    for path in paths:
        for value in field_values(obj, path):
            if isinstance(value, str) and value and value not in names:
                names.append(value)
    return names


def _identity(obj: Mapping[str, Any]) -> str:
    uid = _metadata(obj).get("uid")
    if uid:
        return str(uid)
    return f"{obj.get('apiVersion', '')}/{obj.get('kind', '')}/{object_key(obj)}"


def _refers_to_kind(ref: Mapping[str, Any], handle: ResourceHandle) -> bool:
    if ref.get("kind") != handle.kind:
        return False
    api_version = str(ref.get("apiVersion") or "")
    return not api_version or api_version.rpartition("/")[0] == handle.group


def _ref_matches(ref: Mapping[str, Any], owner: Mapping[str, Any], owner_handle: ResourceHandle) -> bool:
    """True when *ref* names *owner*; uids decide whenever both sides carry one."""
    if not _refers_to_kind(ref, owner_handle):
        return False
    owner_meta = _metadata(owner)
    if ref.get("uid") and owner_meta.get("uid"):
        return bool(ref.get("uid") == owner_meta.get("uid"))
    return bool(ref.get("name") == owner_meta.get("name"))


def _is_owned_by(obj: Mapping[str, Any], owner: Mapping[str, Any], owner_handle: ResourceHandle) -> bool:
    return any(_ref_matches(ref, owner, owner_handle) for ref in _metadata(obj).get("ownerReferences") or [])


class StoreGraphWalker(GraphTraversal):
    """Walks traversal steps by listing and fetching objects from a store."""

    def __init__(self, store: ObjectStore, max_candidates: int = 1000) -> None:
        self._store = store
        self._max_candidates = max_candidates

    async def walk(self, root: KubeObject, steps: Sequence[TraversalStep]) -> list[KubeObject]:
        frontier: list[KubeObject] = [root]
        for step in steps:
            reached: dict[str, KubeObject] = {}
            for obj in frontier:
                for found in await self._apply(obj, step):
                    reached.setdefault(_identity(found), found)
            if len(reached) > self._max_candidates:
                raise TraversalLimitError(step.edge, self._max_candidates)
            _logger.debug("step_walked", edge=step.edge, forward=step.forward, reached=len(reached))
            frontier = list(reached.values())
            if not frontier:
                break
        return frontier

    async def _apply(self, obj: KubeObject, step: TraversalStep) -> list[KubeObject]:
        namespace = str(_metadata(obj).get("namespace") or "") if step.dst.namespaced else ""
        conn = step.connection

        if conn.type == ConnectionType.MATCH_NAME:
            return await self._get_all(step.dst, namespace, [str(_metadata(obj).get("name") or "")])

        if conn.type == ConnectionType.OWNED_BY:
            if step.forward:
                candidates = await self._store.list(step.dst, namespace)
                return [c for c in candidates if _is_owned_by(c, obj, step.src)]
            owners: list[KubeObject] = []
            for ref in _metadata(obj).get("ownerReferences") or []:
                if not _refers_to_kind(ref, step.dst):
                    continue
                for owner in await self._get_all(step.dst, namespace, [str(ref.get("name") or "")]):
                    if _ref_matches(ref, owner, step.dst):
                        owners.append(owner)
                    else:
                        # Same name, different uid: the referenced owner was deleted and recreated.
                        _logger.debug("owner_reference_stale", name=ref.get("name"), uid=ref.get("uid"))
            return owners

        if conn.type == ConnectionType.MATCH_SELECTOR:
            if step.forward:
                selector = _selector_at(obj, conn.selector_path)
                if selector is None:
                    return []
                return await self._store.list(step.dst, namespace, selector.to_selector_string())
            labels = _metadata(obj).get("labels") or {}
            candidates = await self._store.list(step.dst, namespace)
            matched = []
            for candidate in candidates:
                selector = _selector_at(candidate, conn.selector_path)
                if selector is not None and selector.matches(labels):
                    matched.append(candidate)
            return matched

        if step.forward:
            return await self._get_all(step.dst, namespace, _referenced_names(obj, conn.references))
        name = _metadata(obj).get("name")
        candidates = await self._store.list(step.dst, namespace)
        return [c for c in candidates if name in _referenced_names(c, conn.references)]

    async def _get_all(self, handle: ResourceHandle, namespace: str, names: Sequence[str]) -> list[KubeObject]:
        found: list[KubeObject] = []
        for name in names:
            if not name:
                continue
            try:
                found.append(await self._store.get(handle, namespace, name))
            except ObjectNotFoundError:
                # A dangling reference is a missing edge, not a failure.
                _logger.debug("reference_dangling", resource=str(handle), namespace=namespace, name=name)
        return found
