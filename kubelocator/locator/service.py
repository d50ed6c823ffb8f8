"""Locator orchestration: root -> plan -> traversal -> single object.

``ObjectLocatorService.process`` is the one entry point used by the REST API,
the CLI and library callers.  It holds only its collaborators; every call
builds its own catalog index and plan, so one service instance may be shared
by concurrent callers.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Sequence

import structlog

from kubelocator.errors import (
    AmbiguousKindError,
    AmbiguousResultError,
    DisconnectedEdgeError,
    InvalidLocatorError,
    KindNotFoundError,
    ObjectNotFoundError,
    PathEdgeNotFoundError,
)
from kubelocator.locator.disambiguate import reduce_candidates
from kubelocator.locator.interfaces import GraphTraversal, KindResolver, KubeObject, ObjectStore
from kubelocator.locator.plan import compile_plan, index_catalog
from kubelocator.locator.root import resolve_root
from kubelocator.models.locator import EdgeDeclaration, ObjectLocator, RootSelection, object_key
from kubelocator.observability.logging import get_logger
from kubelocator.observability.metrics import resolution_duration_seconds, resolutions_total, traversal_steps

_logger = get_logger("locator.service")

_OUTCOMES: tuple[tuple[type[Exception], str], ...] = (
    (ObjectNotFoundError, "not_found"),
    (AmbiguousResultError, "ambiguous"),
    (PathEdgeNotFoundError, "invalid_path"),
    (DisconnectedEdgeError, "invalid_path"),
    (InvalidLocatorError, "invalid_path"),
    (KindNotFoundError, "kind_error"),
    (AmbiguousKindError, "kind_error"),
)


def _outcome(exc: Exception) -> str:
    for exc_type, outcome in _OUTCOMES:
        if isinstance(exc, exc_type):
            return outcome
    return "error"


class ObjectLocatorService:
    """Resolves one object from a root selection and a named edge path."""

    def __init__(self, kinds: KindResolver, store: ObjectStore, walker: GraphTraversal) -> None:
        self._kinds = kinds
        self._store = store
        self._walker = walker

    async def locate(self, locator: ObjectLocator, namespace: str) -> KubeObject:
        """Resolve a parsed locator document in *namespace*."""
        return await self.process(locator.start, locator.path, locator.connections, namespace)

    async def process(
        self,
        root: RootSelection,
        path: Sequence[str],
        connections: Iterable[EdgeDeclaration],
        namespace: str,
    ) -> KubeObject:
        """Return the single object reached from *root* through *path*.

        Errors are never retried or recovered: the first failure is raised
        to the caller, classified where the core can classify it and
        unchanged where it comes from a collaborator.
        """
        log = _logger.bind(target=root.target.kind, namespace=namespace, path_length=len(path))
        t_start = time.monotonic()
        try:
            result = await self._process(root, path, connections, namespace, log)
        except Exception as exc:
            resolutions_total.labels(outcome=_outcome(exc)).inc()
            log.warning("locator_failed", error_type=type(exc).__name__, error=str(exc))
            raise
        finally:
            resolution_duration_seconds.observe(time.monotonic() - t_start)

        resolutions_total.labels(outcome="resolved").inc()
        log.info("locator_resolved", key=object_key(result))
        return result

    async def _process(
        self,
        root: RootSelection,
        path: Sequence[str],
        connections: Iterable[EdgeDeclaration],
        namespace: str,
        log: structlog.stdlib.BoundLogger,
    ) -> KubeObject:
        catalog = index_catalog(connections)
        # Unknown edge names are caller configuration errors; report them
        # before the first store call.
        for name in path:
            if name not in catalog:
                raise PathEdgeNotFoundError(name)

        root_handle, root_obj = await resolve_root(root, namespace, self._kinds, self._store)
        log.debug("root_resolved", key=object_key(root_obj), resource=str(root_handle))

        steps = await compile_plan(path, catalog, root_handle.type_descriptor, self._kinds)
        traversal_steps.observe(len(steps))
        if not steps:
            return root_obj

        candidates = await self._walker.walk(root_obj, steps)
        log.debug("traversed", candidates=len(candidates))
        return reduce_candidates(candidates, steps[-1].dst)
