"""Resolve the start object of a locator."""

from __future__ import annotations

from kubelocator.errors import InvalidLocatorError
from kubelocator.locator.disambiguate import reduce_candidates
from kubelocator.locator.interfaces import KindResolver, KubeObject, ObjectStore
from kubelocator.locator.templates import expand_name_template
from kubelocator.models.locator import ResourceHandle, RootSelection
from kubelocator.observability.logging import get_logger

_logger = get_logger("locator.root")


async def resolve_root(
    root: RootSelection,
    namespace: str,
    kinds: KindResolver,
    store: ObjectStore,
) -> tuple[ResourceHandle, KubeObject]:
    """Resolve *root* to exactly one object and the handle it was found under.

    A non-empty selector lists matching objects and requires exactly one
    match.  Otherwise the name template is expanded and fetched directly;
    store errors from that get, including not-found, propagate unchanged.
    """
    handle = await kinds.resolve(root.target)
    scope = namespace if handle.namespaced else ""

    if root.selector is not None and root.uses_selector:
        selector = root.selector.to_selector_string()
        objects = await store.list(handle, scope, selector)
        _logger.debug("root_listed", resource=str(handle), selector=selector, matched=len(objects))
        return handle, reduce_candidates(objects, handle)

    name = expand_name_template(root.name_template, namespace)
    if not name:
        raise InvalidLocatorError(f"start object of kind {root.target.kind} has no selector and an empty name")
    obj = await store.get(handle, scope, name)
    _logger.debug("root_fetched", resource=str(handle), name=name)
    return handle, obj
