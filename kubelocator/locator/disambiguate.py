"""Reduce a candidate set to exactly one object."""

from __future__ import annotations

from collections.abc import Sequence

from kubelocator.errors import AmbiguousResultError, ObjectNotFoundError
from kubelocator.locator.interfaces import KubeObject
from kubelocator.models.locator import ResourceHandle, object_key


def reduce_candidates(objects: Sequence[KubeObject], handle: ResourceHandle) -> KubeObject:
    """Return the single object in *objects*.

    Raises ObjectNotFoundError for an empty set and AmbiguousResultError,
    carrying the sorted object keys, for more than one object.  *handle* is
    the resource that was queried and is only used for error reporting.
    """
    if not objects:
        raise ObjectNotFoundError(handle)
    if len(objects) > 1:
        raise AmbiguousResultError(handle, sorted(object_key(obj) for obj in objects))
    return objects[0]
