"""Error taxonomy for object location.

Every failure surfaced by ``ObjectLocatorService.process`` is either one of
the classes below or an error raised unchanged by a collaborator (for example
a ``kubernetes_asyncio`` ``ApiException`` from a list call).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kubelocator.models.locator import ResourceHandle, TypeDescriptor


class LocatorError(Exception):
    """Base class for all classified locator failures."""


class InvalidLocatorError(LocatorError, ValueError):
    """The locator document or one of its parts is malformed."""


class KindNotFoundError(LocatorError):
    """The kind resolver has no mapping for a type descriptor."""

    def __init__(self, target: TypeDescriptor) -> None:
        super().__init__(f"no resource found for kind {target}")
        self.target = target


class AmbiguousKindError(LocatorError):
    """The kind resolver found more than one resource for a type descriptor."""

    def __init__(self, target: TypeDescriptor, candidates: list[str] | None = None) -> None:
        detail = f": {', '.join(candidates)}" if candidates else ""
        super().__init__(f"multiple resources found for kind {target}{detail}")
        self.target = target
        self.candidates = candidates or []


class ObjectNotFoundError(LocatorError):
    """No object of the queried resource matched."""

    def __init__(self, handle: ResourceHandle, name: str = "") -> None:
        if name:
            message = f'{handle.group_resource} "{name}" not found'
        else:
            message = f"{handle.group_resource} not found"
        super().__init__(message)
        self.handle = handle
        self.name = name


class AmbiguousResultError(LocatorError):
    """More than one object matched where exactly one was required."""

    def __init__(self, handle: ResourceHandle, keys: list[str]) -> None:
        super().__init__(f"multiple {handle.group_resource} objects matched: {', '.join(keys)}")
        self.handle = handle
        self.keys = keys


class PathEdgeNotFoundError(LocatorError):
    """A path names an edge that is absent from the catalog."""

    def __init__(self, name: str) -> None:
        super().__init__(f"edge {name!r} is not declared in the connection catalog")
        self.name = name


class DisconnectedEdgeError(LocatorError):
    """A path edge touches neither endpoint of the current traversal position."""

    def __init__(self, name: str, current: TypeDescriptor) -> None:
        super().__init__(f"edge {name!r} is not connected to kind {current}")
        self.name = name
        self.current = current


class TraversalLimitError(LocatorError):
    """A traversal frontier grew past the configured candidate limit."""

    def __init__(self, edge: str, limit: int) -> None:
        super().__init__(f"traversal over edge {edge!r} exceeded {limit} candidates")
        self.edge = edge
        self.limit = limit
