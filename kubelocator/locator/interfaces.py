"""Collaborator interfaces used by the locator core.

The core never talks to Kubernetes directly.  It receives a KindResolver, an
ObjectStore and a GraphTraversal as arguments; ``kubelocator.k8s`` and
``kubelocator.graph`` provide the production implementations.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from kubelocator.graph.models import TraversalStep
    from kubelocator.models.locator import ResourceHandle, TypeDescriptor

KubeObject = dict[str, Any]


class KindResolver(ABC):
    """Maps a type descriptor to a versioned resource handle."""

    @abstractmethod
    async def resolve(self, target: TypeDescriptor) -> ResourceHandle:
        """Return the handle for *target*.

        Raises:
            KindNotFoundError  -- no resource serves the kind.
            AmbiguousKindError -- more than one resource serves the kind.
        """


class ObjectStore(ABC):
    """List and get objects of a resource handle."""

    @abstractmethod
    async def list(self, handle: ResourceHandle, namespace: str, label_selector: str = "") -> list[KubeObject]:
        """Return every object of *handle* in *namespace* matching *label_selector*.

        An empty namespace lists across the cluster (and is what cluster-scoped
        handles use).  An empty selector matches everything.
        """

    @abstractmethod
    async def get(self, handle: ResourceHandle, namespace: str, name: str) -> KubeObject:
        """Return one object by name; raise ObjectNotFoundError when absent."""


class GraphTraversal(ABC):
    """Walks a compiled plan from a root object."""

    @abstractmethod
    async def walk(self, root: KubeObject, steps: Sequence[TraversalStep]) -> list[KubeObject]:
        """Return every object reachable by applying *steps* in order.

        An empty list is a legal outcome meaning no path exists.
        """
