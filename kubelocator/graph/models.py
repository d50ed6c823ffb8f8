"""Data structures for compiled traversal plans."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from kubelocator.models.locator import ConnectionSpec, ResourceHandle


@dataclass(frozen=True)
class TraversalStep(ABC):
    """One directed application of an edge declaration.

    ``src`` is the handle of the objects the step starts from and ``dst`` the
    handle of the objects it reaches, both in traversal order.  ``connection``
    is always stated in the declared src -> dst direction; the concrete
    subclass says which way it is being applied.
    """

    edge: str
    src: ResourceHandle
    dst: ResourceHandle
    connection: ConnectionSpec

    @property
    @abstractmethod
    def forward(self) -> bool: ...


@dataclass(frozen=True)
class ForwardStep(TraversalStep):
    """The current position is the declared src kind: walk src -> dst."""

    @property
    def forward(self) -> bool:
        return True


@dataclass(frozen=True)
class ReverseStep(TraversalStep):
    """The current position is the declared dst kind: walk dst -> src."""

    @property
    def forward(self) -> bool:
        return False
