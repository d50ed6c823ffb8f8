"""Compile a named edge path into oriented traversal steps."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from kubelocator.errors import DisconnectedEdgeError, InvalidLocatorError, PathEdgeNotFoundError
from kubelocator.graph.models import ForwardStep, ReverseStep, TraversalStep
from kubelocator.locator.interfaces import KindResolver
from kubelocator.models.locator import EdgeDeclaration, TypeDescriptor
from kubelocator.observability.logging import get_logger

_logger = get_logger("locator.plan")


def index_catalog(connections: Iterable[EdgeDeclaration]) -> dict[str, EdgeDeclaration]:
    """Index edge declarations by name, rejecting duplicate names."""
    catalog: dict[str, EdgeDeclaration] = {}
    for edge in connections:
        if edge.name in catalog:
            raise InvalidLocatorError(f"edge {edge.name!r} is declared more than once")
        catalog[edge.name] = edge
    return catalog


async def compile_plan(
    path: Sequence[str],
    catalog: Mapping[str, EdgeDeclaration],
    start: TypeDescriptor,
    kinds: KindResolver,
) -> list[TraversalStep]:
    """Orient every edge of *path* relative to the kind reached so far.

    Each step starts at the kind the previous step reached (``start`` for the
    first).  An edge whose src is that kind is applied forward, one whose dst
    is that kind in reverse; an edge touching neither is disconnected.
    """
    steps: list[TraversalStep] = []
    current = start
    for name in path:
        edge = catalog.get(name)
        if edge is None:
            raise PathEdgeNotFoundError(name)

        src = await kinds.resolve(edge.src)
        dst = await kinds.resolve(edge.dst)

        if edge.src == current:
            steps.append(ForwardStep(edge=name, src=src, dst=dst, connection=edge.connection))
            current = edge.dst
        elif edge.dst == current:
            steps.append(ReverseStep(edge=name, src=dst, dst=src, connection=edge.connection))
            current = edge.src
        else:
            raise DisconnectedEdgeError(name, current)

    _logger.debug("plan_compiled", start=str(start), steps=[(s.edge, s.forward) for s in steps])
    return steps
