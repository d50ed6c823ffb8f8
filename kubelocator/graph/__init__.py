"""Traversal plans and the store-backed graph walker.

Provides the oriented step types produced by the plan compiler and a
traversal engine that applies them by listing and fetching objects through
an ObjectStore (ownerReferences, same-name pairs, label selectors and named
references).
"""

from kubelocator.graph.models import ForwardStep, ReverseStep, TraversalStep
from kubelocator.graph.walker import StoreGraphWalker, field_values

__all__ = [
    "ForwardStep",
    "ReverseStep",
    "StoreGraphWalker",
    "TraversalStep",
    "field_values",
]
