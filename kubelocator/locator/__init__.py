"""Locator core: root resolution, plan compilation and disambiguation.

Exports:
    ObjectLocatorService -- end-to-end ``process`` over injected collaborators.
    resolve_root         -- start object from a selector or name template.
    compile_plan         -- oriented traversal steps for a named edge path.
    index_catalog        -- name -> EdgeDeclaration map, rejecting duplicates.
    reduce_candidates    -- exactly-one policy shared by every lookup.
    expand_name_template -- name template -> literal name.
"""

from kubelocator.locator.disambiguate import reduce_candidates
from kubelocator.locator.interfaces import GraphTraversal, KindResolver, KubeObject, ObjectStore
from kubelocator.locator.plan import compile_plan, index_catalog
from kubelocator.locator.root import resolve_root
from kubelocator.locator.service import ObjectLocatorService
from kubelocator.locator.templates import expand_name_template

__all__ = [
    "GraphTraversal",
    "KindResolver",
    "KubeObject",
    "ObjectLocatorService",
    "ObjectStore",
    "compile_plan",
    "expand_name_template",
    "index_catalog",
    "reduce_candidates",
    "resolve_root",
]
