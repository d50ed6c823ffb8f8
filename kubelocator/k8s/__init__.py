"""Kubernetes adapters for the locator core.

Submodules:
    dynamic -- DynamicKindResolver and DynamicObjectStore over the
               kubernetes-asyncio dynamic client.
    client  -- kubeconfig / in-cluster loading and locator wiring.
"""

from kubelocator.k8s.dynamic import DynamicKindResolver, DynamicObjectStore

__all__ = ["DynamicKindResolver", "DynamicObjectStore"]
