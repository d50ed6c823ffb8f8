"""Core data structures for kubelocator."""

from kubelocator.models.config import LocatorConfig
from kubelocator.models.locator import (
    ConnectionSpec,
    ConnectionType,
    EdgeDeclaration,
    LabelSelector,
    ObjectLocator,
    ResourceHandle,
    RootSelection,
    SelectorOperator,
    SelectorRequirement,
    TypeDescriptor,
    object_key,
)

__all__ = [
    "ConnectionSpec",
    "ConnectionType",
    "EdgeDeclaration",
    "LabelSelector",
    "LocatorConfig",
    "ObjectLocator",
    "ResourceHandle",
    "RootSelection",
    "SelectorOperator",
    "SelectorRequirement",
    "TypeDescriptor",
    "object_key",
]
