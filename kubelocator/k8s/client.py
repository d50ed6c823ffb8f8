"""Kubernetes client bootstrap and locator wiring."""

from __future__ import annotations

import kubernetes_asyncio.config as k8s_config  # type: ignore[import-untyped]
from kubernetes_asyncio.client import ApiClient  # type: ignore[import-untyped]
from kubernetes_asyncio.dynamic import DynamicClient  # type: ignore[import-untyped]

from kubelocator.graph.walker import StoreGraphWalker
from kubelocator.k8s.dynamic import DynamicKindResolver, DynamicObjectStore
from kubelocator.locator.service import ObjectLocatorService
from kubelocator.models.config import LocatorConfig
from kubelocator.observability.logging import get_logger

_logger = get_logger("k8s.client")


async def load_kube_configuration(kubeconfig: str = "") -> None:
    """Configure the default client from in-cluster config or a kubeconfig file."""
    if kubeconfig:
        await k8s_config.load_kube_config(config_file=kubeconfig)
        _logger.info("k8s client configured from kubeconfig", path=kubeconfig)
        return
    try:
        # load_incluster_config() is synchronous in kubernetes-asyncio
        k8s_config.load_incluster_config()
        _logger.info("k8s client configured from in-cluster service account")
    except k8s_config.ConfigException:
        await k8s_config.load_kube_config()
        _logger.info("k8s client configured from kubeconfig")


async def build_locator(api_client: ApiClient, config: LocatorConfig) -> ObjectLocatorService:
    """Wire the dynamic-client adapters and the store walker into a locator service."""
    dynamic = await DynamicClient(api_client)
    store = DynamicObjectStore(dynamic)
    return ObjectLocatorService(
        kinds=DynamicKindResolver(dynamic),
        store=store,
        walker=StoreGraphWalker(store, max_candidates=config.traversal.max_candidates),
    )
