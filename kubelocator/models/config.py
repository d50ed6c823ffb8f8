"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class KubernetesConfig:
    """Kubernetes client configuration."""

    kubeconfig: str = ""
    default_namespace: str = "default"


@dataclass
class TraversalConfig:
    """Graph walker configuration."""

    max_candidates: int = 1000


@dataclass
class APIConfig:
    """REST API configuration."""

    port: int = 8080


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "json"


@dataclass
class LocatorConfig:
    """Top-level kubelocator configuration."""

    kubernetes: KubernetesConfig = field(default_factory=KubernetesConfig)
    traversal: TraversalConfig = field(default_factory=TraversalConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
