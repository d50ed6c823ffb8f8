"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from kubelocator.models.config import (
    APIConfig,
    KubernetesConfig,
    LocatorConfig,
    LogConfig,
    TraversalConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBELOCATOR_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = _env(key, str(default))
    try:
        val = int(raw)
    except ValueError as exc:
        raise ValueError(f"Invalid integer for KUBELOCATOR_{key}: {raw}") from exc
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _validate_choice(name: str, value: str, valid: set[str]) -> str:
    if value.lower() not in valid:
        raise ValueError(f"Invalid {name}: {value}. Must be one of {sorted(valid)}")
    return value.lower()


def load_config() -> LocatorConfig:
    """Load configuration from KUBELOCATOR_* environment variables."""
    return LocatorConfig(
        kubernetes=KubernetesConfig(
            kubeconfig=_env("KUBECONFIG", ""),
            default_namespace=_env("NAMESPACE", "default") or "default",
        ),
        traversal=TraversalConfig(
            max_candidates=_env_int("MAX_CANDIDATES", 1000, min_val=10, max_val=100_000),
        ),
        api=APIConfig(
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_choice("log level", _env("LOG_LEVEL", "info"), {"debug", "info", "warning", "error"}),
            format=_validate_choice("log format", _env("LOG_FORMAT", "json"), {"json", "console"}),
        ),
    )
