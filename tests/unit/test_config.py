"""Tests for environment configuration loading."""

from __future__ import annotations

import pytest

from kubelocator.config import load_config


class TestLoadConfig:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in ("NAMESPACE", "MAX_CANDIDATES", "API_PORT", "LOG_LEVEL", "LOG_FORMAT", "KUBECONFIG"):
            monkeypatch.delenv(f"KUBELOCATOR_{key}", raising=False)
        config = load_config()
        assert config.kubernetes.default_namespace == "default"
        assert config.kubernetes.kubeconfig == ""
        assert config.traversal.max_candidates == 1000
        assert config.api.port == 8080
        assert config.log.level == "info"
        assert config.log.format == "json"

    def test_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KUBELOCATOR_NAMESPACE", "workflows")
        monkeypatch.setenv("KUBELOCATOR_MAX_CANDIDATES", "50")
        monkeypatch.setenv("KUBELOCATOR_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("KUBELOCATOR_LOG_FORMAT", "console")
        monkeypatch.setenv("KUBELOCATOR_KUBECONFIG", "/tmp/kubeconfig")
        config = load_config()
        assert config.kubernetes.default_namespace == "workflows"
        assert config.traversal.max_candidates == 50
        assert config.log.level == "debug"
        assert config.log.format == "console"
        assert config.kubernetes.kubeconfig == "/tmp/kubeconfig"

    def test_integers_clamped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KUBELOCATOR_MAX_CANDIDATES", "1")
        monkeypatch.setenv("KUBELOCATOR_API_PORT", "80")
        config = load_config()
        assert config.traversal.max_candidates == 10
        assert config.api.port == 1024

    def test_invalid_integer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KUBELOCATOR_MAX_CANDIDATES", "lots")
        with pytest.raises(ValueError, match="MAX_CANDIDATES"):
            load_config()

    def test_invalid_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KUBELOCATOR_LOG_LEVEL", "verbose")
        with pytest.raises(ValueError, match="log level"):
            load_config()

    def test_invalid_log_format(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KUBELOCATOR_LOG_FORMAT", "xml")
        with pytest.raises(ValueError, match="log format"):
            load_config()
