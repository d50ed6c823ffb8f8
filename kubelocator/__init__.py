"""kubelocator: resolve one Kubernetes object by walking a declared relationship path."""

__version__ = "0.1.0"
