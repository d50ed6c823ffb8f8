"""REST API layer for kubelocator.

Exposes:
    create_app -- FastAPI application factory.
"""

from kubelocator.api.app import create_app

__all__ = ["create_app"]
