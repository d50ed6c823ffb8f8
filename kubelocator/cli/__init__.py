"""kubelocator command-line interface.

Exposes:
    cli -- Click group entry point (registered as ``kubelocator`` script).
"""

from kubelocator.cli.main import cli

__all__ = ["cli"]
