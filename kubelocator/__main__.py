"""Entry point for `python -m kubelocator`.

Usage:
    python -m kubelocator
    uv run python -m kubelocator
"""

from __future__ import annotations

import asyncio

from kubelocator.app import main

asyncio.run(main())
