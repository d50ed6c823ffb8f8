"""Prometheus metrics for object location."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

resolutions_total = Counter(
    "kubelocator_resolutions_total",
    "Locator resolutions by outcome",
    ["outcome"],
)

resolution_duration_seconds = Histogram(
    "kubelocator_resolution_duration_seconds",
    "Wall time of one locator resolution",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

traversal_steps = Histogram(
    "kubelocator_traversal_steps",
    "Number of compiled traversal steps per resolution",
    buckets=(0, 1, 2, 3, 4, 6, 8, 12),
)
