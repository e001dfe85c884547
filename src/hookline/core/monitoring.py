"""Prometheus counters for record mutations and snapshot persistence.

Provides:
- record_mutations_total: successful create/update/delete/transition calls
- storage_write_failures_total: saves that failed after an in-memory mutation
- get_metrics_response(): Response for the /metrics route
"""

from __future__ import annotations

from prometheus_client import REGISTRY, Counter, generate_latest
from starlette.responses import Response

record_mutations_total = Counter(
    "record_mutations_total",
    "Total successful record mutations",
    ["kind", "operation"],
)

storage_write_failures_total = Counter(
    "storage_write_failures_total",
    "Snapshot saves that failed after the in-memory mutation succeeded",
    ["key"],
)


def get_metrics_response() -> Response:
    """Generate Prometheus metrics response."""
    return Response(
        content=generate_latest(REGISTRY),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
