"""
Lightweight metrics collection for Club Live.
Wraps prometheus_client counters and histograms for the upstream pipeline.
"""
from __future__ import annotations

from prometheus_client import Counter, Histogram, start_http_server

from shared.config import get_settings
from shared.utils.logging import get_logger

logger = get_logger(__name__)

# ── Counters ────────────────────────────────────────────────────────────
UPSTREAM_REQUESTS = Counter(
    "cl_upstream_requests_total",
    "Total upstream scoring API requests",
    ["resource", "status"],
)
BALL_FEED_SHAPES = Counter(
    "cl_ball_feed_shapes_total",
    "Ball feed payloads seen, by classified shape",
    ["shape"],
)
BALL_FEED_FALLBACKS = Counter(
    "cl_ball_feed_fallbacks_total",
    "Ball feed lookups that retried against the alternate endpoint",
)
ENRICHMENT_FAILURES = Counter(
    "cl_enrichment_failures_total",
    "Best-effort pipeline steps that failed and degraded to absent",
    ["step"],
)

# ── Histograms ──────────────────────────────────────────────────────────
UPSTREAM_LATENCY = Histogram(
    "cl_upstream_latency_seconds",
    "Upstream request latency in seconds",
    ["resource"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)


def start_metrics_server(port: int | None = None) -> None:
    """Start the Prometheus metrics HTTP server."""
    settings = get_settings()
    if not settings.metrics_enabled:
        return
    metrics_port = port or settings.metrics_port
    try:
        start_http_server(metrics_port)
        logger.info("metrics_server_started", port=metrics_port)
    except OSError as exc:
        logger.warning("metrics_server_failed", error=str(exc), port=metrics_port)
