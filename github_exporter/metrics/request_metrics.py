"""Request failure and duration metrics shared by all collectors."""

import logging

from prometheus_client import CollectorRegistry, Counter, Histogram

logger = logging.getLogger(__name__)

NAMESPACE = "github"


class RequestMetrics:
    """Failure counter and duration histogram labelled by collector kind."""

    def __init__(self, registry: CollectorRegistry):
        """Create and register the request metrics.

        Args:
            registry: Registry the metrics are exposed on
        """
        self.failures = Counter(
            "request_failures",
            "Number of failed requests to the GitHub API",
            ["collector"],
            namespace=NAMESPACE,
            registry=registry,
        )
        self.duration = Histogram(
            "request_duration_seconds",
            "Histogram of latencies for requests to the GitHub API",
            ["collector"],
            namespace=NAMESPACE,
            registry=registry,
        )

    def init_collector(self, kind: str):
        """Expose a zero failure count for a collector before its first error."""
        self.failures.labels(collector=kind).inc(0)

    def record_failure(self, kind: str):
        self.failures.labels(collector=kind).inc()

    def observe_duration(self, kind: str, seconds: float):
        self.duration.labels(collector=kind).observe(seconds)
