"""
Shared metrics configuration for the REST dispatcher.
"""

from typing import Dict, Any, Optional

from prometheus_client import Counter, Histogram, CollectorRegistry, generate_latest


class DispatcherMetrics:
    """Prometheus metrics for dispatched requests, retries and rate-limit waits.

    Each collector owns its registry unless one is passed in, so several
    dispatchers can live in one process.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up dispatcher metrics."""
        self._metrics["rest_requests_total"] = Counter(
            "rest_requests_total",
            "Total REST requests by final status",
            ["method", "status"],
            registry=self.registry
        )

        self._metrics["rest_retries_total"] = Counter(
            "rest_retries_total",
            "Total REST request retries",
            ["reason"],
            registry=self.registry
        )

        self._metrics["rest_ratelimit_waits_total"] = Counter(
            "rest_ratelimit_waits_total",
            "Total waits caused by rate-limit cooldowns",
            ["scope"],
            registry=self.registry
        )

        self._metrics["rest_request_duration_seconds"] = Histogram(
            "rest_request_duration_seconds",
            "REST request duration including retries, in seconds",
            ["method"],
            registry=self.registry
        )

    def record_request(self, method: str, status: Optional[int], duration_seconds: float):
        """Record a finished dispatch."""
        label = str(status) if status is not None else "network_error"
        self._metrics["rest_requests_total"].labels(method=method, status=label).inc()
        self._metrics["rest_request_duration_seconds"].labels(method=method).observe(duration_seconds)

    def record_retry(self, reason: str):
        """Record a retry decision (network, rate_limited, server)."""
        self._metrics["rest_retries_total"].labels(reason=reason).inc()

    def record_wait(self, scope: str):
        """Record a cooldown wait (global or bucket)."""
        self._metrics["rest_ratelimit_waits_total"].labels(scope=scope).inc()

    def sample(self, name: str, labels: Optional[Dict[str, str]] = None) -> float:
        """Read the current value of a sample from this collector's registry."""
        value = self.registry.get_sample_value(name, labels or {})
        return value or 0.0

    def export(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)
