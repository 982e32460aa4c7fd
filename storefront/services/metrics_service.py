# storefront/services/metrics_service.py
"""
Prometheus metrics for AI description enhancement.

Each recorder owns its metrics on an explicit registry, so the app and the
tests can each build one without colliding on the global default registry.
"""
import logging

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

logger = logging.getLogger(__name__)


class MetricsRecorder:
    """Counters and a latency histogram for the enhancement path."""

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()

        self.requests_total = Counter(
            'ai_description_requests_total',
            'Total number of AI description generation requests',
            ['status'],
            registry=self.registry
        )
        self.cache_hits_total = Counter(
            'ai_description_cache_hits_total',
            'Total number of cache hits for AI descriptions',
            registry=self.registry
        )
        self.latency_seconds = Histogram(
            'ai_description_latency_seconds',
            'Latency of AI description generation in seconds',
            registry=self.registry
        )
        self.errors_total = Counter(
            'ai_description_errors_total',
            'Total number of AI description generation errors',
            ['error_type'],
            registry=self.registry
        )

    # Recording is fire-and-forget: a metrics problem must never fail a request.

    def record_outcome(self, status: str) -> None:
        try:
            self.requests_total.labels(status=status).inc()
        except Exception as e:
            logger.warning(f"Failed to record outcome '{status}': {e}")

    def record_cache_hit(self) -> None:
        try:
            self.cache_hits_total.inc()
        except Exception as e:
            logger.warning(f"Failed to record cache hit: {e}")

    def record_latency_seconds(self, seconds: float) -> None:
        try:
            self.latency_seconds.observe(seconds)
        except Exception as e:
            logger.warning(f"Failed to record latency sample: {e}")

    def record_error(self, kind: str) -> None:
        try:
            self.errors_total.labels(error_type=kind).inc()
        except Exception as e:
            logger.warning(f"Failed to record error '{kind}': {e}")

    def exposition(self) -> tuple[bytes, str]:
        """Returns the registry in Prometheus text format with its content type."""
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
