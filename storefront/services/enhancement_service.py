# storefront/services/enhancement_service.py
import logging
import time

from .description_cache import CacheError, EnhancementCache
from .generation_service import GenerationClient
from .metrics_service import MetricsRecorder

logger = logging.getLogger(__name__)


class DescriptionEnhancer:
    """
    Decides the description to expose for a product: a cached one, a freshly
    generated one, or the original. Never raises; every failure ends up as a
    metric plus the original description.
    """

    def __init__(
        self,
        cache: EnhancementCache | None,
        generator: GenerationClient | None,
        metrics: MetricsRecorder,
    ):
        self.cache = cache
        self.generator = generator
        self.metrics = metrics

    @property
    def enabled(self) -> bool:
        return self.cache is not None and self.generator is not None

    def enhance(
        self,
        product_id: str,
        product_name: str,
        current_description: str,
        deadline: float | None = None,
    ) -> str:
        if not self.enabled:
            return current_description

        start = time.monotonic()

        # Step 1: cache lookup, a failing cache counts as a miss
        try:
            cached, found = self.cache.get(product_id)
        except CacheError as e:
            logger.warning(f"Cache read failed for product '{product_id}', treating as miss: {e}")
            self.metrics.record_error("cache_read_failed")
            cached, found = "", False

        if found and cached:
            self.metrics.record_cache_hit()
            return cached

        # Step 2: generate
        result = self.generator.generate(product_name, current_description, deadline=deadline)
        if not result.ok:
            logger.warning(f"Description generation failed for product '{product_id}': {result.error}")
            self.metrics.record_error("generation_failed")
            self.metrics.record_outcome("error")
            return current_description

        # Step 3: populate the cache, the generated value stands either way
        try:
            self.cache.set(product_id, result.description)
        except CacheError as e:
            logger.error(f"Failed to cache description for product '{product_id}': {e}")
            self.metrics.record_error("cache_failed")

        self.metrics.record_outcome("success")
        self.metrics.record_latency_seconds(time.monotonic() - start)
        return result.description

