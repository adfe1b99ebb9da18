# SPDX-License-Identifier: Apache-2.0

"""
Redis service for rate limiting counters.

Uses the standard redis-py client. When no URL is configured, or the server
cannot be reached at startup, the service reports itself unavailable and
every operation degrades to a no-op.
"""

from typing import Optional, Dict, Any
import redis
from opentelemetry import trace
import logging

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class RedisConnectionError(Exception):
    """Raised when Redis connection fails."""
    pass


class RedisService:
    """Redis service with graceful degradation when unavailable."""

    def __init__(self, redis_url: Optional[str] = None, client=None):
        """
        Initialize the Redis service.

        Args:
            redis_url: Redis connection URL (redis://host:port/db)
            client: Pre-built redis client, used instead of redis_url
        """
        self.redis_url = redis_url
        self.client = client

        if self.client is not None:
            return

        if not self.redis_url:
            logger.warning("No REDIS_URL configured, rate limiting will be disabled")
            return

        try:
            self.client = redis.from_url(self.redis_url, decode_responses=True)
            self._test_connection()
            logger.info("Redis service initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize Redis service: {str(e)}")
            self.client = None

    def _test_connection(self) -> None:
        """Test Redis connection."""
        try:
            if not self.client.ping():
                raise RedisConnectionError("Redis ping failed")
        except redis.RedisError as e:
            raise RedisConnectionError(f"Redis connection failed: {str(e)}")

    def is_available(self) -> bool:
        """Check if Redis service is available."""
        return self.client is not None

    def increment_window(self, key: str, ttl_seconds: int) -> Optional[int]:
        """
        Increment a fixed-window counter, starting its TTL on first use.

        Args:
            key: Counter key
            ttl_seconds: Window length in seconds

        Returns:
            Counter value after increment, or None if Redis is unavailable
        """
        if not self.is_available():
            return None

        with tracer.start_as_current_span("redis.increment_window") as span:
            span.set_attributes({
                "redis.operation": "incr",
                "redis.key": key,
                "redis.ttl": ttl_seconds
            })

            try:
                count = self.client.incr(key)
                if count == 1:
                    self.client.expire(key, ttl_seconds)

                span.set_attribute("redis.result", "success")
                return int(count)

            except redis.RedisError as e:
                span.set_attribute("redis.result", "error")
                logger.error(f"Redis INCR failed: {str(e)}")
                return None

    def health_check(self) -> Dict[str, Any]:
        """Check Redis connection health."""
        if not self.is_available():
            return {"status": "disabled"}

        try:
            self.client.ping()
            return {"status": "healthy"}
        except redis.RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return {"status": "unhealthy", "error": str(e)}

    def close(self) -> None:
        """Close the Redis connection pool."""
        if self.client is not None:
            self.client.close()
            self.client = None
