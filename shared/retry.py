"""
Retry timing for the REST dispatcher.

All durations are integer milliseconds.
"""

import random
from typing import Optional


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(self,
                 max_retries: int = 5,
                 route_delay_ms: int = 250,
                 network_jitter_ms: int = 2000,
                 server_jitter_ms: int = 1000,
                 exponential_base: int = 2):
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if route_delay_ms < 0:
            raise ValueError("route_delay_ms must be non-negative")
        self.max_retries = max_retries
        self.route_delay_ms = route_delay_ms
        self.network_jitter_ms = network_jitter_ms
        self.server_jitter_ms = server_jitter_ms
        self.exponential_base = exponential_base

    @classmethod
    def from_settings(cls, settings) -> "RetryConfig":
        """Build from a RestClientConfig."""
        return cls(
            max_retries=settings.max_retries,
            route_delay_ms=settings.route_delay_ms,
            network_jitter_ms=settings.network_jitter_ms,
            server_jitter_ms=settings.server_jitter_ms,
        )


def jitter(bound_ms: int, rng: Optional[random.Random] = None) -> int:
    """Random offset in [0, bound_ms)."""
    if bound_ms <= 0:
        return 0
    return (rng or random).randrange(bound_ms)


def network_retry_delay(config: RetryConfig, rng: Optional[random.Random] = None) -> int:
    """Delay before retrying a request that never got a response."""
    return config.route_delay_ms + jitter(config.network_jitter_ms, rng)


def server_retry_delay(attempt: int, config: RetryConfig, rng: Optional[random.Random] = None) -> int:
    """Exponential backoff for 5xx responses; attempt counts from 0."""
    delay = config.route_delay_ms * (config.exponential_base ** attempt)
    return delay + jitter(config.server_jitter_ms, rng)
