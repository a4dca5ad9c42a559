"""
Shared utilities for the rate-limit-aware REST client.

This package aggregates the cross-cutting building blocks:

- config: Client configuration via pydantic-settings
- logging: Structured logging with request correlation
- metrics: Prometheus counters for requests, retries and waits
- errors: Error payload model and exception types
- retry: Backoff and jitter calculations

Do not import from rest_client into shared/.
"""
