"""
Rate limiting package for the REST client.

Maps requests to rate-limit buckets and holds the per-bucket locks and
cooldowns plus the global throttle shared by every bucket.
"""

from .routes import resolve_bucket, MAJOR_RESOURCES
from .buckets import Bucket, BucketLease, BucketRegistry, GlobalThrottle

__all__ = [
    "resolve_bucket",
    "MAJOR_RESOURCES",
    "Bucket",
    "BucketLease",
    "BucketRegistry",
    "GlobalThrottle",
]
