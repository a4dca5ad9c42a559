"""
Adapters package for the REST client.

Contains the HTTP transport the dispatcher sends requests through. The
transport only moves bytes: rate limiting, retries and error mapping stay
in the dispatcher.
"""

from .transport import Transport, TransportResponse, HttpxTransport

__all__ = [
    "Transport",
    "TransportResponse",
    "HttpxTransport",
]
