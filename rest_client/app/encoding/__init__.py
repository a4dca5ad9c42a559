"""
Wire encoding helpers: query strings, multipart bodies and the rendering
of nested validation errors into readable messages.
"""

from .query import urlencode, build_url
from .multipart import choose_boundary, encode_multipart
from .errors import flatten_errors

__all__ = [
    "urlencode",
    "build_url",
    "choose_boundary",
    "encode_multipart",
    "flatten_errors",
]
