"""
Result type returned by every dispatch.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional

from shared.errors import APIRequestError


class ErrorKind(str, Enum):
    """Why a dispatch failed."""
    TRANSPORT = "transport"        # no response; retried with jitter
    RATE_LIMITED = "rate_limited"  # 429; retried after the server's delay
    SERVER = "server"              # 5xx; retried with exponential backoff
    CLIENT = "client"              # other 4xx; surfaced immediately
    VALIDATION = "validation"      # 4xx carrying a field-level error tree


@dataclass(frozen=True)
class Outcome:
    """Success(data) or Failure(error), plus the rate-limit info that came with it."""

    ok: bool
    data: Any = None
    error: Optional[str] = None
    retry_after_ms: Optional[int] = None
    is_global: bool = False
    status: Optional[int] = None
    kind: Optional[ErrorKind] = None

    @classmethod
    def success(cls, data: Any, retry_after_ms: Optional[int] = None,
                is_global: bool = False, status: Optional[int] = None) -> "Outcome":
        return cls(True, data=data, retry_after_ms=retry_after_ms, is_global=is_global, status=status)

    @classmethod
    def failure(cls, error: str, kind: ErrorKind, retry_after_ms: Optional[int] = None,
                is_global: bool = False, status: Optional[int] = None, data: Any = None) -> "Outcome":
        return cls(False, data=data, error=error, retry_after_ms=retry_after_ms,
                   is_global=is_global, status=status, kind=kind)

    def __iter__(self) -> Iterator[Any]:
        # data, error = await dispatcher.dispatch(...)
        yield self.data if self.ok else None
        yield self.error

    def raise_for_error(self) -> Any:
        """Return the data, or raise APIRequestError for a failure."""
        if self.ok:
            return self.data
        raise APIRequestError(
            kind=self.kind.value if self.kind else "unknown",
            message=self.error or "",
            status=self.status,
            details={"retry_after_ms": self.retry_after_ms, "global": self.is_global}
        )
