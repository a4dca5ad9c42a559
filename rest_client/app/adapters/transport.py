"""
HTTP transport for the REST client.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple

import httpx

from shared.logging import get_logger
from shared.errors import TransportError

Headers = Sequence[Tuple[str, str]]


@dataclass
class TransportResponse:
    """Raw HTTP response: status line, headers in wire order, body bytes."""
    status: int
    reason: str
    headers: List[Tuple[str, str]] = field(default_factory=list)
    body: bytes = b""


class Transport(Protocol):
    """Anything that can send one HTTP request.

    Raises TransportError when no response could be obtained at all.
    """

    async def send(self, method: str, url: str, headers: Headers,
                   body: Optional[bytes]) -> TransportResponse:
        ...


class HttpxTransport:
    """Transport backed by a shared httpx.AsyncClient."""

    def __init__(self, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None):
        self.logger = get_logger("rest_client.transport")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def send(self, method: str, url: str, headers: Headers,
                   body: Optional[bytes]) -> TransportResponse:
        try:
            response = await self._client.request(
                method,
                url,
                headers=list(headers),
                content=body,
            )
        except httpx.HTTPError as e:
            self.logger.debug("HTTP transport error", method=method, url=url, error=str(e))
            raise TransportError(
                f"{type(e).__name__}: {e}",
                details={"method": method, "url": url}
            ) from e

        return TransportResponse(
            status=response.status_code,
            reason=response.reason_phrase,
            headers=list(response.headers.multi_items()),
            body=response.content,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
