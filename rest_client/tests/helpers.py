"""
Test doubles and response factories for the REST client tests.
"""

import asyncio
import json
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Sequence, Tuple, Union

from rest_client.app.adapters.transport import TransportResponse
from shared.errors import TransportError


class ResponseFactory:
    """Factory for canned transport responses."""

    @staticmethod
    def json(status: int = 200, body: Any = None, reason: str = "OK",
             headers: Optional[Dict[str, str]] = None):
        wire_headers = [("Content-Type", "application/json")]
        wire_headers.extend((headers or {}).items())
        return TransportResponse(
            status=status,
            reason=reason,
            headers=wire_headers,
            body=json.dumps(body if body is not None else {}).encode("utf-8"),
        )

    @staticmethod
    def text(status: int, body: str, reason: str, headers: Optional[Dict[str, str]] = None):
        wire_headers = [("Content-Type", "text/plain")]
        wire_headers.extend((headers or {}).items())
        return TransportResponse(status=status, reason=reason, headers=wire_headers,
                                 body=body.encode("utf-8"))

    @staticmethod
    def rate_limited(retry_after_ms: float, is_global: bool = False):
        return ResponseFactory.json(
            429,
            {"message": "You are being rate limited.", "retry_after": retry_after_ms, "global": is_global},
            reason="Too Many Requests",
        )

    @staticmethod
    def server_error(status: int = 502):
        return ResponseFactory.json(status, {"message": "upstream"}, reason="Bad Gateway")

    @staticmethod
    def invalid_form_body():
        return ResponseFactory.json(
            400,
            {
                "code": 50035,
                "message": "Invalid Form Body",
                "errors": {"name": {"_errors": [{"code": "BASE_TYPE_REQUIRED", "message": "required"}]}},
            },
            reason="Bad Request",
        )


Scripted = Union[Any, Exception]


class ScriptedTransport:
    """Transport double replaying a script of responses or exceptions.

    Records every call and how many calls were in flight at once per URL
    and overall. Each send yields to the event loop ``yields`` times so
    concurrent callers get a chance to overlap.
    """

    def __init__(self, script: Sequence[Scripted] = (), default: Optional[Any] = None, yields: int = 3):
        self.script: Deque[Scripted] = deque(script)
        self.default = default if default is not None else ResponseFactory.json(200, {"ok": True})
        self.yields = yields
        self.calls: List[Tuple[str, str, List[Tuple[str, str]], Optional[bytes]]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._per_url: Dict[str, int] = {}
        self.max_in_flight_per_url: Dict[str, int] = {}

    async def send(self, method, url, headers, body):
        self.calls.append((method, url, list(headers), body))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self._per_url[url] = self._per_url.get(url, 0) + 1
        self.max_in_flight_per_url[url] = max(self.max_in_flight_per_url.get(url, 0), self._per_url[url])
        try:
            for _ in range(self.yields):
                await asyncio.sleep(0)
            step = self.script.popleft() if self.script else self.default
            if isinstance(step, Exception):
                raise step
            return step
        finally:
            self.in_flight -= 1
            self._per_url[url] -= 1


class FakeClock:
    """Monotonic millisecond clock advanced only by RecordingSleep."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class RecordingSleep:
    """Sleep double: records requested delays and advances a FakeClock."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        self.clock.now += seconds * 1000
        await asyncio.sleep(0)

    @property
    def delays_ms(self) -> List[float]:
        return [round(delay * 1000, 3) for delay in self.delays]


def connection_refused() -> TransportError:
    return TransportError("ConnectError: connection refused")
