"""
Request dispatch with per-bucket serialization, cooldowns and retries.
"""

import asyncio
import json
import math
import random
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from shared.config import RestClientConfig
from shared.errors import APIErrorPayload, DispatchContextError, TransportError
from shared.logging import dispatch_context, get_logger
from shared.metrics import DispatcherMetrics
from shared.retry import RetryConfig, network_retry_delay, server_retry_delay

from .adapters.transport import Transport, TransportResponse
from .encoding.errors import SEPARATOR, flatten_errors
from .encoding.multipart import Attachment, encode_multipart
from .encoding.query import QueryParams, build_url
from .outcome import ErrorKind, Outcome
from .ratelimit.buckets import BucketLease, BucketRegistry, GlobalThrottle
from .ratelimit.routes import resolve_bucket

JSON = "application/json"
MULTIPART = "multipart/form-data; boundary="
PRECISION = "millisecond"
PAYLOAD_METHODS = frozenset({"PUT", "PATCH", "POST"})


def monotonic_ms() -> float:
    return time.monotonic() * 1000


def _header_ms(value: Optional[str]) -> Optional[int]:
    """Parse a seconds header such as ``x-ratelimit-reset-after: 1.250`` or ``retry-after: 2``."""
    if value is None:
        return None
    try:
        return math.ceil(float(value) * 1000)
    except ValueError:
        return None


class RequestDispatcher:
    """Sends requests while honouring bucket and global rate limits.

    Requests that resolve to the same bucket run one at a time in arrival
    order; requests in different buckets never wait on each other except for
    the global throttle.
    """

    def __init__(
        self,
        transport: Transport,
        config: Optional[RestClientConfig] = None,
        token: Optional[str] = None,
        metrics: Optional[DispatcherMetrics] = None,
        clock: Callable[[], float] = monotonic_ms,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or RestClientConfig()
        self.transport = transport
        self.token = token if token is not None else self.config.token
        self.metrics = metrics or DispatcherMetrics()
        self.retry_config = RetryConfig.from_settings(self.config)
        self.buckets = BucketRegistry()
        self.global_throttle = GlobalThrottle()
        self.logger = get_logger("rest_client.dispatcher")

        self._clock = clock
        self._sleep = sleep
        self._rng = rng
        self._dispatch_count = 0

    async def dispatch(
        self,
        method: str,
        path: str,
        payload: Any = None,
        query: Optional[QueryParams] = None,
        files: Optional[Sequence[Attachment]] = None,
    ) -> Outcome:
        """Send one request and return its Outcome.

        May suspend the calling task on cooldowns, on the bucket lock, on the
        transport and on retry backoff. Failures are returned, not raised.
        """
        try:
            task = asyncio.current_task()
        except RuntimeError:
            task = None
        if task is None:
            raise DispatchContextError()

        method = method.upper()
        key = resolve_bucket(method, path)
        started = time.perf_counter()

        with dispatch_context(method, key), self.buckets.checkout(key) as bucket:
            global_wait = self.global_throttle.remaining(self._clock())
            if global_wait > 0:
                self.logger.warning("Waiting for global rate limit", wait_ms=int(global_wait))
                self.metrics.record_wait("global")
                await self._sleep(global_wait / 1000)

            # Checked before taking the lock so other buckets are never held up
            bucket_wait = bucket.remaining(self._clock())
            if bucket_wait > 0:
                self.logger.warning("Waiting for bucket rate limit", wait_ms=int(bucket_wait))
                self.metrics.record_wait("bucket")
                await self._sleep(bucket_wait / 1000)

            async with BucketLease(bucket.lock) as lease:
                url, headers, body = self._build_request(method, path, payload, query, files)
                outcome = await self._commit(method, url, headers, body, lease)

            now = self._clock()
            if outcome.retry_after_ms is not None:
                bucket.cool_down(outcome.retry_after_ms, now)
                if outcome.is_global:
                    self.global_throttle.cool_down(outcome.retry_after_ms, now)
                    self.logger.warning("Global rate limit engaged", retry_after_ms=outcome.retry_after_ms)

        self.metrics.record_request(method, outcome.status, time.perf_counter() - started)
        self._maybe_prune()
        return outcome

    def _build_request(
        self,
        method: str,
        path: str,
        payload: Any,
        query: Optional[QueryParams],
        files: Optional[Sequence[Attachment]],
    ) -> Tuple[str, List[Tuple[str, str]], Optional[bytes]]:
        url = build_url(self.config.base_url + path, query)

        headers = [("User-Agent", self.config.user_agent)]
        if self.token:
            headers.append(("Authorization", self.token))
        if self.config.api_version < 8:
            headers.append(("X-RateLimit-Precision", PRECISION))

        body = None
        if method in PAYLOAD_METHODS:
            payload_json = json.dumps(payload) if payload is not None else "{}"
            if files:
                body, boundary = encode_multipart(payload_json, files)
                headers.append(("Content-Type", MULTIPART + boundary))
            else:
                body = payload_json.encode("utf-8")
                headers.append(("Content-Type", JSON))
            headers.append(("Content-Length", str(len(body))))

        return url, headers, body

    async def _sleep_unlocked(self, lease: BucketLease, delay_ms: float) -> None:
        """Sleep without holding the bucket lock, then take it back."""
        lease.release()
        # A cancelled sleep leaves the lease empty; the final release is then a no-op
        await self._sleep(delay_ms / 1000)
        await lease.acquire()

    async def _commit(
        self,
        method: str,
        url: str,
        headers: List[Tuple[str, str]],
        body: Optional[bytes],
        lease: BucketLease,
    ) -> Outcome:
        """Perform the call, retrying transient failures up to max_retries."""
        max_retries = self.retry_config.max_retries
        retries = 0

        while True:
            try:
                response = await self.transport.send(method, url, headers, body)
            except TransportError as e:
                self.logger.error("Network request failed", method=method, url=url, error=e.message)
                if retries < max_retries:
                    delay = network_retry_delay(self.retry_config, self._rng)
                    self.logger.warning("Retrying network request", method=method, url=url,
                                        delay_ms=delay, attempt=retries + 1)
                    self.metrics.record_retry("network")
                    await self._sleep_unlocked(lease, delay)
                    retries += 1
                    continue
                return Outcome.failure(
                    f"Network error after {max_retries} retries: {e.message}",
                    kind=ErrorKind.TRANSPORT,
                    retry_after_ms=0,
                )

            outcome, retry_reason = self._classify(method, url, response, retries)
            if retry_reason is None:
                return outcome

            delay = outcome.retry_after_ms or 0
            if outcome.is_global:
                self.global_throttle.cool_down(delay, self._clock())
            self.logger.warning("Retrying request", method=method, url=url, status=response.status,
                                reason=response.reason, delay_ms=delay, attempt=retries + 1,
                                is_global=outcome.is_global)
            self.metrics.record_retry(retry_reason)
            await self._sleep_unlocked(lease, delay)
            retries += 1

    def _classify(
        self,
        method: str,
        url: str,
        response: TransportResponse,
        retries: int,
    ) -> Tuple[Outcome, Optional[str]]:
        """Turn a response into an Outcome and, when it should be retried, the reason."""
        headers: Dict[str, str] = {name.lower(): value for name, value in response.headers}
        data = self._decode_body(headers.get("content-type", ""), response.body)

        reset_after_ms = _header_ms(headers.get("x-ratelimit-reset-after"))
        is_global = headers.get("x-ratelimit-global", "").lower() == "true"

        if response.status < 300:
            self.logger.debug("Request succeeded", status=response.status, reason=response.reason,
                              method=method, url=url)
            return Outcome.success(data, reset_after_ms, is_global, response.status), None

        error = APIErrorPayload.from_body(data)
        can_retry = retries < self.retry_config.max_retries
        retry_reason = None

        if response.status == 429:
            if error is not None and error.retry_after is not None:
                reset_after_ms = math.ceil(error.retry_after)
            if error is not None:
                is_global = error.is_global
            if not reset_after_ms:
                reset_after_ms = _header_ms(headers.get("retry-after"))
            if not reset_after_ms:
                # Never retry a 429 straight away
                reset_after_ms = max(network_retry_delay(self.retry_config, self._rng), 1)
            kind = ErrorKind.RATE_LIMITED
            retry_reason = "rate_limited" if can_retry else None
        elif 500 <= response.status < 600:
            reset_after_ms = server_retry_delay(retries, self.retry_config, self._rng)
            kind = ErrorKind.SERVER
            retry_reason = "server" if can_retry else None
        else:
            kind = ErrorKind.VALIDATION if error is not None and error.errors else ErrorKind.CLIENT

        message = self._failure_message(response, data, error)
        if retry_reason is None:
            self.logger.error("Request failed", status=response.status, reason=response.reason,
                              method=method, url=url, error=message)
        outcome = Outcome.failure(message, kind, reset_after_ms, is_global, response.status, data)
        return outcome, retry_reason

    def _decode_body(self, content_type: str, body: bytes) -> Any:
        text = body.decode("utf-8", errors="replace")
        if JSON in content_type.lower():
            try:
                return json.loads(text) if text else None
            except ValueError:
                self.logger.warning("Undecodable JSON body", content_type=content_type)
        return text

    @staticmethod
    def _failure_message(response: TransportResponse, data: Any,
                         error: Optional[APIErrorPayload]) -> str:
        if error is None:
            return f"HTTP Error {response.status} : {response.reason} - {data}"

        if error.code is not None and error.message:
            message = f"HTTP Error {error.code} : {error.message}"
        else:
            message = f"HTTP Error {response.status} : {response.reason}"
        if error.errors:
            details = flatten_errors(error.errors)
            if details:
                message = message + SEPARATOR + details
        return message

    def _maybe_prune(self) -> None:
        interval = self.config.bucket_prune_interval
        if not interval:
            return
        self._dispatch_count += 1
        if self._dispatch_count % interval == 0:
            self.buckets.prune(self._clock())
