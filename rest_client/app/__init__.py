"""
Rate-limit-aware REST client package.

The client lets many asyncio tasks talk to one REST API at once while
respecting its limits:
- Per-bucket cooldowns and one in-flight request per bucket
- A process-wide global throttle
- Retries with backoff and jitter for 429, 5xx and network failures

Structure:
- app.dispatcher: request dispatch and the commit/retry loop.
- app.ratelimit: bucket key resolution, bucket registry, global throttle.
- app.encoding: query strings, multipart bodies, validation-error flattening.
- app.adapters: HTTP transport over httpx.
- app.api / app.endpoints: endpoint catalog and the client facade.
"""
