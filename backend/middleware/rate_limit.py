"""
Per-client throttling for the unauthenticated account endpoints.

register, login, forgot-password and reset-password each get their own
window per client IP, which caps password guessing and reset-mail flooding.
State is process-local; a multi-worker deployment needs a shared store.
"""
import logging
import time

from fastapi import Request

from domain.errors import RateLimitError

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Sliding-window counter keyed by "<ip>:<path>".

    A key is forgotten once its window holds no hits, either when the
    client is seen again or by the sweep that runs every SWEEP_EVERY checks.
    """

    SWEEP_EVERY = 256

    def __init__(self):
        self._requests: dict[str, list[float]] = {}
        self._longest_window = 0
        self._checks = 0

    def _live_hits(self, key: str, window_seconds: int) -> list[float]:
        cutoff = time.time() - window_seconds
        hits = [ts for ts in self._requests.get(key, ()) if ts > cutoff]
        if hits:
            self._requests[key] = hits
        else:
            self._requests.pop(key, None)
        return hits

    def check(self, key: str, max_requests: int, window_seconds: int) -> bool:
        """Record a hit and return True, or return False when the window is full."""
        self._longest_window = max(self._longest_window, window_seconds)
        self._checks += 1
        if self._checks % self.SWEEP_EVERY == 0:
            self.sweep()

        hits = self._live_hits(key, window_seconds)
        if len(hits) >= max_requests:
            return False
        hits.append(time.time())
        self._requests[key] = hits
        return True

    def remaining(self, key: str, max_requests: int, window_seconds: int) -> int:
        return max(0, max_requests - len(self._live_hits(key, window_seconds)))

    def sweep(self):
        """Forget every client whose newest hit is older than any window in use."""
        cutoff = time.time() - self._longest_window
        for key in [k for k, hits in self._requests.items() if not hits or hits[-1] <= cutoff]:
            del self._requests[key]

    def tracked_keys(self) -> int:
        return len(self._requests)

    def reset(self):
        self._requests.clear()


_limiter = RateLimiter()


def get_limiter() -> RateLimiter:
    return _limiter


def rate_limit(max_requests: int = 10, window_seconds: int = 60):
    """Dependency factory: `Depends(rate_limit(5, 60))` allows 5 calls a minute."""

    async def _check_rate_limit(request: Request):
        client_ip = request.client.host if request.client else "unknown"
        key = f"{client_ip}:{request.url.path}"

        if _limiter.check(key, max_requests, window_seconds):
            return

        logger.warning(
            f"Rate limit exceeded: {client_ip} on {request.url.path} "
            f"({max_requests}/{window_seconds}s)"
        )
        raise RateLimitError(
            f"Rate limit exceeded. Maximum {max_requests} requests "
            f"per {window_seconds} seconds. Try again later.",
            headers={
                "Retry-After": str(window_seconds),
                "X-RateLimit-Limit": str(max_requests),
                "X-RateLimit-Remaining": str(_limiter.remaining(key, max_requests, window_seconds)),
            },
        )

    return _check_rate_limit
