from __future__ import annotations

import math
import threading
import time
from typing import Dict, Tuple

from fastapi import HTTPException, Request


class RateLimiter:
    """Fixed-window counter keyed by an arbitrary string."""

    def __init__(self) -> None:
        self._hits: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def check(self, key: str, limit: int, window_seconds: int) -> None:
        now = time.time()
        with self._lock:
            count, reset = self._hits.get(key, (0, now + window_seconds))
            if now > reset:
                count = 0
                reset = now + window_seconds
            count += 1
            self._hits[key] = (count, reset)
        if count > limit:
            minutes = max(1, math.ceil(window_seconds / 60))
            raise HTTPException(429, f"Trop de tentatives. Réessaie dans {minutes} minutes.")


def client_ip(request: Request, *, trust_proxy: bool = False) -> str:
    """Peer address; X-Forwarded-For only counts when a trusted proxy sets it."""
    if trust_proxy:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(
    limiter: RateLimiter,
    request: Request,
    scope: str,
    *,
    limit: int,
    window_seconds: int,
    trust_proxy: bool = False,
) -> None:
    key = f"{scope}:{client_ip(request, trust_proxy=trust_proxy)}"
    limiter.check(key, limit, window_seconds)
