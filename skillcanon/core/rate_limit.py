from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from skillcanon.core.config import settings


def _client_key(request: Request) -> str:
    """Rate-limit per API key when one is sent, otherwise per client address."""
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return f"key:{api_key}"
    return get_remote_address(request)


limiter = Limiter(key_func=_client_key)


def rate_limit(limit: str | None = None):
    if settings.rate_limit_enabled:
        return limiter.limit(limit or settings.rate_limit)

    def passthrough(func):
        return func

    return passthrough
