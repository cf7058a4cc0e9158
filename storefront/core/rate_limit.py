"""Rate limiting for public storefront endpoints using slowapi."""

from slowapi import Limiter
from starlette.requests import Request


def _get_client_ip(request: Request) -> str:
    """Resolve the shopper's IP behind the Cloudflare edge.

    ``CF-Connecting-IP`` is overwritten by the edge on every request. Headers a
    client can set itself (``X-Real-IP``, ``X-Forwarded-For``) are ignored.
    """
    return request.headers.get("CF-Connecting-IP") or (
        request.client.host if request.client else "127.0.0.1"
    )


limiter = Limiter(key_func=_get_client_ip)
