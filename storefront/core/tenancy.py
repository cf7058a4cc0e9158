"""Subdomain-to-tenant request routing.

Every request is classified by its ``Host`` header:

- ``www.<base>`` (and ``www.`` on any tenant host) redirects to the apex domain.
- ``<tenant>.<base>`` is rewritten internally to ``/store/<tenant>/...`` unless
  the path belongs to the dashboard or the API.
- Legacy ``/store/<tenant>/...`` URLs on public hosts redirect permanently to the
  tenant's subdomain.

``resolve_tenant`` makes the decision without touching the request so it can be
tested on plain strings; ``TenantRoutingMiddleware`` applies it.
"""

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from storefront.core.logging_config import tenant_var

logger = logging.getLogger(__name__)

TENANT_HEADER = "x-subdomain"
STORE_PREFIX = "/store/"


class TenantAction(enum.Enum):
    PASS = "pass"
    REDIRECT = "redirect"
    REWRITE = "rewrite"


@dataclass(frozen=True)
class TenantDecision:
    action: TenantAction
    url: str | None = None
    status_code: int | None = None
    path: str | None = None
    tenant: str | None = None


PASS_THROUGH = TenantDecision(TenantAction.PASS)


def _hostname(host: str) -> str:
    """Host header without the port, lowercased."""
    return host.rsplit(":", 1)[0].lower() if host.count(":") == 1 else host.lower()


def _with_query(url: str, query: str) -> str:
    return f"{url}?{query}" if query else url


def is_tenant_host(
    hostname: str,
    base_domain: str,
    excluded_host_markers: Sequence[str],
) -> bool:
    """Whether ``hostname`` names a tenant subdomain rather than a platform host."""
    return (
        "." in hostname
        and hostname != base_domain
        and hostname != f"www.{base_domain}"
        and not any(marker in hostname for marker in excluded_host_markers)
    )


def resolve_tenant(
    host: str,
    path: str,
    query: str,
    *,
    base_domain: str,
    excluded_host_markers: Sequence[str] = ("localhost", "vercel.app", "netlify.app"),
    reserved_prefixes: Sequence[str] = ("/dashboard", "/api"),
) -> TenantDecision:
    """Decide whether to pass, redirect or rewrite a request.

    Args:
        host: Raw ``Host`` header (may include a port).
        path: Request path, always starting with ``/``.
        query: Raw query string without the leading ``?``.
        base_domain: Apex domain tenants are served under.
        excluded_host_markers: Substrings marking hosts that are never tenants.
        reserved_prefixes: Paths served by the platform even on tenant hosts.
    """
    hostname = _hostname(host)
    tenant_host = is_tenant_host(hostname, base_domain, excluded_host_markers)
    first_label = hostname.split(".", 1)[0]

    if first_label == "www" and (tenant_host or hostname == f"www.{base_domain}"):
        return TenantDecision(
            TenantAction.REDIRECT,
            url=_with_query(f"https://{base_domain}{path}", query),
            status_code=302,
        )

    # Only the first label names the tenant; nested subdomains are not supported.
    if tenant_host and not any(path.startswith(prefix) for prefix in reserved_prefixes):
        rewritten = f"{STORE_PREFIX}{first_label}" + ("" if path == "/" else path)
        return TenantDecision(
            TenantAction.REWRITE,
            path=rewritten,
            tenant=first_label,
        )

    if path.startswith(STORE_PREFIX) and "localhost" not in hostname:
        store_name = path.split("/")[2]
        if store_name:
            rest = path.replace(f"{STORE_PREFIX}{store_name}", "", 1) or "/"
            return TenantDecision(
                TenantAction.REDIRECT,
                url=_with_query(f"https://{store_name}.{base_domain}{rest}", query),
                status_code=301,
                tenant=store_name,
            )

    return PASS_THROUGH


class TenantRoutingMiddleware(BaseHTTPMiddleware):
    """Applies ``resolve_tenant`` to every request outside the skipped paths."""

    def __init__(
        self,
        app: Any,
        *,
        base_domain: str,
        excluded_host_markers: Sequence[str],
        reserved_prefixes: Sequence[str],
        skip_prefixes: Sequence[str] = (),
    ) -> None:
        super().__init__(app)
        self.base_domain = base_domain
        self.excluded_host_markers = tuple(excluded_host_markers)
        self.reserved_prefixes = tuple(reserved_prefixes)
        self.skip_prefixes = tuple(skip_prefixes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if self.skip_prefixes and path.startswith(self.skip_prefixes):
            return await call_next(request)

        decision = resolve_tenant(
            request.headers.get("host", ""),
            path,
            request.url.query,
            base_domain=self.base_domain,
            excluded_host_markers=self.excluded_host_markers,
            reserved_prefixes=self.reserved_prefixes,
        )

        if decision.action is TenantAction.REDIRECT:
            assert decision.url is not None and decision.status_code is not None
            logger.debug("Redirecting %s to %s", path, decision.url)
            return RedirectResponse(decision.url, status_code=decision.status_code)

        if decision.action is TenantAction.REWRITE:
            assert decision.path is not None and decision.tenant is not None
            request.scope["path"] = decision.path
            request.scope["raw_path"] = decision.path.encode()
            request.state.tenant = decision.tenant
            tenant_var.set(decision.tenant)
            response = await call_next(request)
            response.headers[TENANT_HEADER] = decision.tenant
            return response

        return await call_next(request)
