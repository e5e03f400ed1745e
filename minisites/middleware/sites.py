"""
Tenant Routing Middleware for Minisites

Resolves the tenant from the Host header and attaches it to the request
(request.state.tenant and x-subdomain / x-is-custom-domain headers), and to
the response as headers and client-readable cookies.
"""
from __future__ import annotations
from typing import List, Tuple

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, PlainTextResponse, Response

from minisites.config import Settings
from minisites.models.context import RequestContext
from minisites.services.domain_classifier import classify, strip_port
from minisites.services.renderer import render_domain_not_connected
from minisites.services.tenant_resolver import TenantResolver

logger = structlog.get_logger(__name__)

SUBDOMAIN_HEADER = "x-subdomain"
CUSTOM_DOMAIN_HEADER = "x-is-custom-domain"
SUBDOMAIN_COOKIE = "subdomain"
CUSTOM_DOMAIN_COOKIE = "is_custom_domain"
VERIFICATION_HEADER = "x-minisite-verification"

SIGNAL_HEADERS = {SUBDOMAIN_HEADER.encode(), CUSTOM_DOMAIN_HEADER.encode()}

# Served even when a custom domain maps to no tenant
SELF_HANDLED_PATHS = {"/robots.txt", "/sitemap.xml", "/api/health"}
STATIC_PREFIX = "/static/"


def _bool_header(value: bool) -> str:
    return "true" if value else "false"


def _strip_signal_headers(request: Request) -> None:
    """Drop client-supplied tenant signals; only this middleware may set them."""
    request.scope["headers"] = [
        (name, value) for name, value in request.scope["headers"]
        if name.lower() not in SIGNAL_HEADERS
    ]


def _attach_signal_headers(request: Request, context: RequestContext) -> None:
    """Rewrite the request in place so downstream handlers see the signals."""
    signals: List[Tuple[bytes, bytes]] = [
        (SUBDOMAIN_HEADER.encode(), context.tenant_identity.encode("latin-1")),
        (CUSTOM_DOMAIN_HEADER.encode(), _bool_header(context.is_custom_domain).encode()),
    ]
    request.scope["headers"] = list(request.scope["headers"]) + signals


def get_request_context(request: Request) -> RequestContext:
    """The tenant signal for this request; empty when none was resolved."""
    context = getattr(request.state, "tenant", None)
    if context is not None:
        return context

    subdomain = request.headers.get(SUBDOMAIN_HEADER)
    if subdomain:
        return RequestContext(
            tenant_identity=subdomain,
            is_custom_domain=request.headers.get(CUSTOM_DOMAIN_HEADER) == "true",
            hostname=strip_port(request.headers.get("host", ""))
        )
    return RequestContext()


class TenantRoutingMiddleware(BaseHTTPMiddleware):
    """Classifies the host, resolves the tenant and propagates it."""

    def __init__(self, app, resolver: TenantResolver, settings: Settings):
        super().__init__(app)
        self.resolver = resolver
        self.settings = settings

    async def dispatch(self, request: Request, call_next):
        structlog.contextvars.clear_contextvars()
        _strip_signal_headers(request)
        path = request.url.path

        if path == self.settings.verification_path:
            return PlainTextResponse(
                "OK",
                headers={VERIFICATION_HEADER: self.settings.verification_token}
            )

        if path.startswith(STATIC_PREFIX):
            request.state.tenant = RequestContext()
            return await call_next(request)

        host = request.headers.get("host", "")
        override = None if self.settings.is_production else request.query_params.get("subdomain")
        classification = classify(host, self.settings.root_domains, subdomain_override=override)
        resolution = await self.resolver.resolve(classification)

        context = RequestContext.from_resolution(resolution, hostname=strip_port(host))
        request.state.tenant = context
        structlog.contextvars.bind_contextvars(host=context.hostname, tenant=context.tenant_identity)

        if resolution.is_unmapped_custom_domain:
            if path in SELF_HANDLED_PATHS:
                return await call_next(request)
            logger.info("custom_domain_not_connected", path=path)
            return HTMLResponse(render_domain_not_connected(context.hostname), status_code=404)

        if not context.has_tenant:
            # Root domain: landing page, no signals
            return await call_next(request)

        _attach_signal_headers(request, context)
        response = await call_next(request)
        self._set_response_signals(response, context)
        return response

    def _set_response_signals(self, response: Response, context: RequestContext) -> None:
        is_custom = _bool_header(context.is_custom_domain)
        response.headers[SUBDOMAIN_HEADER] = context.tenant_identity
        response.headers[CUSTOM_DOMAIN_HEADER] = is_custom

        cookie_options = dict(
            httponly=False,
            secure=self.settings.is_production,
            samesite="lax"
        )
        response.set_cookie(SUBDOMAIN_COOKIE, context.tenant_identity, **cookie_options)
        response.set_cookie(CUSTOM_DOMAIN_COOKIE, is_custom, **cookie_options)
