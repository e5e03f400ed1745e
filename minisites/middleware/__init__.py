"""Minisites middleware."""
from minisites.middleware.sites import TenantRoutingMiddleware, get_request_context

__all__ = ["TenantRoutingMiddleware", "get_request_context"]
