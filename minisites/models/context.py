"""
Request context models for Minisites
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Resolution:
    """Outcome of tenant resolution for one request."""
    tenant_identity: Optional[str]
    is_custom_domain: bool

    @property
    def is_unmapped_custom_domain(self) -> bool:
        return self.tenant_identity is None and self.is_custom_domain


@dataclass(frozen=True)
class RequestContext:
    """
    Tenant signal carried for the lifetime of a request.

    Set by the routing middleware and read-only afterwards. The tenant identity
    is a routing hint only: pages still load and validate the tenant.
    """
    tenant_identity: Optional[str] = None
    is_custom_domain: bool = False
    hostname: str = ""

    @property
    def has_tenant(self) -> bool:
        return self.tenant_identity is not None

    @property
    def should_noindex(self) -> bool:
        """Platform-hosted tenant pages stay out of search indexes."""
        return self.has_tenant and not self.is_custom_domain

    @classmethod
    def from_resolution(cls, resolution: Resolution, hostname: str = "") -> "RequestContext":
        return cls(
            tenant_identity=resolution.tenant_identity,
            is_custom_domain=resolution.is_custom_domain,
            hostname=hostname
        )
