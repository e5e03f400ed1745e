"""
Tenant Resolver for Minisites

Turns a domain classification into a tenant identity. Platform subdomains
carry their identity in the hostname; custom domains need a store lookup,
which is cached (found or not) for a fixed TTL.
"""
from __future__ import annotations
import asyncio

import structlog

from minisites.exceptions import ContentStoreError
from minisites.models.context import Resolution
from minisites.services.domain_classifier import (
    CustomDomainCandidate,
    DomainClassification,
    PlatformSubdomain,
    normalize_custom_domain,
)
from minisites.services.site_store import SiteStore
from minisites.utils.lookup_cache import LookupCache

logger = structlog.get_logger(__name__)

NO_TENANT = Resolution(tenant_identity=None, is_custom_domain=False)


class TenantResolver:
    """
    Resolves tenant identity per request.

    Existence of the tenant is not checked for platform subdomains; the pages
    validate the tenant when they load it.
    """

    def __init__(self, store: SiteStore, cache: LookupCache, ttl_seconds: float = 60.0, timeout_seconds: float = 3.0):
        self.store = store
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.timeout_seconds = timeout_seconds

    async def resolve(self, classification: DomainClassification) -> Resolution:
        if isinstance(classification, PlatformSubdomain):
            return Resolution(tenant_identity=classification.subdomain, is_custom_domain=False)

        if isinstance(classification, CustomDomainCandidate):
            tenant = await self.resolve_custom_domain(classification.hostname)
            return Resolution(tenant_identity=tenant, is_custom_domain=True)

        # RootDomain and Unresolvable
        return NO_TENANT

    async def resolve_custom_domain(self, hostname: str):
        """Cached lookup of the tenant behind a custom domain. Never raises."""
        key = normalize_custom_domain(hostname)

        entry = self.cache.get(key)
        if entry is not None:
            return entry.tenant_identity

        tenant = await self._lookup(key)
        self.cache.put(key, tenant, self.ttl_seconds)
        logger.debug("custom_domain_resolved", domain=key, tenant=tenant)
        return tenant

    async def _lookup(self, domain: str):
        # Failures count as "not mapped" and are cached like any other miss.
        try:
            return await asyncio.wait_for(
                self.store.find_tenant_by_custom_domain(domain),
                timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning("custom_domain_lookup_timeout", domain=domain, timeout=self.timeout_seconds)
        except ContentStoreError as e:
            logger.warning("custom_domain_lookup_failed", domain=domain, error=str(e))
        return None
