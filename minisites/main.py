"""
Minisites - Main Application

Multi-tenant website renderer: resolves a minisite from the request's
hostname and serves its pages, robots.txt and sitemap.
"""
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pathlib import Path

from minisites.config import Settings, get_settings
from minisites.routes import router
from minisites.middleware import TenantRoutingMiddleware
from minisites.services.content_service import ContentService
from minisites.services.site_store import SiteStore, create_site_store
from minisites.services.tenant_resolver import TenantResolver
from minisites.utils.logging import configure_logging
from minisites.utils.lookup_cache import InMemoryLookupCache, LookupCache

logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[SiteStore] = None,
    cache: Optional[LookupCache] = None
) -> FastAPI:
    """Build the application. Store and cache can be injected (tests, shared caches)."""
    settings = settings or get_settings()
    store = store or create_site_store(settings)
    cache = cache or InMemoryLookupCache(max_entries=settings.lookup_cache_max_entries)

    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant minisite renderer",
        version="0.1.0",
        debug=settings.debug
    )
    app.state.settings = settings
    app.state.site_store = store
    app.state.lookup_cache = cache
    app.state.content_service = ContentService(store)

    resolver = TenantResolver(
        store=store,
        cache=cache,
        ttl_seconds=settings.lookup_cache_ttl_seconds,
        timeout_seconds=settings.lookup_timeout_seconds
    )

    # Middleware stack (order matters - last added runs first)
    app.add_middleware(TenantRoutingMiddleware, resolver=resolver, settings=settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount static files before router
    static_path = Path(__file__).parent.parent / "static"
    if static_path.exists():
        app.mount("/static", StaticFiles(directory=str(static_path)), name="static")

    app.include_router(router)

    @app.on_event("startup")
    async def startup_event():
        """Log the routing setup."""
        logger.info(
            "minisites_starting",
            store_backend=settings.store_backend,
            root_domains=settings.root_domains,
            lookup_cache_ttl=settings.lookup_cache_ttl_seconds
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release the store's connections."""
        await store.close()
        logger.info("minisites_stopped")

    return app


configure_logging(get_settings().debug)
app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "minisites.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
