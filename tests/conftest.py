"""Shared fixtures: an in-memory site store, a controllable clock and app clients."""

import asyncio
from datetime import datetime, timezone
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from minisites.config import Settings
from minisites.exceptions import ContentStoreError
from minisites.models.site import (
    ContactSubmission,
    ContentBlock,
    Minisite,
    MinisiteArticle,
    MinisitePage,
)
from minisites.utils.lookup_cache import InMemoryLookupCache

ROOT_DOMAIN = "platform.io"


class FakeClock:
    """Monotonic clock the tests can move forward."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSiteStore:
    """In-memory SiteStore that records custom domain lookups."""

    def __init__(self):
        self.minisites: List[Minisite] = []
        self.pages: List[MinisitePage] = []
        self.articles: List[MinisiteArticle] = []
        self.submissions: List[ContactSubmission] = []
        self.custom_domain_queries: List[str] = []
        self.fail_custom_domain = False
        self.fail_reads = False
        self.fail_submit = False
        self.lookup_delay = 0.0
        self.closed = False

    async def get_minisite_by_subdomain(self, subdomain: str) -> Optional[Minisite]:
        if self.fail_reads:
            raise ContentStoreError("store unavailable", table="minisites")
        for minisite in self.minisites:
            if minisite.subdomain == subdomain and minisite.is_active:
                return minisite
        return None

    async def find_tenant_by_custom_domain(self, domain: str) -> Optional[str]:
        self.custom_domain_queries.append(domain)
        if self.lookup_delay:
            await asyncio.sleep(self.lookup_delay)
        if self.fail_custom_domain:
            raise ContentStoreError("store unavailable", table="minisites")
        for candidate in (domain, f"www.{domain}"):
            for minisite in self.minisites:
                if (
                    minisite.custom_domain == candidate
                    and minisite.has_active_custom_domain
                    and minisite.is_active
                ):
                    return minisite.subdomain
        return None

    async def get_pages(self, minisite_id: str) -> List[MinisitePage]:
        return sorted((p for p in self.pages if p.minisite_id == minisite_id), key=lambda p: p.slug)

    async def get_page(self, minisite_id: str, slug: str) -> Optional[MinisitePage]:
        if self.fail_reads:
            raise ContentStoreError("store unavailable", table="minisite_pages")
        for page in self.pages:
            if page.minisite_id == minisite_id and page.slug == slug:
                return page
        return None

    async def get_articles(self, minisite_id: str, limit: Optional[int] = None) -> List[MinisiteArticle]:
        articles = [a for a in self.articles if a.minisite_id == minisite_id and a.is_published]
        articles.sort(key=lambda a: a.published_at, reverse=True)
        return articles if limit is None else articles[:limit]

    async def get_article(self, minisite_id: str, slug: str) -> Optional[MinisiteArticle]:
        for article in self.articles:
            if article.minisite_id == minisite_id and article.slug == slug and article.is_published:
                return article
        return None

    async def submit_contact(self, submission: ContactSubmission) -> None:
        if self.fail_submit:
            raise ContentStoreError("insert rejected", table="cta_submissions")
        self.submissions.append(submission)

    async def close(self) -> None:
        self.closed = True


def make_article(minisite_id: str, slug: str, day: int, status: str = "published", **kwargs) -> MinisiteArticle:
    return MinisiteArticle(
        id=f"{minisite_id}-{slug}",
        minisite_id=minisite_id,
        title=kwargs.pop("title", slug.replace("-", " ").title()),
        slug=slug,
        content=kwargs.pop("content", f"<p>{slug} body</p>"),
        status=status,
        published_at=datetime(2026, 9, day, 8, 0, tzinfo=timezone.utc),
        **kwargs
    )


@pytest.fixture
def site_store():
    store = FakeSiteStore()
    store.minisites = [
        Minisite(
            id="site-acme",
            name="Acme Widgets",
            subdomain="acme",
            full_domain="acme.platform.io",
            description="Widgets for every occasion.",
            primary_color="#112233",
            theme_config={"blogLabel": "Articles", "navLayout": "centered"},
        ),
        Minisite(
            id="site-custom",
            name="Custom Site",
            subdomain="customsite-tenant-key",
            full_domain="customsite-tenant-key.platform.io",
            custom_domain="customsite.com",
            custom_domain_status="active",
            description="A site on its own domain.",
        ),
        Minisite(
            id="site-paused",
            name="Paused Site",
            subdomain="paused",
            full_domain="paused.platform.io",
            custom_domain="paused.com",
            custom_domain_status="active",
            status="paused",
        ),
        Minisite(
            id="site-pending",
            name="Pending Domain",
            subdomain="pending",
            full_domain="pending.platform.io",
            custom_domain="pending.com",
            custom_domain_status="verifying",
        ),
    ]
    store.pages = [
        MinisitePage(
            id="page-acme-home",
            minisite_id="site-acme",
            slug="home",
            title="Home",
            seo_title="Acme Widgets | Home",
            content=[
                ContentBlock(type="hero", data={"title": "Widgets, done right"}),
                ContentBlock(type="blogroll", data={"title": "Should not render"}),
            ],
        ),
        MinisitePage(
            id="page-acme-pricing",
            minisite_id="site-acme",
            slug="pricing",
            title="Pricing",
            updated_at=datetime(2026, 9, 20, tzinfo=timezone.utc),
            content=[ContentBlock(type="text", data={"title": "Plans", "content": "<p>Three tiers.</p>"})],
        ),
    ]
    store.articles = [
        make_article("site-acme", "first-post", 1),
        make_article("site-acme", "second-post", 5, excerpt="The second one."),
        make_article("site-acme", "draft-post", 7, status="draft"),
        make_article("site-custom", "custom-news", 3, updated_at=datetime(2026, 9, 10, tzinfo=timezone.utc)),
    ]
    return store


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def lookup_cache(clock):
    return InMemoryLookupCache(max_entries=100, clock=clock)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        root_domains=[ROOT_DOMAIN],
        environment="development",
        lookup_cache_ttl_seconds=60,
        lookup_timeout_seconds=0.5,
        verification_token="verify-me",
    )


@pytest.fixture
def app(settings, site_store, lookup_cache):
    from minisites.main import create_app

    return create_app(settings=settings, store=site_store, cache=lookup_cache)


@pytest.fixture
def client_for(app):
    """Build a TestClient whose requests carry the given Host header."""

    def _client(host: str) -> TestClient:
        return TestClient(app, base_url=f"http://{host}")

    return _client
