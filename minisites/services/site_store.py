"""
Site Store for Minisites

Query interface to the managed content backend (tenants, pages, articles and
contact submissions), with two adapters:

- YamlSiteStore reads everything from a YAML file on disk.
- SupabaseSiteStore talks to the hosted Postgres REST API.

Adapters raise ContentStoreError on any failure; deciding whether that is
fatal is left to the caller.
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

import aiofiles
import httpx
import structlog
import yaml
from pydantic import ValidationError

from minisites.config import Settings
from minisites.exceptions import ConfigurationError, ContentStoreError, ContentStoreTimeout
from minisites.models.site import ContactSubmission, Minisite, MinisiteArticle, MinisitePage

logger = structlog.get_logger(__name__)

STORE_FILENAME = "minisites.yaml"


class SiteStore(Protocol):
    """Everything the renderer and resolver need from the content backend."""

    async def get_minisite_by_subdomain(self, subdomain: str) -> Optional[Minisite]:
        """Active minisite whose subdomain key matches, else None."""
        ...

    async def find_tenant_by_custom_domain(self, domain: str) -> Optional[str]:
        """Subdomain key of the active minisite with this verified custom domain."""
        ...

    async def get_pages(self, minisite_id: str) -> List[MinisitePage]:
        ...

    async def get_page(self, minisite_id: str, slug: str) -> Optional[MinisitePage]:
        ...

    async def get_articles(self, minisite_id: str, limit: Optional[int] = None) -> List[MinisiteArticle]:
        """Published articles, newest first."""
        ...

    async def get_article(self, minisite_id: str, slug: str) -> Optional[MinisiteArticle]:
        """A published article by slug."""
        ...

    async def submit_contact(self, submission: ContactSubmission) -> None:
        ...

    async def close(self) -> None:
        ...


def _custom_domain_candidates(domain: str) -> List[str]:
    # Tenants sometimes register the domain with the www. prefix.
    return [domain, f"www.{domain}"]


def _newest_first(article: MinisiteArticle) -> float:
    return article.published_at.timestamp() if article.published_at else float("-inf")


def _valid_rows(model, items: Optional[List[Any]], section: str) -> list:
    """Validate each YAML row on its own; a bad row is skipped, not fatal."""
    rows = []
    for index, item in enumerate(items or []):
        try:
            rows.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("site_store_row_invalid", section=section, index=index, error=str(e))
    return rows


class YamlSiteStore:
    """
    Site store backed by a single YAML document:

        minisites: [ {id, name, subdomain, ...}, ... ]
        pages:     [ {id, minisite_id, slug, content: [...]}, ... ]
        articles:  [ {id, minisite_id, slug, status, ...}, ... ]

    The file is read once, on first use. Contact submissions are kept in
    memory (see ``submissions``).
    """

    def __init__(self, sites_path: Optional[Path] = None):
        self.sites_path = sites_path or Path(__file__).parent.parent.parent / "sites"
        self.submissions: List[ContactSubmission] = []
        self._minisites: List[Minisite] = []
        self._pages: List[MinisitePage] = []
        self._articles: List[MinisiteArticle] = []
        self._loaded = False

    @property
    def config_path(self) -> Path:
        return self.sites_path / STORE_FILENAME

    async def _ensure_loaded(self):
        """Load and validate the YAML document."""
        if self._loaded:
            return

        if self.config_path.exists():
            try:
                async with aiofiles.open(self.config_path, 'r', encoding='utf-8') as f:
                    raw = await f.read()
                config = yaml.safe_load(raw) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ContentStoreError(f"Could not load {self.config_path}: {e}") from e

            if not isinstance(config, dict):
                raise ContentStoreError(f"Could not load {self.config_path}: expected a mapping")

            self._minisites = _valid_rows(Minisite, config.get("minisites"), "minisites")
            self._pages = _valid_rows(MinisitePage, config.get("pages"), "pages")
            self._articles = _valid_rows(MinisiteArticle, config.get("articles"), "articles")
        else:
            logger.warning("site_store_file_missing", path=str(self.config_path))

        self._loaded = True

    async def get_minisite_by_subdomain(self, subdomain: str) -> Optional[Minisite]:
        await self._ensure_loaded()
        for minisite in self._minisites:
            if minisite.subdomain == subdomain and minisite.is_active:
                return minisite
        return None

    async def find_tenant_by_custom_domain(self, domain: str) -> Optional[str]:
        await self._ensure_loaded()
        for candidate in _custom_domain_candidates(domain):
            for minisite in self._minisites:
                if (
                    minisite.custom_domain == candidate
                    and minisite.has_active_custom_domain
                    and minisite.is_active
                ):
                    return minisite.subdomain
        return None

    async def get_pages(self, minisite_id: str) -> List[MinisitePage]:
        await self._ensure_loaded()
        pages = [page for page in self._pages if page.minisite_id == minisite_id]
        return sorted(pages, key=lambda page: page.slug)

    async def get_page(self, minisite_id: str, slug: str) -> Optional[MinisitePage]:
        await self._ensure_loaded()
        for page in self._pages:
            if page.minisite_id == minisite_id and page.slug == slug:
                return page
        return None

    async def get_articles(self, minisite_id: str, limit: Optional[int] = None) -> List[MinisiteArticle]:
        await self._ensure_loaded()
        articles = [
            article for article in self._articles
            if article.minisite_id == minisite_id and article.is_published
        ]
        articles.sort(key=_newest_first, reverse=True)
        return articles if limit is None else articles[:limit]

    async def get_article(self, minisite_id: str, slug: str) -> Optional[MinisiteArticle]:
        await self._ensure_loaded()
        for article in self._articles:
            if article.minisite_id == minisite_id and article.slug == slug and article.is_published:
                return article
        return None

    async def submit_contact(self, submission: ContactSubmission) -> None:
        self.submissions.append(submission)

    async def close(self) -> None:
        return None


class SupabaseSiteStore:
    """Site store backed by Supabase's PostgREST endpoint."""

    def __init__(self, url: str, api_key: str, timeout: float = 3.0, client: Optional[httpx.AsyncClient] = None):
        self.base_url = url.rstrip("/") + "/rest/v1"
        self._client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            }
        )

    async def _select(self, table: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Run a GET against a table and return the decoded rows."""
        query = {"select": "*", **params}
        try:
            response = await self._client.get(f"{self.base_url}/{table}", params=query)
            response.raise_for_status()
            rows = response.json()
        except httpx.TimeoutException as e:
            raise ContentStoreTimeout(f"Timed out querying {table}", table=table) from e
        except httpx.HTTPError as e:
            raise ContentStoreError(f"Error querying {table}: {e}", table=table) from e
        except ValueError as e:
            raise ContentStoreError(f"Invalid JSON from {table}: {e}", table=table) from e

        if not isinstance(rows, list):
            raise ContentStoreError(f"Unexpected payload from {table}", table=table)
        return rows

    async def _select_one(self, table: str, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        rows = await self._select(table, {**params, "limit": 1})
        return rows[0] if rows else None

    @staticmethod
    def _parse(model, row: Dict[str, Any], table: str):
        try:
            return model.model_validate(row)
        except ValidationError as e:
            raise ContentStoreError(f"Invalid row in {table}: {e}", table=table) from e

    async def get_minisite_by_subdomain(self, subdomain: str) -> Optional[Minisite]:
        row = await self._select_one("minisites", {
            "subdomain": f"eq.{subdomain}",
            "status": "eq.active",
        })
        return self._parse(Minisite, row, "minisites") if row else None

    async def find_tenant_by_custom_domain(self, domain: str) -> Optional[str]:
        for candidate in _custom_domain_candidates(domain):
            rows = await self._select("minisites", {
                "select": "subdomain",
                "custom_domain": f"eq.{candidate}",
                "custom_domain_status": "eq.active",
                "status": "eq.active",
                "limit": 1,
            })
            if rows:
                return rows[0]["subdomain"]
        return None

    async def get_pages(self, minisite_id: str) -> List[MinisitePage]:
        rows = await self._select("minisite_pages", {
            "minisite_id": f"eq.{minisite_id}",
            "order": "slug",
        })
        return [self._parse(MinisitePage, row, "minisite_pages") for row in rows]

    async def get_page(self, minisite_id: str, slug: str) -> Optional[MinisitePage]:
        row = await self._select_one("minisite_pages", {
            "minisite_id": f"eq.{minisite_id}",
            "slug": f"eq.{slug}",
        })
        return self._parse(MinisitePage, row, "minisite_pages") if row else None

    async def get_articles(self, minisite_id: str, limit: Optional[int] = None) -> List[MinisiteArticle]:
        params: Dict[str, Any] = {
            "minisite_id": f"eq.{minisite_id}",
            "status": "eq.published",
            "order": "published_at.desc",
        }
        if limit is not None:
            params["limit"] = limit
        rows = await self._select("minisite_articles", params)
        return [self._parse(MinisiteArticle, row, "minisite_articles") for row in rows]

    async def get_article(self, minisite_id: str, slug: str) -> Optional[MinisiteArticle]:
        row = await self._select_one("minisite_articles", {
            "minisite_id": f"eq.{minisite_id}",
            "slug": f"eq.{slug}",
            "status": "eq.published",
        })
        return self._parse(MinisiteArticle, row, "minisite_articles") if row else None

    async def submit_contact(self, submission: ContactSubmission) -> None:
        try:
            response = await self._client.post(
                f"{self.base_url}/cta_submissions",
                json=submission.model_dump(),
                headers={"Prefer": "return=minimal"}
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise ContentStoreTimeout("Timed out storing contact submission", table="cta_submissions") from e
        except httpx.HTTPError as e:
            raise ContentStoreError(f"Error storing contact submission: {e}", table="cta_submissions") from e

    async def close(self) -> None:
        await self._client.aclose()


def create_site_store(settings: Settings) -> SiteStore:
    """Build the store selected by ``settings.store_backend``."""
    backend = settings.store_backend.lower()

    if backend == "yaml":
        sites_path = Path(settings.sites_path) if settings.sites_path else None
        return YamlSiteStore(sites_path)

    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_key:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY are required for the supabase store")
        return SupabaseSiteStore(
            url=settings.supabase_url,
            api_key=settings.supabase_key,
            timeout=settings.lookup_timeout_seconds
        )

    raise ConfigurationError(f"Unknown store backend: {settings.store_backend}")
