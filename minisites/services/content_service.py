"""
Content Service for Minisites

Loads tenant content for the pages. Store failures are logged and turned
into "nothing found" so a broken query degrades a page instead of failing it.
"""
from __future__ import annotations
from typing import List, Optional

import structlog

from minisites.exceptions import ContentStoreError
from minisites.models.context import RequestContext
from minisites.models.site import ContactSubmission, Minisite, MinisiteArticle, MinisitePage
from minisites.services.site_store import SiteStore

logger = structlog.get_logger(__name__)


class ContentService:
    """Error-tolerant reads over a SiteStore."""

    def __init__(self, store: SiteStore):
        self.store = store

    async def get_minisite(self, context: RequestContext) -> Optional[Minisite]:
        """Load and validate the tenant named by the request context."""
        if not context.has_tenant:
            return None
        try:
            return await self.store.get_minisite_by_subdomain(context.tenant_identity)
        except ContentStoreError as e:
            logger.error("minisite_fetch_failed", subdomain=context.tenant_identity, error=str(e))
            return None

    async def get_page(self, minisite: Minisite, slug: str) -> Optional[MinisitePage]:
        try:
            return await self.store.get_page(minisite.id, slug)
        except ContentStoreError as e:
            logger.error("page_fetch_failed", minisite_id=minisite.id, slug=slug, error=str(e))
            return None

    async def get_pages(self, minisite: Minisite) -> List[MinisitePage]:
        try:
            return await self.store.get_pages(minisite.id)
        except ContentStoreError as e:
            logger.error("pages_fetch_failed", minisite_id=minisite.id, error=str(e))
            return []

    async def get_articles(self, minisite: Minisite, limit: Optional[int] = None) -> List[MinisiteArticle]:
        try:
            return await self.store.get_articles(minisite.id, limit)
        except ContentStoreError as e:
            logger.error("articles_fetch_failed", minisite_id=minisite.id, error=str(e))
            return []

    async def get_article(self, minisite: Minisite, slug: str) -> Optional[MinisiteArticle]:
        try:
            return await self.store.get_article(minisite.id, slug)
        except ContentStoreError as e:
            logger.error("article_fetch_failed", minisite_id=minisite.id, slug=slug, error=str(e))
            return None

    async def get_related_articles(self, minisite: Minisite, article: MinisiteArticle, count: int = 3) -> List[MinisiteArticle]:
        """Latest articles other than ``article``."""
        recent = await self.get_articles(minisite, limit=count + 1)
        return [a for a in recent if a.id != article.id][:count]

    async def submit_contact(self, submission: ContactSubmission) -> bool:
        """Hand a submission to the sink. Returns False if it was rejected."""
        try:
            await self.store.submit_contact(submission)
        except ContentStoreError as e:
            logger.error("contact_submit_failed", minisite_id=submission.minisite_id, error=str(e))
            return False
        logger.info("contact_submitted", minisite_id=submission.minisite_id)
        return True
