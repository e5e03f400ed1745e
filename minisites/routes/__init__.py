"""Minisites routes."""
from fastapi import APIRouter

from minisites.routes import api, pages, seo

router = APIRouter()
# Pages last: their catch-all /{slug} must not shadow the others.
router.include_router(api.router)
router.include_router(seo.router)
router.include_router(pages.router)

__all__ = ["router"]
