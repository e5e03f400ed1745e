"""
SEO Routes for Minisites: robots.txt and sitemap.xml
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response

from minisites.middleware.sites import get_request_context
from minisites.routes.dependencies import get_content_service
from minisites.services import seo
from minisites.services.content_service import ContentService

router = APIRouter()

CACHE_HEADERS = {"Cache-Control": "public, max-age=3600"}


@router.get("/robots.txt", response_class=PlainTextResponse)
async def robots(request: Request):
    context = get_request_context(request)
    return PlainTextResponse(seo.robots_txt(context), headers=CACHE_HEADERS)


@router.get("/sitemap.xml")
async def sitemap(request: Request, content: ContentService = Depends(get_content_service)):
    context = get_request_context(request)

    if context.should_noindex:
        return Response(seo.empty_sitemap(), media_type="application/xml", headers=CACHE_HEADERS)

    minisite = await content.get_minisite(context)
    if minisite is None:
        return PlainTextResponse("Sitemap not found", status_code=404)

    pages = await content.get_pages(minisite)
    articles = await content.get_articles(minisite)
    return Response(
        seo.build_sitemap(minisite, pages, articles),
        media_type="application/xml",
        headers={"Cache-Control": "public, max-age=3600, s-maxage=3600"}
    )
