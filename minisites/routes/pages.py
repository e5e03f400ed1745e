"""
Page Routes for Minisites

Server-rendered tenant pages. Every handler re-loads the tenant named by the
request context; a missing tenant, page or article permanently redirects to
the homepage instead of showing a 404.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from minisites.middleware.sites import get_request_context
from minisites.routes.dependencies import get_content_service
from minisites.services import renderer
from minisites.services.content_service import ContentService
from minisites.services.seo import PageMeta, article_meta, build_meta

router = APIRouter()

# Paths with their own handlers; never served by the catch-all page route
RESERVED_SLUGS = {"home", "blog", "about", "contact", "privacy", "terms", "api", "static"}


def redirect_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=308)


async def load_minisite(request: Request, content: ContentService):
    context = get_request_context(request)
    return context, await content.get_minisite(context)


@router.get("/", response_class=HTMLResponse)
async def home_page(request: Request, content: ContentService = Depends(get_content_service)):
    """Tenant homepage, or the platform landing page when there is no tenant."""
    context, minisite = await load_minisite(request, content)

    if not context.has_tenant:
        return HTMLResponse(renderer.render_landing_page(PageMeta(title="Minisite Platform")))

    if minisite is None:
        # A redirect to "/" would loop here.
        return HTMLResponse(renderer.render_site_not_found(), status_code=404)

    page = await content.get_page(minisite, "home")
    count = minisite.theme_config.homepage_articles_count or request.app.state.settings.homepage_articles_count
    articles = await content.get_articles(minisite, limit=count)

    meta = build_meta(
        context,
        minisite,
        default_title=minisite.name,
        default_description=minisite.description,
        page=page,
        image=minisite.theme_config.images.hero
    )
    return HTMLResponse(renderer.render_home_page(meta, minisite, page, articles))


@router.get("/blog", response_class=HTMLResponse)
async def blog_index(request: Request, content: ContentService = Depends(get_content_service)):
    context, minisite = await load_minisite(request, content)
    if minisite is None:
        return redirect_home()

    articles = await content.get_articles(minisite)
    label = renderer.blog_label(minisite)
    meta = build_meta(
        context,
        minisite,
        default_title=f"{label} | {minisite.name}",
        default_description=f"Insights, updates, and more from {minisite.name}"
    )
    return HTMLResponse(renderer.render_blog_index(meta, minisite, articles))


@router.get("/blog/{slug}", response_class=HTMLResponse)
async def blog_article(slug: str, request: Request, content: ContentService = Depends(get_content_service)):
    context, minisite = await load_minisite(request, content)
    if minisite is None:
        return redirect_home()

    article = await content.get_article(minisite, slug)
    if article is None:
        return redirect_home()

    related = await content.get_related_articles(minisite, article)
    meta = article_meta(context, minisite, article)
    return HTMLResponse(renderer.render_article_page(meta, minisite, article, related))


@router.get("/about", response_class=HTMLResponse)
async def about_page(request: Request, content: ContentService = Depends(get_content_service)):
    context, minisite = await load_minisite(request, content)
    if minisite is None:
        return redirect_home()

    page = await content.get_page(minisite, "about")
    meta = build_meta(
        context,
        minisite,
        default_title=f"About {minisite.name}",
        default_description=f"Learn more about {minisite.name}. {minisite.description}",
        page=page,
        image=minisite.theme_config.images.about
    )
    return HTMLResponse(renderer.render_content_page(meta, minisite, page, renderer.default_about(minisite)))


@router.get("/contact", response_class=HTMLResponse)
async def contact_page(request: Request, content: ContentService = Depends(get_content_service)):
    context, minisite = await load_minisite(request, content)
    if minisite is None:
        return redirect_home()

    page = await content.get_page(minisite, "contact")
    meta = build_meta(
        context,
        minisite,
        default_title=f"Contact {minisite.name}",
        default_description=f"Get in touch with {minisite.name}. We'd love to hear from you.",
        page=page
    )
    return HTMLResponse(renderer.render_content_page(meta, minisite, page, renderer.default_contact(minisite)))


@router.get("/privacy", response_class=HTMLResponse)
async def privacy_page(request: Request, content: ContentService = Depends(get_content_service)):
    context, minisite = await load_minisite(request, content)
    if minisite is None:
        return redirect_home()

    page = await content.get_page(minisite, "privacy")
    meta = build_meta(
        context,
        minisite,
        default_title=f"Privacy Policy | {minisite.name}",
        default_description=f"Privacy policy and data handling practices for {minisite.name}.",
        page=page
    )
    fallback = renderer.default_legal(
        minisite,
        "Privacy Policy",
        f"This policy explains how {minisite.name} collects, uses and protects the information you share with us."
    )
    return HTMLResponse(renderer.render_content_page(meta, minisite, page, fallback))


@router.get("/terms", response_class=HTMLResponse)
async def terms_page(request: Request, content: ContentService = Depends(get_content_service)):
    context, minisite = await load_minisite(request, content)
    if minisite is None:
        return redirect_home()

    page = await content.get_page(minisite, "terms")
    meta = build_meta(
        context,
        minisite,
        default_title=f"Terms of Service | {minisite.name}",
        default_description=f"Terms and conditions for using {minisite.name}.",
        page=page
    )
    fallback = renderer.default_legal(
        minisite,
        "Terms of Service",
        f"By using {minisite.name} you agree to these terms. Please read them carefully."
    )
    return HTMLResponse(renderer.render_content_page(meta, minisite, page, fallback))


@router.get("/{slug}", response_class=HTMLResponse)
async def registered_page(slug: str, request: Request, content: ContentService = Depends(get_content_service)):
    """Any additional page registered for the tenant."""
    context, minisite = await load_minisite(request, content)
    if minisite is None or slug in RESERVED_SLUGS:
        return redirect_home()

    page = await content.get_page(minisite, slug)
    if page is None:
        return redirect_home()

    meta = build_meta(context, minisite, default_title=f"{page.title or slug} | {minisite.name}", page=page)
    return HTMLResponse(renderer.render_content_page(meta, minisite, page, ""))
