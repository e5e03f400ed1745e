"""
Page Renderer for Minisites

Builds full HTML documents for each page type. Layout variants (navigation,
footer, blog list) come from the minisite's theme config.
"""
from __future__ import annotations
from datetime import date, datetime
from html import escape
from typing import List, Optional

from minisites.models.site import Minisite, MinisiteArticle, MinisitePage
from minisites.services.blocks import render_blocks, render_contact_form
from minisites.services.seo import PageMeta
from minisites.services.theme import (
    blog_layout_classes,
    generate_theme_variables,
    google_fonts_url,
    nav_classes,
)

NAV_LINKS = [("/", "Home"), ("/about", "About"), ("/blog", None), ("/contact", "Contact")]
LEGAL_LINKS = [("/privacy", "Privacy Policy"), ("/terms", "Terms of Service")]


def format_date(value: Optional[datetime]) -> str:
    return f"{value:%B} {value.day}, {value.year}" if value else ""


def render_document(meta: PageMeta, body: str, minisite: Optional[Minisite] = None) -> str:
    """Wrap page content in the shared <html> shell."""
    head_extra = ""
    body_font = "system-ui, sans-serif"
    if minisite:
        head_extra = (
            f'<link href="{escape(google_fonts_url(minisite))}" rel="stylesheet">\n'
            f"    <style>{generate_theme_variables(minisite)}</style>"
        )
        body_font = "var(--font-body)"

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    {meta.to_html()}
    {head_extra}
</head>
<body class="min-h-screen bg-white antialiased" style="font-family: {body_font}">
{body}
</body>
</html>"""


def blog_label(minisite: Minisite) -> str:
    return minisite.theme_config.blog_label or "Blog"


def render_logo(minisite: Minisite) -> str:
    theme = minisite.theme_config
    name = escape(minisite.name)
    if minisite.logo_url:
        logo = f'<img src="{escape(minisite.logo_url)}" alt="{name}" width="56" height="56">'
    else:
        logo = (
            f'<span class="logo-initial" style="background-color: {escape(minisite.primary_color)}">'
            f"{escape(minisite.name[:1].upper())}</span>"
        )
    if theme.logo_display == "iconOnly":
        return f'<a href="/" class="logo" aria-label="{name}">{logo}</a>'
    return f'<a href="/" class="logo">{logo}<span>{name}</span></a>'


def render_navigation(minisite: Minisite) -> str:
    layout = minisite.theme_config.nav_layout or "standard"
    links = "".join(
        f'<a href="{href}">{escape(label or blog_label(minisite))}</a>'
        for href, label in NAV_LINKS
    )
    if layout == "minimal":
        links = "".join(
            f'<a href="{href}">{escape(label or blog_label(minisite))}</a>'
            for href, label in NAV_LINKS if href != "/"
        )
    return (
        f'<nav class="nav nav--{escape(layout)} {nav_classes(minisite.theme_config)}">'
        f'{render_logo(minisite)}<div class="nav__links">{links}</div></nav>'
    )


def render_footer(minisite: Minisite, year: Optional[int] = None) -> str:
    layout = minisite.theme_config.footer_layout or "standard"
    year = year or date.today().year
    description = minisite.description[:150] + ("..." if len(minisite.description) > 150 else "")
    legal = "".join(f'<a href="{href}">{label}</a>' for href, label in LEGAL_LINKS)
    copyright_line = f"<p>&copy; {year} {escape(minisite.name)}. All rights reserved.</p>"

    if layout == "minimal":
        return f'<footer class="footer footer--minimal">{copyright_line}<div>{legal}</div></footer>'

    quick_links = "".join(
        f'<li><a href="{href}">{escape(label or blog_label(minisite))}</a></li>'
        for href, label in NAV_LINKS
    )
    return (
        f'<footer class="footer footer--{escape(layout)} bg-gray-900 text-gray-300">'
        f'<div class="footer__brand"><h3>{escape(minisite.name)}</h3><p>{escape(description)}</p></div>'
        f'<div class="footer__links"><h4>Quick Links</h4><ul>{quick_links}</ul></div>'
        f'<div class="footer__legal"><h4>Legal</h4>{legal}</div>'
        f"{copyright_line}</footer>"
    )


def render_article_card(article: MinisiteArticle, minisite: Minisite, use_link_excerpt: bool = False) -> str:
    style = minisite.theme_config.blog_style or "cards"
    image = ""
    if article.featured_image and style != "compact":
        image = f'<img src="{escape(article.featured_image)}" alt="{escape(article.title)}">'

    excerpt = ""
    if use_link_excerpt and article.link_excerpt:
        # Link excerpts are stored HTML with inline links.
        excerpt = f'<div class="excerpt">{article.link_excerpt}</div>'
    elif article.excerpt:
        excerpt = f'<p class="excerpt">{escape(article.excerpt)}</p>'

    return (
        f'<article class="card card--{escape(style)}">{image}'
        f'<h3><a href="/blog/{escape(article.slug)}">{escape(article.title)}</a></h3>{excerpt}'
        f'<div class="card__meta"><time>{format_date(article.published_at)}</time>'
        f'<a href="/blog/{escape(article.slug)}" style="color: {escape(minisite.primary_color)}">Read more &rarr;</a>'
        "</div></article>"
    )


def _page_shell(minisite: Minisite, main: str) -> str:
    return f"{render_navigation(minisite)}\n<main>{main}</main>\n{render_footer(minisite)}"


def render_landing_page(meta: PageMeta) -> str:
    """Shown on the platform root domain."""
    body = (
        '<div class="min-h-screen flex items-center justify-center bg-gray-50">'
        '<div class="text-center"><h1>Minisite Platform</h1>'
        "<p>Enter a subdomain to view a site</p></div></div>"
    )
    return render_document(meta, body)


def render_home_page(
    meta: PageMeta,
    minisite: Minisite,
    page: Optional[MinisitePage],
    articles: List[MinisiteArticle]
) -> str:
    if page:
        # The latest articles section below replaces any blogroll block.
        blocks = [block for block in page.content if block.type != "blogroll"]
        content = render_blocks(blocks, minisite)
    else:
        content = (
            f'<section class="hero"><h1 style="color: {escape(minisite.primary_color)}">'
            f"{escape(minisite.name)}</h1><p>{escape(minisite.description)}</p></section>"
        )

    latest = ""
    if articles:
        use_links = minisite.theme_config.content_sections.include_excerpt_links
        cards = "".join(render_article_card(a, minisite, use_link_excerpt=use_links) for a in articles)
        latest = (
            '<section class="latest-articles"><h2>Latest Articles</h2>'
            "<p>Stay informed with our latest insights and updates</p>"
            f'<div class="grid grid-cols-1 md:grid-cols-2 lg:grid-cols-3 gap-8">{cards}</div>'
            '<a href="/blog" class="view-all">View All Articles</a></section>'
        )

    return render_document(meta, _page_shell(minisite, content + latest), minisite)


def render_blog_index(meta: PageMeta, minisite: Minisite, articles: List[MinisiteArticle]) -> str:
    header = (
        f'<header><h1 style="color: {escape(minisite.primary_color)}">{escape(blog_label(minisite))}</h1>'
        f"<p>Insights, updates, and more from {escape(minisite.name)}</p></header>"
    )
    if not articles:
        listing = '<p class="empty">No articles published yet.</p>'
    else:
        cards = "".join(render_article_card(a, minisite) for a in articles)
        listing = f'<div class="{blog_layout_classes(minisite.theme_config)}">{cards}</div>'
    return render_document(meta, _page_shell(minisite, header + listing), minisite)


def render_article_page(
    meta: PageMeta,
    minisite: Minisite,
    article: MinisiteArticle,
    related: List[MinisiteArticle]
) -> str:
    crumb_title = article.title if len(article.title) <= 30 else article.title[:30] + "..."
    published = ""
    if article.published_at:
        published = f'<time datetime="{article.published_at.isoformat()}">{format_date(article.published_at)}</time>'
    excerpt = f'<p class="lead">{escape(article.excerpt)}</p>' if article.excerpt else ""
    image = ""
    if article.featured_image:
        image = f'<img class="featured" src="{escape(article.featured_image)}" alt="{escape(article.title)}">'

    related_html = ""
    if related:
        cards = "".join(render_article_card(a, minisite) for a in related)
        related_html = f'<section class="related"><h2>Related Articles</h2><div class="grid">{cards}</div></section>'

    main = (
        '<article class="max-w-4xl mx-auto">'
        f'<nav class="breadcrumb"><a href="/blog">{escape(blog_label(minisite))}</a> / <span>{escape(crumb_title)}</span></nav>'
        f"<h1>{escape(article.title)}</h1>{excerpt}{published}{image}"
        # Article bodies are stored as HTML.
        f'<div class="prose">{article.content}</div>'
        f"</article>{related_html}"
    )
    return render_document(meta, _page_shell(minisite, main), minisite)


def render_content_page(
    meta: PageMeta,
    minisite: Minisite,
    page: Optional[MinisitePage],
    fallback: str
) -> str:
    """A registered page's blocks, or ``fallback`` HTML when none is stored."""
    main = render_blocks(page.content, minisite) if page and page.content else fallback
    return render_document(meta, _page_shell(minisite, main), minisite)


def default_about(minisite: Minisite) -> str:
    image = minisite.theme_config.images.about
    image_html = f'<img src="{escape(image)}" alt="About {escape(minisite.name)}">' if image else ""
    return (
        f'<section class="about"><h1 style="color: {escape(minisite.primary_color)}">About {escape(minisite.name)}</h1>'
        f"{image_html}<p>{escape(minisite.description)}</p></section>"
    )


def default_contact(minisite: Minisite) -> str:
    return (
        f'<section class="contact"><h1 style="color: {escape(minisite.primary_color)}">Contact Us</h1>'
        "<p>We'd love to hear from you. Fill out the form and we'll get back to you as soon as possible.</p>"
        f"{render_contact_form(minisite)}</section>"
    )


def default_legal(minisite: Minisite, title: str, summary: str) -> str:
    return (
        f'<section class="legal"><h1 style="color: {escape(minisite.primary_color)}">{escape(title)}</h1>'
        f"<p>{escape(summary)}</p>"
        f"<p>If you have any questions, please <a href=\"/contact\">contact {escape(minisite.name)}</a>.</p>"
        "</section>"
    )


def render_domain_not_connected(hostname: str) -> str:
    """Returned with 404 for custom domains that map to no tenant."""
    host = escape(hostname)
    meta = PageMeta(title="Domain Not Connected", noindex=True)
    body = (
        '<div class="min-h-screen flex items-center justify-center bg-gray-50">'
        '<div class="text-center max-w-lg">'
        "<h1>Domain Not Connected</h1>"
        f"<p>The domain <strong>{host}</strong> is not connected to any site yet.</p>"
        "<p>If you own this domain, finish connecting it in your dashboard. "
        "DNS changes can take a while to propagate.</p>"
        "</div></div>"
    )
    return render_document(meta, body)


def render_site_not_found() -> str:
    meta = PageMeta(title="Site Not Found", noindex=True)
    body = (
        '<div class="min-h-screen flex items-center justify-center bg-gray-50">'
        '<div class="text-center"><h1>Site Not Found</h1>'
        "<p>This site does not exist or is not active.</p></div></div>"
    )
    return render_document(meta, body)
