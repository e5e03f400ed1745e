"""
SEO output for Minisites: page meta tags, robots.txt and sitemap.xml.

Platform subdomains are previews of a tenant's site and are kept out of
search indexes; custom domains are indexable.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from html import escape
from typing import Iterable, List, Optional
from xml.sax.saxutils import escape as xml_escape

from minisites.models.context import RequestContext
from minisites.models.site import Minisite, MinisiteArticle, MinisitePage

SEARCH_ENGINE_BOTS = [
    "Googlebot", "Bingbot", "Slurp", "DuckDuckBot", "Baiduspider", "YandexBot",
]
SOCIAL_BOTS = ["facebookexternalhit", "Twitterbot", "LinkedInBot"]
SEO_SCRAPER_BOTS = [
    "AhrefsBot", "SemrushBot", "MJ12bot", "DotBot", "BLEXBot", "MegaIndex",
    "SeznamBot", "SEOkicks", "SEOkicks-Robot", "sistrix", "JETKEYLOG",
    "Screaming Frog SEO Spider", "Moz", "rogerbot", "Majestic", "MajesticBot",
    "BacklinkCrawler", "OpenLinkProfiler", "Serpstat", "DataForSeoBot",
    "BomboraBot", "ZoominfoBot",
]

# Pages every minisite has, whether or not they are registered in the store
STATIC_PAGES = ["about", "contact", "blog"]

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


@dataclass
class PageMeta:
    """Everything that goes into <head> besides styles."""
    title: str
    description: str = ""
    site_name: Optional[str] = None
    og_type: str = "website"
    images: List[str] = field(default_factory=list)
    noindex: bool = False

    def to_html(self) -> str:
        tags = [f"<title>{escape(self.title)}</title>"]
        if self.description:
            tags.append(f'<meta name="description" content="{escape(self.description)}">')
        tags.append(f'<meta property="og:title" content="{escape(self.title)}">')
        if self.description:
            tags.append(f'<meta property="og:description" content="{escape(self.description)}">')
        if self.site_name:
            tags.append(f'<meta property="og:site_name" content="{escape(self.site_name)}">')
        tags.append(f'<meta property="og:type" content="{escape(self.og_type)}">')
        for image in self.images:
            tags.append(f'<meta property="og:image" content="{escape(image)}">')
        if self.noindex:
            tags.append('<meta name="robots" content="noindex, nofollow">')
        return "\n    ".join(tags)


def build_meta(
    context: RequestContext,
    minisite: Minisite,
    default_title: str,
    default_description: str = "",
    page: Optional[MinisitePage] = None,
    image: Optional[str] = None
) -> PageMeta:
    """Meta for a tenant page: the page's SEO fields win over the defaults."""
    title = (page.seo_title if page else None) or default_title
    description = (page.seo_description if page else None) or default_description
    return PageMeta(
        title=title,
        description=description,
        site_name=minisite.name,
        images=[image] if image else [],
        noindex=context.should_noindex
    )


def article_meta(context: RequestContext, minisite: Minisite, article: MinisiteArticle) -> PageMeta:
    return PageMeta(
        title=article.seo_title or article.title,
        description=article.seo_description or article.excerpt or "",
        site_name=minisite.name,
        og_type="article",
        images=[article.featured_image] if article.featured_image else [],
        noindex=context.should_noindex
    )


def _user_agent_rules(agents: Iterable[str], directive: str) -> str:
    return "\n\n".join(f"User-agent: {agent}\n{directive}: /" for agent in agents)


def robots_txt(context: RequestContext) -> str:
    """robots.txt for the requesting host."""
    if context.should_noindex:
        return (
            "# Robots.txt for temporary subdomain\n"
            "# This subdomain is a staging/preview environment\n"
            "# Please index the custom domain instead\n\n"
            "User-agent: *\nDisallow: /\n\n"
            "# Block all known crawlers explicitly\n"
            f"{_user_agent_rules(SEARCH_ENGINE_BOTS + SOCIAL_BOTS, 'Disallow')}\n"
        )

    return (
        f"# Robots.txt for {context.hostname}\n\n"
        "# Allow major search engines\n"
        f"{_user_agent_rules(SEARCH_ENGINE_BOTS, 'Allow')}\n\n"
        "# Allow social media crawlers for previews\n"
        f"{_user_agent_rules(SOCIAL_BOTS, 'Allow')}\n\n"
        "# Block SEO tool crawlers\n"
        f"{_user_agent_rules(SEO_SCRAPER_BOTS, 'Disallow')}\n\n"
        "# Default: allow others\n"
        "User-agent: *\nAllow: /\n\n"
        "# Sitemap location\n"
        f"Sitemap: https://{context.hostname}/sitemap.xml\n"
    )


def empty_sitemap() -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{SITEMAP_NS}">\n'
        "  <!-- Sitemap not available for temporary subdomains -->\n"
        "</urlset>"
    )


def site_url(minisite: Minisite) -> str:
    return f"https://{minisite.custom_domain or minisite.full_domain}"


def _lastmod(*candidates: Optional[datetime], default: date) -> str:
    for candidate in candidates:
        if candidate:
            return candidate.date().isoformat()
    return default.isoformat()


def _url_entry(loc: str, lastmod: str, changefreq: str, priority: str) -> str:
    return (
        "  <url>\n"
        f"    <loc>{xml_escape(loc)}</loc>\n"
        f"    <lastmod>{lastmod}</lastmod>\n"
        f"    <changefreq>{changefreq}</changefreq>\n"
        f"    <priority>{priority}</priority>\n"
        "  </url>"
    )


def build_sitemap(
    minisite: Minisite,
    pages: List[MinisitePage],
    articles: List[MinisiteArticle],
    today: Optional[date] = None
) -> str:
    """Homepage, the fixed pages, registered pages, then published articles."""
    today = today or date.today()
    base = site_url(minisite)

    entries = [_url_entry(f"{base}/", today.isoformat(), "weekly", "1.0")]
    for slug in STATIC_PAGES:
        entries.append(_url_entry(f"{base}/{slug}", today.isoformat(), "monthly", "0.8"))

    for page in pages:
        if page.slug in STATIC_PAGES or page.slug == "home":
            continue
        entries.append(_url_entry(
            f"{base}/{page.slug}", _lastmod(page.updated_at, default=today), "monthly", "0.7"
        ))

    for article in articles:
        entries.append(_url_entry(
            f"{base}/blog/{article.slug}",
            _lastmod(article.updated_at, article.published_at, default=today),
            "monthly",
            "0.6"
        ))

    body = "\n".join(entries)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<urlset xmlns="{SITEMAP_NS}"\n'
        '        xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance"\n'
        f'        xsi:schemaLocation="{SITEMAP_NS}\n'
        f'        {SITEMAP_NS}/sitemap.xsd">\n'
        f"  <!-- Generated sitemap for {xml_escape(minisite.name)} -->\n"
        f"{body}\n"
        "</urlset>"
    )
