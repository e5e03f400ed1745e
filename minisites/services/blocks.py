"""
Content block rendering for Minisites

Pages are stored as a list of typed blocks. Each block type has one render
function; unknown types render nothing.
"""
from __future__ import annotations
from html import escape
from typing import Any, Callable, Dict, List, Optional

from minisites.models.site import ContentBlock, Minisite, MinisiteArticle
from minisites.services.theme import contrast_color, hero_classes

CONTACT_FORM_SCRIPT = """
<script>
document.querySelectorAll('form[data-contact-form]').forEach(function (form) {
  form.addEventListener('submit', async function (event) {
    event.preventDefault();
    var status = form.querySelector('[data-form-status]');
    var body = Object.fromEntries(new FormData(form).entries());
    if (!body.phone) { delete body.phone; }
    status.textContent = 'Sending...';
    try {
      var response = await fetch('/api/contact', {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(body)
      });
      if (!response.ok) { throw new Error(response.statusText); }
      form.reset();
      status.textContent = "Thank you! We've received your message and will get back to you soon.";
    } catch (err) {
      status.textContent = 'Failed to submit form. Please try again.';
    }
  });
});
</script>
"""


def _text(data: Dict[str, Any], key: str, default: str = "") -> str:
    return escape(str(data.get(key) or default))


def render_contact_form(minisite: Minisite) -> str:
    """Contact form in the layout chosen by ``contactLayout``."""
    layout = minisite.theme_config.contact_layout or "standard"
    button_color = minisite.accent_color if layout in ("split", "card") else minisite.primary_color
    fields = (
        '<input type="text" name="name" required placeholder="Your name *" class="form-input">'
        '<input type="email" name="email" required placeholder="Email address *" class="form-input">'
        '<input type="tel" name="phone" placeholder="Phone (optional)" class="form-input">'
        '<textarea name="message" required rows="5" placeholder="Your message *" class="form-input"></textarea>'
    )
    form = (
        f'<form data-contact-form class="contact-form contact-form--{escape(layout)}">'
        f"{fields}"
        f'<button type="submit" style="background-color: {escape(button_color)}; color: {contrast_color(button_color)}">'
        "Send Message</button>"
        '<p data-form-status role="status"></p>'
        "</form>"
    )
    if layout == "card":
        form = (
            '<div class="contact-card">'
            f'<div class="contact-card__header" style="background-color: {escape(minisite.primary_color)}">'
            "<h3>Send us a message</h3>"
            "<p>Fill out the form below and we'll respond promptly.</p>"
            f"</div>{form}</div>"
        )
    return form + CONTACT_FORM_SCRIPT


def render_hero(data: Dict[str, Any], minisite: Minisite, articles: List[MinisiteArticle]) -> str:
    theme = minisite.theme_config
    style = data.get("style") or theme.hero_style or "centered"
    background = data.get("backgroundImage") or theme.images.hero
    bg_html = f'<img class="hero__background" src="{escape(background)}" alt="">' if background else ""
    cta = ""
    if data.get("ctaText"):
        cta = (
            f'<a class="btn-primary" href="{_text(data, "ctaLink", "/contact")}" '
            f'style="background-color: {escape(minisite.primary_color)}; color: {contrast_color(minisite.primary_color)}">'
            f'{_text(data, "ctaText")}</a>'
        )
    return (
        f'<section class="hero hero--{escape(style)} {hero_classes(theme)}">{bg_html}'
        f'<div class="hero__content"><h1>{_text(data, "title", minisite.name)}</h1>'
        f'<p>{_text(data, "subtitle", minisite.description)}</p>{cta}</div></section>'
    )


def render_text(data: Dict[str, Any], minisite: Minisite, articles: List[MinisiteArticle]) -> str:
    heading = f'<h2>{_text(data, "title")}</h2>' if data.get("title") else ""
    # Stored block HTML is authored by the platform and rendered as-is.
    return f'<section class="block-text">{heading}<div class="prose">{data.get("content", "")}</div></section>'


def render_image(data: Dict[str, Any], minisite: Minisite, articles: List[MinisiteArticle]) -> str:
    if not data.get("src"):
        return ""
    caption = f'<figcaption>{_text(data, "caption")}</figcaption>' if data.get("caption") else ""
    return f'<figure class="block-image"><img src="{_text(data, "src")}" alt="{_text(data, "alt")}">{caption}</figure>'


def render_cta(data: Dict[str, Any], minisite: Minisite, articles: List[MinisiteArticle]) -> str:
    return (
        f'<section class="block-cta" style="background-color: {escape(minisite.primary_color)}">'
        f'<h2>{_text(data, "title")}</h2><p>{_text(data, "description")}</p>'
        f'<a href="{_text(data, "buttonLink", "/contact")}" '
        f'style="background-color: {escape(minisite.accent_color)}; color: {contrast_color(minisite.accent_color)}">'
        f'{_text(data, "buttonText", "Get in touch")}</a>'
        "</section>"
    )


def render_features(data: Dict[str, Any], minisite: Minisite, articles: List[MinisiteArticle]) -> str:
    items = "".join(
        f'<div class="feature"><h3>{_text(item, "title")}</h3><p>{_text(item, "description")}</p></div>'
        for item in data.get("features") or []
        if isinstance(item, dict)
    )
    heading = f'<h2>{_text(data, "title")}</h2>' if data.get("title") else ""
    return f'<section class="block-features">{heading}<div class="features-grid">{items}</div></section>'


def render_blogroll(data: Dict[str, Any], minisite: Minisite, articles: List[MinisiteArticle]) -> str:
    if not articles:
        return ""
    limit = data.get("limit") or len(articles)
    items = "".join(
        f'<li><a href="/blog/{escape(article.slug)}">{escape(article.title)}</a></li>'
        for article in articles[:limit]
    )
    return f'<section class="block-blogroll"><h2>{_text(data, "title", "Latest Articles")}</h2><ul>{items}</ul></section>'


def render_contact(data: Dict[str, Any], minisite: Minisite, articles: List[MinisiteArticle]) -> str:
    return (
        f'<section class="block-contact"><h2>{_text(data, "title", "Get in Touch")}</h2>'
        f"{render_contact_form(minisite)}</section>"
    )


BLOCK_RENDERERS: Dict[str, Callable[[Dict[str, Any], Minisite, List[MinisiteArticle]], str]] = {
    "hero": render_hero,
    "text": render_text,
    "image": render_image,
    "cta": render_cta,
    "features": render_features,
    "blogroll": render_blogroll,
    "contact": render_contact,
}


def render_blocks(blocks: List[ContentBlock], minisite: Minisite, articles: Optional[List[MinisiteArticle]] = None) -> str:
    articles = articles or []
    rendered = []
    for block in blocks:
        renderer = BLOCK_RENDERERS.get(block.type)
        if renderer:
            rendered.append(renderer(block.data, minisite, articles))
    return "\n".join(rendered)
