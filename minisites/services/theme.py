"""
Theme helpers for Minisites

CSS variables, font links and layout class choices derived from a
minisite's colors, fonts and theme config.
"""
from __future__ import annotations
import re
from typing import Tuple
from urllib.parse import quote_plus

from minisites.models.site import Minisite, ThemeConfig, Typography

HEX_COLOR = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)
# Font names go into an inline <style>; only word characters, spaces and hyphens are kept
UNSAFE_FONT_CHARS = re.compile(r"[^\w \-]")

# Heading sizes (h1, h2, h3) per typography scale
TYPE_SCALES = {
    "compact": ("2.25rem", "1.75rem", "1.25rem"),
    "default": ("3rem", "2.25rem", "1.5rem"),
    "large": ("3.75rem", "2.75rem", "1.875rem"),
    "dramatic": ("4.5rem", "3.25rem", "2.25rem"),
}
HEADING_WEIGHTS = {"normal": 400, "medium": 500, "semibold": 600, "bold": 700, "extrabold": 800}
BODY_SIZES = {"sm": "0.875rem", "base": "1rem", "lg": "1.125rem"}
LETTER_SPACING = {"tight": "-0.025em", "normal": "0", "wide": "0.025em"}
LINE_HEIGHTS = {"snug": "1.375", "normal": "1.5", "relaxed": "1.625"}


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Parse #rrggbb; anything else is treated as black."""
    match = HEX_COLOR.match(hex_color or "")
    if not match:
        return (0, 0, 0)
    return tuple(int(part, 16) for part in match.groups())


def _rgb_triplet(hex_color: str) -> str:
    return " ".join(str(c) for c in hex_to_rgb(hex_color))


def css_font_name(name: str) -> str:
    return UNSAFE_FONT_CHARS.sub("", name or "").strip() or "Inter"


def contrast_color(hex_color: str) -> str:
    """Black or white, whichever reads better on the given background."""
    r, g, b = hex_to_rgb(hex_color)
    brightness = (r * 299 + g * 587 + b * 114) / 1000
    return "#000000" if brightness > 128 else "#ffffff"


def typography_variables(typography: Typography) -> str:
    """Unknown values fall back to the defaults."""
    h1, h2, h3 = TYPE_SCALES.get(typography.scale, TYPE_SCALES["default"])
    weight = HEADING_WEIGHTS.get(typography.heading_weight, HEADING_WEIGHTS["bold"])
    body = BODY_SIZES.get(typography.body_size, BODY_SIZES["base"])
    spacing = LETTER_SPACING.get(typography.letter_spacing, LETTER_SPACING["normal"])
    line_height = LINE_HEIGHTS.get(typography.line_height, LINE_HEIGHTS["normal"])
    return (
        f"--text-h1: {h1};\n"
        f"      --text-h2: {h2};\n"
        f"      --text-h3: {h3};\n"
        f"      --heading-weight: {weight};\n"
        f"      --text-body: {body};\n"
        f"      --letter-spacing: {spacing};\n"
        f"      --line-height: {line_height};"
    )


def generate_theme_variables(minisite: Minisite) -> str:
    """The :root CSS block injected into every tenant page."""
    return f"""
    :root {{
      --color-primary: {_rgb_triplet(minisite.primary_color)};
      --color-secondary: {_rgb_triplet(minisite.secondary_color)};
      --color-accent: {_rgb_triplet(minisite.accent_color)};
      --font-heading: '{css_font_name(minisite.font_heading)}', sans-serif;
      --font-body: '{css_font_name(minisite.font_body)}', sans-serif;
      {typography_variables(minisite.theme_config.typography)}
    }}
    """


def google_fonts_url(minisite: Minisite) -> str:
    fonts = list(dict.fromkeys(css_font_name(font) for font in (minisite.font_heading, minisite.font_body)))
    params = "&".join(f"family={quote_plus(font)}:wght@400;500;600;700" for font in fonts)
    return f"https://fonts.googleapis.com/css2?{params}&display=swap"


def hero_classes(theme: ThemeConfig) -> str:
    base = "relative overflow-hidden"
    style = theme.hero_style
    if style == "split":
        return f"{base} min-h-[70vh] grid md:grid-cols-2"
    if style == "fullwidth":
        return f"{base} min-h-screen flex items-center"
    if style == "minimal":
        return f"{base} py-20"
    return f"{base} min-h-[60vh] flex items-center justify-center text-center"


def blog_layout_classes(theme: ThemeConfig) -> str:
    layout = theme.blog_layout
    if layout == "list":
        return "space-y-8"
    if layout == "masonry":
        return "columns-1 md:columns-2 lg:columns-3 gap-8"
    return "grid grid-cols-1 md:grid-cols-2 lg:grid-cols-3 gap-8"


def nav_classes(theme: ThemeConfig) -> str:
    base = "fixed top-0 left-0 right-0 z-50 transition-all duration-300"
    style = theme.nav_style
    if style == "transparent":
        return f"{base} bg-transparent"
    if style == "floating":
        return f"{base} m-4 rounded-full bg-white/80 backdrop-blur"
    return f"{base} bg-white shadow-sm"
