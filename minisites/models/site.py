"""
Content models for Minisites

Mirror the rows stored for each tenant: the minisite itself, its pages and
its articles. Theme settings are stored as camelCase JSON.
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional, Any, List, Dict
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts camelCase keys from the store and snake_case in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"


class Typography(CamelModel):
    """Unknown values render with the defaults (see theme.typography_variables)."""

    scale: str = "default"  # compact | default | large | dramatic
    heading_weight: str = "bold"  # normal | medium | semibold | bold | extrabold
    body_size: str = "base"  # sm | base | lg
    letter_spacing: str = "normal"  # tight | normal | wide
    line_height: str = "normal"  # snug | normal | relaxed


class ContentSections(CamelModel):
    include_excerpt_links: bool = False


class ThemeImages(CamelModel):
    hero: Optional[str] = None
    about: Optional[str] = None
    feature1: Optional[str] = None
    feature2: Optional[str] = None
    feature3: Optional[str] = None


class ThemeConfig(CamelModel):
    """Layout variant choices for a minisite. Unset values fall back to defaults."""

    hero_style: Optional[str] = None  # centered | split | fullwidth | minimal
    blog_layout: Optional[str] = None  # grid | list | masonry
    blog_style: Optional[str] = None  # cards | minimal | magazine | compact
    blog_label: Optional[str] = None  # Blog | Articles
    nav_style: Optional[str] = None  # transparent | solid | floating
    nav_layout: Optional[str] = None  # standard | centered | minimal | split | stacked
    logo_display: Optional[str] = None  # withText | iconOnly
    footer_layout: Optional[str] = None  # standard | centered | minimal | split | stacked
    contact_layout: Optional[str] = None  # standard | split | minimal | card
    mood: Optional[str] = None
    homepage_articles_count: Optional[int] = None
    typography: Typography = Field(default_factory=Typography)
    content_sections: ContentSections = Field(default_factory=ContentSections)
    images: ThemeImages = Field(default_factory=ThemeImages)


class Minisite(BaseModel):
    """A tenant site."""

    id: str
    name: str
    subdomain: str
    full_domain: str = ""
    custom_domain: Optional[str] = None
    custom_domain_status: Optional[str] = None  # pending | verifying | active | failed
    description: str = ""
    logo_url: Optional[str] = None
    primary_color: str = "#1f2937"
    secondary_color: str = "#4b5563"
    accent_color: str = "#2563eb"
    font_heading: str = "Inter"
    font_body: str = "Inter"
    theme_config: ThemeConfig = Field(default_factory=ThemeConfig)
    status: str = "active"  # creating | active | paused | error
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def has_active_custom_domain(self) -> bool:
        return bool(self.custom_domain) and self.custom_domain_status == "active"


class ContentBlock(BaseModel):
    """A typed section of a page (hero, text, features, ...)."""

    type: str
    data: Dict[str, Any] = Field(default_factory=dict)


class MinisitePage(BaseModel):
    id: str
    minisite_id: str
    slug: str
    title: str = ""
    content: List[ContentBlock] = Field(default_factory=list)
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    updated_at: Optional[datetime] = None


class MinisiteArticle(BaseModel):
    id: str
    minisite_id: str
    title: str
    slug: str
    content: str = ""
    excerpt: Optional[str] = None
    link_excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    status: str = "draft"  # draft | published | archived
    published_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None

    @property
    def is_published(self) -> bool:
        return self.status == "published"


class ContactSubmission(BaseModel):
    """A contact form entry, as handed to the submission sink."""

    minisite_id: str
    name: str
    email: str
    phone: Optional[str] = None
    message: str
    cta_type: str = "contact_form"
