"""Minisites models."""
from minisites.models.context import RequestContext, Resolution
from minisites.models.request import ContactFormRequest
from minisites.models.response import ContactFormResponse, HealthResponse
from minisites.models.site import (
    ContactSubmission,
    ContentBlock,
    Minisite,
    MinisiteArticle,
    MinisitePage,
    ThemeConfig,
)

__all__ = [
    "RequestContext",
    "Resolution",
    "ContactFormRequest",
    "ContactFormResponse",
    "HealthResponse",
    "ContactSubmission",
    "ContentBlock",
    "Minisite",
    "MinisiteArticle",
    "MinisitePage",
    "ThemeConfig",
]
