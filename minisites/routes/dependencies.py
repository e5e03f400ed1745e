"""
Shared route dependencies for Minisites
"""
from fastapi import Request

from minisites.services.content_service import ContentService


def get_content_service(request: Request) -> ContentService:
    """ContentService owned by the running app."""
    return request.app.state.content_service
