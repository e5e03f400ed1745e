"""
API Routes for Minisites

Contact form submissions and the health check.
"""
from fastapi import APIRouter, Depends, HTTPException, Request

from minisites.middleware.sites import get_request_context
from minisites.models.request import ContactFormRequest
from minisites.models.response import ContactFormResponse, HealthResponse
from minisites.models.site import ContactSubmission
from minisites.routes.dependencies import get_content_service
from minisites.services.content_service import ContentService

router = APIRouter()


@router.post("/api/contact", response_model=ContactFormResponse, status_code=201)
async def submit_contact(
    form: ContactFormRequest,
    request: Request,
    content: ContentService = Depends(get_content_service)
):
    """Store a contact form submission for the current tenant."""
    minisite = await content.get_minisite(get_request_context(request))
    if minisite is None:
        raise HTTPException(status_code=404, detail="Site not found for this domain")

    submission = ContactSubmission(
        minisite_id=minisite.id,
        name=form.name,
        email=form.email,
        phone=form.phone or None,
        message=form.message
    )
    if not await content.submit_contact(submission):
        raise HTTPException(status_code=502, detail="Failed to submit form. Please try again.")

    return ContactFormResponse(success=True)


@router.get("/api/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Health check endpoint."""
    return HealthResponse(cached_domains=len(request.app.state.lookup_cache))
