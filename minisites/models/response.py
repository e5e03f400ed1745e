"""
Response models for Minisites
"""
from __future__ import annotations
from pydantic import BaseModel, Field


class ContactFormResponse(BaseModel):
    """Result of a contact form submission."""

    success: bool = Field(..., description="Whether the submission was stored")


class HealthResponse(BaseModel):
    status: str = Field("healthy", description="Service status")
    framework: str = Field("minisites", description="Service name")
    cached_domains: int = Field(0, description="Live custom domain cache entries")
