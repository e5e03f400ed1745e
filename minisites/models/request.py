"""
Request models for Minisites
"""
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field


class ContactFormRequest(BaseModel):
    """Body posted by the contact form."""

    name: str = Field(..., min_length=1, max_length=200, description="Sender name")
    email: str = Field(
        ...,
        min_length=3,
        max_length=320,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Sender email address"
    )
    phone: Optional[str] = Field(None, max_length=50, description="Optional phone number")
    message: str = Field(..., min_length=1, max_length=5000, description="Message body")
