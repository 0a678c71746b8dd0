# app/models/api/contact_request.py
from typing import Literal

from pydantic import BaseModel, Field

from app.models.domain.ambassador_domain import ContactSource, ContactSubmission


class ContactSubmitRequest(BaseModel):
    """Request body for POST /contacts."""

    name: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    email: str | None = Field(None, max_length=320)
    phone: str | None = Field(None, max_length=50)
    position: str | None = Field(None, max_length=200)
    linkedin_url: str | None = Field(None, max_length=500)
    source: ContactSource = "manual"
    relevance_score: int = Field(0, ge=0, le=10)

    def to_submission(self) -> ContactSubmission:
        return ContactSubmission(**self.model_dump())


class ContactDecisionRequest(BaseModel):
    """Request body for PUT /contacts/{contact_id}/status."""

    status: Literal["approved", "rejected"]
    notes: str | None = Field(None, max_length=2000)
