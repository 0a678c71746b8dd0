"""
Domain records for the ambassador outreach workflow.

Field names match the persisted JSON document (snake_case keys), so the
same models validate the file at load time and serialize it back on save.
"""

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

UserRole = Literal["ambassador", "admin"]
TeamRole = Literal["troopers", "cold_outreach", "outreach"]
ContactStatus = Literal["pending", "approved", "rejected"]
ContactSource = Literal["manual", "apollo", "signalhire", "linkedin"]
DecisionStatus = Literal["approved", "rejected"]


def utc_now() -> datetime:
    return datetime.now(UTC)


class User(BaseModel):
    """Ambassador or admin account."""

    model_config = ConfigDict(extra="ignore")

    id: str
    email: str
    name: str
    role: UserRole = "ambassador"
    credits: int = Field(0, ge=0)
    team_role: TeamRole | None = None
    auth_uid: str | None = None
    created_at: datetime
    updated_at: datetime


class Contact(BaseModel):
    """HR contact submitted by an ambassador for admin review."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    company: str
    position: str | None = None
    linkedin_url: str | None = None
    source: ContactSource = "manual"
    relevance_score: int = Field(0, ge=0, le=10)
    submitted_by: str
    status: ContactStatus = "pending"
    admin_notes: str | None = None
    created_at: datetime
    updated_at: datetime


class ApprovalRecord(BaseModel):
    """Immutable audit entry for a single approve/reject decision."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    contact_id: str
    admin_id: str
    action: DecisionStatus
    notes: str | None = None
    created_at: datetime


class CreditHistoryEntry(BaseModel):
    """Append-only record of credits earned."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str
    user_id: str
    contact_id: str | None = None
    credits_earned: int = Field(..., gt=0)
    reason: str
    created_at: datetime


class SettingEntry(BaseModel):
    key: str
    value: str


class StoreDocument(BaseModel):
    """The whole persisted document."""

    users: list[User] = Field(default_factory=list)
    contacts: list[Contact] = Field(default_factory=list)
    approvals: list[ApprovalRecord] = Field(default_factory=list)
    credits_history: list[CreditHistoryEntry] = Field(default_factory=list)
    ai_templates: list[dict[str, Any]] = Field(default_factory=list)
    settings: list[SettingEntry] = Field(default_factory=list)


class ContactSubmission(BaseModel):
    """Descriptive fields supplied when an ambassador submits a contact."""

    name: str
    company: str
    email: str | None = None
    phone: str | None = None
    position: str | None = None
    linkedin_url: str | None = None
    source: ContactSource = "manual"
    relevance_score: int = 0


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    name: str
    credits: int
    approved_contacts: int


class UserStats(BaseModel):
    total_contacts: int = 0
    approved_contacts: int = 0
    pending_contacts: int = 0
    rejected_contacts: int = 0
    total_credits: int = 0
    user_rank: int = 0
