# app/models/api/responses.py
"""
Response envelopes. Every endpoint answers {"success": true, "data": ...}.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from app.models.domain.ambassador_domain import (
    ApprovalRecord,
    Contact,
    CreditHistoryEntry,
    LeaderboardEntry,
    User,
    UserStats,
)

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class AuthMeta(BaseModel):
    """Auth metadata extracted from JWT claims."""

    user_id: str
    email: str | None = None
    aud: str | None = None
    iat: int | None = None
    exp: int | None = None


class MeResponse(BaseModel):
    """Response for GET /me."""

    user: User = Field(..., description="Registered user record")
    auth: AuthMeta = Field(..., description="JWT authentication metadata")


class ContactDetail(BaseModel):
    """Contact with its decision history."""

    contact: Contact
    approvals: list[ApprovalRecord]


class CreditHistoryResponse(BaseModel):
    user_id: str
    credits: int
    entries: list[CreditHistoryEntry]


UserEnvelope = ApiResponse[User]
UserListEnvelope = ApiResponse[list[User]]
ContactEnvelope = ApiResponse[Contact]
ContactListEnvelope = ApiResponse[list[Contact]]
LeaderboardEnvelope = ApiResponse[list[LeaderboardEntry]]
StatsEnvelope = ApiResponse[UserStats]
