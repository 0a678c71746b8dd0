# app/models/api/user_request.py
from pydantic import BaseModel, Field

from app.models.domain.ambassador_domain import TeamRole


class UserUpdateRequest(BaseModel):
    """Request body for PUT /users/{user_id}. Omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=100)
    team_role: TeamRole | None = None
    clear_team_role: bool = False
