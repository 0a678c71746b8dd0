"""
users.py
--------
Purpose:
    User profile and credit history endpoints.

    - GET /users                    - list users (admin), optional role/team_role filters
    - GET /users/{user_id}          - profile
    - PUT /users/{user_id}          - update name/team role (self or admin)
    - GET /users/{user_id}/credits  - credit history (self or admin)
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.db.json_store import PersistenceError
from app.infrastructure.observability.logging import get_logger
from app.models.api.responses import (
    ApiResponse,
    CreditHistoryResponse,
    UserEnvelope,
    UserListEnvelope,
)
from app.models.api.user_request import UserUpdateRequest
from app.models.domain.ambassador_domain import TeamRole, User, UserRole
from app.routes.dependencies import (
    current_user,
    get_credit_ledger,
    get_user_service,
    require_admin,
    to_http_exception,
)
from app.services.core.credit_ledger import CreditLedger
from app.services.core.errors import AmbassadorServiceError
from app.services.core.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])
logger = get_logger(__name__)


def _ensure_self_or_admin(caller: User, user_id: str) -> None:
    if caller.id != user_id and caller.role != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not allowed")


@router.get("", response_model=UserListEnvelope)
async def list_users(
    role: UserRole | None = Query(None),
    team_role: TeamRole | None = Query(None),
    _admin: User = Depends(require_admin),
    users: UserService = Depends(get_user_service),
):
    return UserListEnvelope(data=users.list_users(role=role, team_role=team_role))


@router.get("/{user_id}", response_model=UserEnvelope)
async def get_user(
    user_id: str,
    _caller: User = Depends(current_user),
    users: UserService = Depends(get_user_service),
):
    try:
        return UserEnvelope(data=users.get_user(user_id))
    except AmbassadorServiceError as e:
        raise to_http_exception(e) from e


@router.put("/{user_id}", response_model=UserEnvelope)
async def update_user(
    user_id: str,
    payload: UserUpdateRequest,
    caller: User = Depends(current_user),
    users: UserService = Depends(get_user_service),
):
    _ensure_self_or_admin(caller, user_id)
    try:
        user = users.update_user(
            user_id,
            name=payload.name,
            team_role=payload.team_role,
            clear_team_role=payload.clear_team_role,
        )
    except (AmbassadorServiceError, PersistenceError) as e:
        logger.warning("User update failed", user_id=user_id, error=str(e))
        raise to_http_exception(e) from e

    return UserEnvelope(data=user)


@router.get("/{user_id}/credits", response_model=ApiResponse[CreditHistoryResponse])
async def get_credit_history(
    user_id: str,
    caller: User = Depends(current_user),
    users: UserService = Depends(get_user_service),
    ledger: CreditLedger = Depends(get_credit_ledger),
):
    _ensure_self_or_admin(caller, user_id)
    try:
        user = users.get_user(user_id)
    except AmbassadorServiceError as e:
        raise to_http_exception(e) from e

    history = CreditHistoryResponse(
        user_id=user.id, credits=user.credits, entries=ledger.history(user.id)
    )
    return ApiResponse[CreditHistoryResponse](data=history)
