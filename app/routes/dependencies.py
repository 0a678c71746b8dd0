"""
Shared FastAPI dependencies for the ambassador routers.

The store lives on app.state and every service is built per request around
it. Handlers are async and call the synchronous services directly, so store
mutations never run concurrently.
"""

from fastapi import Depends, HTTPException, Request, status

from app.auth.verify import auth_dependency
from app.config import settings
from app.db.json_store import JsonStore, PersistenceError
from app.infrastructure.audit import audit_logger
from app.infrastructure.observability.logging import get_logger
from app.models.domain.ambassador_domain import User
from app.services.core.contact_service import ContactLifecycleService
from app.services.core.credit_ledger import CreditLedger
from app.services.core.errors import (
    AmbassadorServiceError,
    InvalidStateTransitionError,
    InvalidSubmissionError,
    NotFoundError,
    PendingLimitExceededError,
    PermissionDeniedError,
)
from app.services.core.leaderboard_service import LeaderboardService
from app.services.core.user_service import UserService

logger = get_logger(__name__)


def get_store(request: Request) -> JsonStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store not initialized"
        )
    return store


def get_user_service(store: JsonStore = Depends(get_store)) -> UserService:
    return UserService(store)


def get_contact_service(store: JsonStore = Depends(get_store)) -> ContactLifecycleService:
    return ContactLifecycleService(store, CreditLedger(store))


def get_credit_ledger(store: JsonStore = Depends(get_store)) -> CreditLedger:
    return CreditLedger(store)


def get_leaderboard_service(store: JsonStore = Depends(get_store)) -> LeaderboardService:
    return LeaderboardService(store)


def to_http_exception(error: Exception) -> HTTPException:
    """Map a core exception to the HTTP status the API exposes."""
    if isinstance(error, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, (PendingLimitExceededError, InvalidStateTransitionError)):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, InvalidSubmissionError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, PermissionDeniedError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(error, PersistenceError):
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    elif isinstance(error, AmbassadorServiceError):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR

    detail = getattr(error, "message", None) or str(error)
    if isinstance(error, PersistenceError):
        detail = "Failed to persist changes"
    return HTTPException(status_code=code, detail=detail)


async def current_user(
    claims: dict = Depends(auth_dependency),
    users: UserService = Depends(get_user_service),
) -> User:
    """Resolve the caller to a User, registering them on first login."""
    user_id = claims.get("sub")
    email = claims.get("email")
    if not user_id or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token: missing identity"
        )

    role = "admin" if email.lower() in {e.lower() for e in settings.ADMIN_EMAILS} else "ambassador"
    user = users.find_user_by_auth_uid(user_id)
    if user and (user.role == "admin" or role != "admin"):
        return user

    # Unknown uid, or a listed admin not yet promoted: get-or-create by email
    email = user.email if user else email
    name = claims.get("name") or email.split("@")[0]
    try:
        return users.register_user(email=email, name=name, role=role, auth_uid=user_id)
    except (AmbassadorServiceError, PersistenceError) as e:
        logger.error("User registration failed", auth_uid=user_id, error=str(e))
        raise to_http_exception(e) from e


async def require_admin(request: Request, user: User = Depends(current_user)) -> User:
    if user.role != "admin":
        audit_logger.log_security_event(
            actor_id=user.id,
            event_type="admin_required",
            description=f"{request.method} {request.url.path}",
            ip_address=getattr(request.state, "ip_address", None),
            request_id=getattr(request.state, "request_id", None),
        )
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user
