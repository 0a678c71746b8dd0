"""
verify.py
---------
Purpose:
    Bearer JWT verification for the identity provider.

Notes:
    - Tokens are HS256 by default, signed with AUTH_JWT_SECRET.
    - Claims `sub` and `email` identify the caller.
    - The email domain must match the `allowed_email_domain` setting held
      in the store; only campus accounts may use the API.
    - Provides `auth_dependency` for protected routes.
"""

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

_security = HTTPBearer()


def verify_jwt(token: str) -> dict:
    if not settings.AUTH_JWT_SECRET:
        logger.error("AUTH_JWT_SECRET not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Authentication not configured",
        )

    try:
        return jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            audience=settings.AUTH_JWT_AUDIENCE,
            options={"verify_exp": True, "verify_aud": settings.AUTH_JWT_AUDIENCE is not None},
        )
    except jwt.PyJWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid authentication token: {e}",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


def is_allowed_email(email: str | None, allowed_domain: str | None) -> bool:
    """True when the email belongs to the allowed domain (or no domain is configured)."""
    if not email or "@" not in email:
        return False
    if not allowed_domain:
        return True
    return email.rsplit("@", 1)[1].lower() == allowed_domain.strip().lower()


def auth_dependency(
    request: Request, credentials: HTTPAuthorizationCredentials = Depends(_security)
) -> dict:
    claims = verify_jwt(credentials.credentials)

    store = getattr(request.app.state, "store", None)
    allowed_domain = store.get_setting("allowed_email_domain") if store else None
    if not is_allowed_email(claims.get("email"), allowed_domain):
        logger.warning("Email domain not allowed", sub=claims.get("sub"), domain=allowed_domain)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Only {allowed_domain} accounts are allowed",
        )

    return claims
