"""
protected.py
------------
Purpose:
    `/me` returns the caller's user record, registering it on first login.

Usage:
    Call `/me` with:
         Authorization: Bearer <access_token>
    where <access_token> is issued by the identity provider for a campus email.
"""

from fastapi import APIRouter, Depends

from app.auth.verify import auth_dependency
from app.models.api.responses import ApiResponse, AuthMeta, MeResponse
from app.models.domain.ambassador_domain import User
from app.routes.dependencies import current_user

router = APIRouter()


@router.get("/me", response_model=ApiResponse[MeResponse])
async def me(claims: dict = Depends(auth_dependency), user: User = Depends(current_user)):
    auth = AuthMeta(
        user_id=claims.get("sub"),
        email=claims.get("email"),
        aud=claims.get("aud"),
        iat=claims.get("iat"),
        exp=claims.get("exp"),
    )
    return ApiResponse[MeResponse](data=MeResponse(user=user, auth=auth))
