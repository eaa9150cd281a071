from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.config import AUTH_PROVIDER
from fechou.core.db import get_db
from fechou.schemas.auth.auth_schemas import (
    RegisterRequest,
    LoginRequest,
    RefreshRequest,
    TokenResponse,
    AuthOut,
)
from fechou.schemas.users.user_schemas import (
    UserProfileOut,
    ProfileUpdate,
    BrandingUpdate,
)
from fechou.services.auth.auth_service import (
    register_user,
    login_user,
    refresh_tokens,
    logout_user,
)
from fechou.services.users.user_service import (
    get_current_profile,
    update_profile,
    update_branding,
)
from fechou.utils.get_user import get_current_user, extract_bearer_token
from fechou.utils.check_roles import require_premium
from fechou.utils.response import success_response, APIResponse
from fechou.utils.logger import get_logger

logger = get_logger("auth.router")

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=APIResponse[AuthOut], status_code=201)
async def register_api(
    payload: RegisterRequest,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
):
    firebase_claims = None
    if AUTH_PROVIDER == "firebase":
        from fechou.core.firebase import verify_firebase_token

        firebase_claims = verify_firebase_token(extract_bearer_token(authorization))

    logger.info("Register attempt", extra={"email": payload.email})

    data = await register_user(db, payload, firebase_claims)
    return success_response("Registration successful", data)


@router.post("/login", response_model=APIResponse[AuthOut])
async def login_api(
    payload: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Login attempt", extra={"email": payload.email})

    data = await login_user(db, payload.email, payload.password)
    return success_response("Login successful", data)


@router.post("/refresh", response_model=APIResponse[TokenResponse])
async def refresh_api(
    payload: RefreshRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Token refresh attempt")

    tokens = await refresh_tokens(db, payload.refresh_token)
    return success_response("Token refreshed", tokens)


@router.post("/logout", response_model=APIResponse)
async def logout_api(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
):
    logger.info(
        "Logout request",
        extra={"user_id": current_user.id, "email": current_user.email},
    )

    await logout_user(db, current_user)
    return success_response("Logged out successfully")


# =========================
# CURRENT USER
# =========================
@router.get("/user", response_model=APIResponse[UserProfileOut])
async def current_user_api(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
):
    profile = await get_current_profile(db, current_user)
    return success_response("User fetched", profile)


@router.put("/user", response_model=APIResponse[UserProfileOut])
async def update_profile_api(
    payload: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
):
    logger.info("Profile update", extra={"user_id": current_user.id})

    profile = await update_profile(db, payload, current_user)
    return success_response("Profile updated successfully", profile)


@router.patch("/user/branding", response_model=APIResponse[UserProfileOut])
async def update_branding_api(
    payload: BrandingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_premium),
):
    logger.info("Branding update", extra={"user_id": current_user.id})

    profile = await update_branding(db, payload, current_user)
    return success_response("Branding updated successfully", profile)
