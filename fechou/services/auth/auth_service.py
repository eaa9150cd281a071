from datetime import timedelta

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.config import (
    AUTH_PROVIDER,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    REFRESH_TOKEN_EXPIRE_DAYS,
    FREE_QUOTES_LIMIT,
)
from fechou.core.exceptions import AppException
from fechou.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    generate_refresh_token,
)
from fechou.constants.error_codes import ErrorCode
from fechou.constants.activity_codes import ActivityCode
from fechou.models.users.user_models import User, RefreshToken
from fechou.models.enums.user_plan import UserPlan
from fechou.schemas.auth.auth_schemas import RegisterRequest, TokenResponse, AuthOut
from fechou.schemas.users.user_schemas import UserProfileOut
from fechou.services.referrals.referral_service import new_signup_code, apply_referral
from fechou.utils.activity_helpers import emit_activity
from fechou.utils.datetime_utils import utcnow
from fechou.utils.logger import get_logger

logger = get_logger("auth.service")


def _issue_tokens(db: AsyncSession, user: User) -> TokenResponse:
    access_token = create_access_token(
        subject=str(user.id),
        token_version=user.token_version,
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )

    refresh_value = generate_refresh_token()
    db.add(
        RefreshToken(
            user_id=user.id,
            token=refresh_value,
            expires_at=utcnow() + timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
        )
    )

    return TokenResponse(access_token=access_token, refresh_token=refresh_value)


# =====================================================
# REGISTER
# =====================================================
async def register_user(
    db: AsyncSession,
    payload: RegisterRequest,
    firebase_claims: dict | None = None,
) -> AuthOut:
    if firebase_claims is not None:
        uid = firebase_claims.get("uid")
        existing = await db.scalar(select(User).where(User.firebase_uid == uid))
        if existing:
            logger.info("Firebase user already registered", extra={"user_id": existing.id})
            return AuthOut(user=UserProfileOut.model_validate(existing))
        email = firebase_claims.get("email") or payload.email
    else:
        email = payload.email
        if not email or not payload.password:
            raise AppException(
                400,
                "Email and password are required",
                ErrorCode.VALIDATION_ERROR,
                details=[
                    {"field": f, "message": "Field required"}
                    for f in ("email", "password")
                    if not getattr(payload, f)
                ],
            )

    if not email:
        raise AppException(400, "Email is required", ErrorCode.VALIDATION_ERROR)

    email = email.lower()
    logger.info("Registering user", extra={"email": email})

    exists = await db.scalar(select(User.id).where(User.email == email))
    if exists:
        raise AppException(
            409,
            "Email already registered",
            ErrorCode.USER_EMAIL_EXISTS,
        )

    now = utcnow()
    user = User(
        email=email,
        password_hash=hash_password(payload.password) if payload.password else None,
        firebase_uid=firebase_claims.get("uid") if firebase_claims else None,
        first_name=payload.first_name,
        last_name=payload.last_name,
        plan=UserPlan.FREE,
        quotes_limit=FREE_QUOTES_LIMIT,
        quotes_used_this_month=0,
        bonus_quotes=0,
        referral_count=0,
        last_quote_reset=now,
        last_login_at=now,
        referral_code=await new_signup_code(db),
    )
    db.add(user)
    await db.flush()

    await apply_referral(db, user, payload.referral_code)

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.REGISTER,
        actor_email=user.email,
        details={"referral_code": payload.referral_code} if payload.referral_code else None,
    )

    tokens = _issue_tokens(db, user) if firebase_claims is None else None

    await db.commit()
    await db.refresh(user)

    logger.info("User registered", extra={"user_id": user.id})

    return AuthOut(auth=tokens, user=UserProfileOut.model_validate(user))


# =====================================================
# LOGIN
# =====================================================
async def login_user(db: AsyncSession, email: str, password: str) -> AuthOut:
    logger.info("Authenticating user", extra={"email": email})

    result = await db.execute(
        select(User).where(User.email == email.lower())
    )
    user = result.scalars().first()

    if not user or not verify_password(password, user.password_hash):
        logger.warning("Invalid credentials", extra={"email": email})
        raise AppException(
            401,
            "Invalid credentials",
            ErrorCode.INVALID_CREDENTIALS,
        )

    if not user.is_active:
        logger.warning("Inactive user login blocked", extra={"email": email})
        raise AppException(
            403,
            "User account is inactive",
            ErrorCode.USER_INACTIVE,
        )

    user.last_login_at = utcnow()
    tokens = _issue_tokens(db, user)

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.LOGIN,
        actor_email=user.email,
    )

    await db.commit()
    await db.refresh(user)

    logger.info("Login successful", extra={"user_id": user.id})

    return AuthOut(auth=tokens, user=UserProfileOut.model_validate(user))


# =====================================================
# REFRESH
# =====================================================
async def refresh_tokens(db: AsyncSession, refresh_token_value: str) -> TokenResponse:
    logger.info("Refreshing token")

    result = await db.execute(
        select(RefreshToken).where(
            RefreshToken.token == refresh_token_value,
            RefreshToken.revoked.is_(False),
            RefreshToken.expires_at > utcnow(),
        )
    )
    token = result.scalars().first()

    if not token:
        logger.warning("Invalid refresh token")
        raise AppException(
            401,
            "Invalid or expired refresh token",
            ErrorCode.INVALID_TOKEN,
        )

    user = await db.get(User, token.user_id)
    if not user or not user.is_active:
        logger.warning("Refresh blocked for inactive user", extra={"user_id": token.user_id})
        raise AppException(
            401,
            "User invalid or inactive",
            ErrorCode.INVALID_TOKEN,
        )

    token.revoked = True
    tokens = _issue_tokens(db, user)

    await db.commit()

    logger.info("Token refreshed", extra={"user_id": user.id})
    return tokens


# =====================================================
# LOGOUT
# =====================================================
async def logout_user(db: AsyncSession, user: User):
    logger.info("Logging out user", extra={"user_id": user.id})

    user.token_version += 1

    await db.execute(
        update(RefreshToken)
        .where(RefreshToken.user_id == user.id)
        .values(revoked=True)
        .execution_options(synchronize_session=False)
    )

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.LOGOUT,
        actor_email=user.email,
    )

    await db.commit()

    logger.info("Logout successful", extra={"user_id": user.id})
