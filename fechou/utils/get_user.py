from typing import Optional

from fastapi import Depends, HTTPException, Header, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from fechou.core.config import AUTH_PROVIDER
from fechou.core.db import get_db
from fechou.core.security import decode_access_token
from fechou.models.users.user_models import User
from fechou.utils.logger import get_logger

logger = get_logger("auth.guard")


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        logger.warning("Missing bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header",
        )

    token = authorization.split("Bearer ", 1)[1].strip()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header",
        )
    return token


async def _user_from_local_token(db: AsyncSession, token: str) -> User:
    payload = decode_access_token(token)

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token subject")

    user = await db.get(User, user_id)

    if not user:
        logger.warning("Token user not found", extra={"user_id": user_id})
        raise HTTPException(status_code=401, detail="User not found")

    if user.token_version != payload.get("token_version"):
        logger.warning("Token version mismatch", extra={"user_id": user.id})
        raise HTTPException(status_code=401, detail="Session expired")

    return user


async def _user_from_firebase_token(db: AsyncSession, token: str) -> User:
    from fechou.core.firebase import verify_firebase_token

    claims = verify_firebase_token(token)

    result = await db.execute(
        select(User).where(User.firebase_uid == claims.get("uid"))
    )
    user = result.scalars().first()

    if not user:
        logger.warning("Firebase user not registered", extra={"uid": claims.get("uid")})
        raise HTTPException(status_code=401, detail="User not found")

    return user


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> User:
    token = extract_bearer_token(authorization)

    if AUTH_PROVIDER == "firebase":
        user = await _user_from_firebase_token(db, token)
    else:
        user = await _user_from_local_token(db, token)

    if not user.is_active:
        logger.warning("Inactive user access blocked", extra={"user_id": user.id})
        raise HTTPException(status_code=403, detail="User account is inactive")

    request.state.user = user
    request.state.user_id = user.id
    return user
