# fechou/services/users/user_service.py

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.exceptions import AppException
from fechou.constants.error_codes import ErrorCode
from fechou.constants.activity_codes import ActivityCode
from fechou.models.users.user_models import User
from fechou.schemas.users.user_schemas import (
    UserProfileOut,
    ProfileUpdate,
    BrandingUpdate,
    PlanLimitsOut,
    PublicProfileOut,
)
from fechou.services.plans.plan_service import plan_limits, apply_monthly_reset
from fechou.utils.activity_helpers import emit_activity
from fechou.utils.datetime_utils import utcnow
from fechou.utils.logger import get_logger

logger = get_logger(__name__)


def _collect_changes(user: User, values: dict) -> list[str]:
    changes: list[str] = []
    for field, value in values.items():
        if getattr(user, field) != value:
            changes.append(field)
            setattr(user, field, value)
    return changes


# =========================
# CURRENT USER
# =========================
async def get_current_profile(db: AsyncSession, user: User) -> UserProfileOut:
    user.last_login_at = utcnow()
    await db.commit()
    await db.refresh(user)
    return UserProfileOut.model_validate(user)


# =========================
# PROFILE
# =========================
async def update_profile(
    db: AsyncSession,
    payload: ProfileUpdate,
    user: User,
) -> UserProfileOut:
    values = payload.model_dump(exclude_unset=True)

    if values.get("cpf_cnpj"):
        taken = await db.scalar(
            select(User.id).where(
                User.cpf_cnpj == values["cpf_cnpj"],
                User.id != user.id,
            )
        )
        if taken:
            raise AppException(
                409,
                "CPF/CNPJ already registered",
                ErrorCode.USER_DOCUMENT_EXISTS,
            )

    if values.get("estado"):
        values["estado"] = values["estado"].upper()

    changes = _collect_changes(user, values)

    if changes:
        await emit_activity(
            db=db,
            user_id=user.id,
            username=user.email,
            code=ActivityCode.UPDATE_PROFILE,
            actor_email=user.email,
            changes=", ".join(changes),
        )
        await db.commit()
        await db.refresh(user)

        logger.info("Profile updated", extra={"user_id": user.id, "fields": changes})

    return UserProfileOut.model_validate(user)


async def update_branding(
    db: AsyncSession,
    payload: BrandingUpdate,
    user: User,
) -> UserProfileOut:
    values = payload.model_dump(exclude_unset=True)
    for key in ("primary_color", "secondary_color"):
        if values.get(key):
            values[key] = values[key].upper()
        elif key in values:
            values.pop(key)

    changes = _collect_changes(user, values)

    if changes:
        await emit_activity(
            db=db,
            user_id=user.id,
            username=user.email,
            code=ActivityCode.UPDATE_BRANDING,
            actor_email=user.email,
            changes=", ".join(changes),
        )
        await db.commit()
        await db.refresh(user)

    return UserProfileOut.model_validate(user)


# =========================
# PLAN
# =========================
async def get_plan_limits(db: AsyncSession, user: User) -> PlanLimitsOut:
    if apply_monthly_reset(user):
        await db.commit()
        await db.refresh(user)
    return plan_limits(user)


# =========================
# PUBLIC PROFILE
# =========================
async def get_public_profile(db: AsyncSession, user_id: int) -> PublicProfileOut:
    user = await db.get(User, user_id)
    if not user or not user.is_active:
        raise AppException(404, "User not found", ErrorCode.USER_NOT_FOUND)
    return PublicProfileOut.model_validate(user)
