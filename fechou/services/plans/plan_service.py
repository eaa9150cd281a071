# fechou/services/plans/plan_service.py

from datetime import datetime, timedelta

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.config import (
    FREE_QUOTES_LIMIT,
    PREMIUM_QUOTES_LIMIT,
    PREMIUM_PLAN_DAYS,
)
from fechou.core.exceptions import AppException
from fechou.constants.error_codes import ErrorCode
from fechou.models.enums.user_plan import UserPlan, SubscriptionStatus
from fechou.models.users.user_models import User
from fechou.schemas.users.user_schemas import PlanLimitsOut
from fechou.utils.datetime_utils import utcnow, ensure_aware, same_month
from fechou.utils.logger import get_logger

logger = get_logger(__name__)

PREMIUM_PLANS = {UserPlan.PREMIUM, UserPlan.PREMIUM_CORTESIA}


# =====================================================
# EFFECTIVE PLAN
# =====================================================
def is_plan_expired(user: User, now: datetime | None = None) -> bool:
    if user.plan != UserPlan.PREMIUM or user.plan_expires_at is None:
        return False
    return ensure_aware(user.plan_expires_at) <= (now or utcnow())


def is_premium(user: User, now: datetime | None = None) -> bool:
    if user.plan == UserPlan.PREMIUM_CORTESIA:
        return True
    if user.plan == UserPlan.PREMIUM:
        return not is_plan_expired(user, now)
    return False


def effective_plan(user: User, now: datetime | None = None) -> UserPlan:
    if user.plan in PREMIUM_PLANS and is_premium(user, now):
        return user.plan
    return UserPlan.FREE


def monthly_quote_limit(user: User, now: datetime | None = None) -> int:
    if is_premium(user, now):
        return PREMIUM_QUOTES_LIMIT
    if user.plan == UserPlan.FREE:
        return user.quotes_limit
    return FREE_QUOTES_LIMIT


def quote_allowance(user: User, now: datetime | None = None) -> int:
    return monthly_quote_limit(user, now) + (user.bonus_quotes or 0)


# =====================================================
# MONTHLY RESET
# =====================================================
def apply_monthly_reset(user: User, now: datetime | None = None) -> bool:
    """Zero the monthly usage when the last reset happened in an earlier UTC month."""
    now = now or utcnow()
    last = ensure_aware(user.last_quote_reset)

    if last is not None and same_month(last, now):
        return False

    user.quotes_used_this_month = 0
    user.last_quote_reset = now

    logger.info("Monthly quote usage reset", extra={"user_id": user.id})
    return True


def can_create_quote(user: User, now: datetime | None = None) -> bool:
    if is_premium(user, now):
        return True
    return user.quotes_used_this_month < quote_allowance(user, now)


def plan_limits(user: User, now: datetime | None = None) -> PlanLimitsOut:
    now = now or utcnow()
    apply_monthly_reset(user, now)

    premium = is_premium(user, now)
    limit = monthly_quote_limit(user, now)
    remaining = (
        PREMIUM_QUOTES_LIMIT
        if premium
        else max(quote_allowance(user, now) - user.quotes_used_this_month, 0)
    )

    return PlanLimitsOut(
        plan=effective_plan(user, now),
        is_premium=premium,
        is_expired=is_plan_expired(user, now),
        monthly_quote_limit=limit,
        bonus_quotes=user.bonus_quotes,
        quotes_used=user.quotes_used_this_month,
        quotes_remaining=remaining,
        can_create_quote=can_create_quote(user, now),
        plan_expires_at=user.plan_expires_at,
    )


# =====================================================
# QUOTA CONSUMPTION
# =====================================================
async def consume_quote_quota(db: AsyncSession, user: User) -> int:
    """Count one more quote against the user's month.

    The increment is a conditional UPDATE so two concurrent creations
    cannot both take the last free slot.
    """
    now = utcnow()
    if apply_monthly_reset(user, now):
        await db.flush()

    stmt = (
        update(User)
        .where(User.id == user.id)
        .values(quotes_used_this_month=User.quotes_used_this_month + 1)
        .returning(User.quotes_used_this_month)
    )

    if not is_premium(user, now):
        stmt = stmt.where(User.quotes_used_this_month < quote_allowance(user, now))

    used = (await db.execute(stmt)).scalar_one_or_none()

    if used is None:
        logger.warning(
            "Quote limit reached",
            extra={"user_id": user.id, "used": user.quotes_used_this_month},
        )
        raise AppException(
            403,
            "Monthly quote limit reached. Upgrade to Premium for unlimited quotes.",
            ErrorCode.PLAN_QUOTE_LIMIT_REACHED,
            details={
                "quotes_used": user.quotes_used_this_month,
                "quotes_limit": monthly_quote_limit(user, now),
                "bonus_quotes": user.bonus_quotes,
            },
        )

    await db.refresh(user, attribute_names=["quotes_used_this_month"])
    return used


# =====================================================
# PLAN CHANGES
# =====================================================
def parse_plan(value: str) -> UserPlan:
    try:
        return UserPlan(value.upper())
    except (ValueError, AttributeError):
        raise AppException(
            400,
            f"Invalid plan: {value}",
            ErrorCode.PLAN_INVALID,
            details={"allowed": [p.value for p in UserPlan]},
        )


def apply_plan(user: User, plan: UserPlan, now: datetime | None = None) -> None:
    """Move ``user`` onto ``plan`` with the matching expiry and quota."""
    now = now or utcnow()
    was_premium = is_premium(user, now)

    if plan == UserPlan.PREMIUM:
        user.plan_expires_at = now + timedelta(days=PREMIUM_PLAN_DAYS)
        user.quotes_limit = PREMIUM_QUOTES_LIMIT
    elif plan == UserPlan.PREMIUM_CORTESIA:
        user.plan_expires_at = None
        user.quotes_limit = PREMIUM_QUOTES_LIMIT
    else:
        user.plan_expires_at = None
        user.quotes_limit = FREE_QUOTES_LIMIT

    if plan in PREMIUM_PLANS and not was_premium:
        user.quotes_used_this_month = 0
        user.last_quote_reset = now

    user.plan = plan


def parse_subscription_status(value: str) -> SubscriptionStatus:
    try:
        return SubscriptionStatus(value.lower())
    except (ValueError, AttributeError):
        raise AppException(
            400,
            f"Invalid payment status: {value}",
            ErrorCode.VALIDATION_ERROR,
            details={"allowed": [s.value for s in SubscriptionStatus]},
        )
