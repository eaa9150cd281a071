# fechou/services/referrals/referral_service.py

import secrets
import string
from datetime import timedelta

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.config import (
    PUBLIC_APP_URL,
    REFERRAL_BONUS_QUOTES,
    REFERRAL_PREMIUM_DAYS,
)
from fechou.core.exceptions import AppException
from fechou.constants.error_codes import ErrorCode
from fechou.constants.activity_codes import ActivityCode
from fechou.models.users.user_models import User
from fechou.models.referrals.referral_models import Referral
from fechou.models.enums.user_plan import UserPlan
from fechou.models.enums.referral_enums import ReferralStatus, RewardType
from fechou.models.enums.notification_type import NotificationType
from fechou.schemas.referrals.referral_schemas import (
    ReferralOut,
    ReferralListData,
    ReferralCodeOut,
    ReferralStatsOut,
)
from fechou.services.notifications.notification_service import notify
from fechou.utils.activity_helpers import emit_activity
from fechou.utils.datetime_utils import utcnow, ensure_aware
from fechou.utils.logger import get_logger

logger = get_logger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_PREFIX = "FECHOU"
MAX_CODE_ATTEMPTS = 10


def _random_code(length: int) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def referral_link(code: str) -> str:
    return f"{PUBLIC_APP_URL}/register?ref={code}"


async def _unique_code(db: AsyncSession, make) -> str:
    for _ in range(MAX_CODE_ATTEMPTS):
        code = make()
        taken = await db.scalar(select(User.id).where(User.referral_code == code))
        if not taken:
            return code

    raise AppException(
        409,
        "Could not allocate a referral code. Please retry.",
        ErrorCode.REFERRAL_CODE_EXHAUSTED,
    )


async def new_signup_code(db: AsyncSession) -> str:
    """Eight character code handed out at registration."""
    return await _unique_code(db, lambda: _random_code(8))


# =========================
# GENERATE
# =========================
async def generate_referral_code(db: AsyncSession, user: User) -> ReferralCodeOut:
    if not user.referral_code:
        user.referral_code = await _unique_code(
            db, lambda: CODE_PREFIX + _random_code(6)
        )

        await emit_activity(
            db=db,
            user_id=user.id,
            username=user.email,
            code=ActivityCode.GENERATE_REFERRAL_CODE,
            actor_email=user.email,
            referral_code=user.referral_code,
        )
        await db.commit()

        logger.info("Referral code generated", extra={"user_id": user.id})

    return ReferralCodeOut(
        referral_code=user.referral_code,
        referral_link=referral_link(user.referral_code),
    )


# =========================
# REWARD ON SIGNUP
# =========================
async def apply_referral(db: AsyncSession, new_user: User, code: str | None) -> Referral | None:
    """Reward the owner of ``code`` for bringing in ``new_user``.

    Unknown codes are ignored. Runs inside the registration transaction;
    the caller commits.
    """
    if not code:
        return None

    code = code.strip().upper()
    result = await db.execute(select(User).where(User.referral_code == code))
    referrer = result.scalars().first()

    if not referrer or referrer.id == new_user.id:
        logger.info("Ignoring unknown referral code", extra={"referral_code": code})
        return None

    now = utcnow()
    new_user.referred_by_id = referrer.id
    referrer.referral_count = (referrer.referral_count or 0) + 1

    reward_type = None
    reward_value = None

    if referrer.plan == UserPlan.FREE:
        referrer.bonus_quotes = (referrer.bonus_quotes or 0) + REFERRAL_BONUS_QUOTES
        reward_type = RewardType.bonus_quote
        reward_value = REFERRAL_BONUS_QUOTES
    elif referrer.plan == UserPlan.PREMIUM:
        current_expiry = ensure_aware(referrer.plan_expires_at) or now
        base = max(now, current_expiry)
        referrer.plan_expires_at = base + timedelta(days=REFERRAL_PREMIUM_DAYS)
        reward_type = RewardType.premium_extension
        reward_value = REFERRAL_PREMIUM_DAYS

    referral = Referral(
        referrer_id=referrer.id,
        referred_id=new_user.id,
        referral_code=code,
        status=ReferralStatus.rewarded if reward_type else ReferralStatus.completed,
        reward_type=reward_type,
        reward_value=reward_value,
        completed_at=now,
        rewarded_at=now if reward_type else None,
    )
    db.add(referral)

    if reward_type == RewardType.bonus_quote:
        message = f"{new_user.email} signed up with your code. You earned {reward_value} extra quote(s)."
    elif reward_type == RewardType.premium_extension:
        message = f"{new_user.email} signed up with your code. Your Premium plan was extended by {reward_value} days."
    else:
        message = f"{new_user.email} signed up with your code."

    notify(
        db,
        user_id=referrer.id,
        type=NotificationType.REFERRAL_REWARD,
        title="New referral",
        message=message,
        data={
            "referred_user_id": new_user.id,
            "reward_type": reward_type.value if reward_type else None,
            "reward_value": reward_value,
        },
    )

    await emit_activity(
        db=db,
        user_id=referrer.id,
        username=referrer.email,
        code=ActivityCode.REFERRAL_REWARD,
        target_email=referrer.email,
        referred_email=new_user.email,
        reward_type=reward_type.value if reward_type else "no reward",
        reward_value=reward_value or 0,
    )

    logger.info(
        "Referral applied",
        extra={
            "referrer_id": referrer.id,
            "referred_id": new_user.id,
            "reward_type": reward_type.value if reward_type else None,
        },
    )
    return referral


# =========================
# LIST / STATS
# =========================
def _map_referral(r: Referral) -> ReferralOut:
    return ReferralOut(
        id=r.id,
        referred_id=r.referred_id,
        referred_email=r.referred.email if r.referred else None,
        referred_name=r.referred.display_name if r.referred else None,
        referral_code=r.referral_code,
        status=r.status,
        reward_type=r.reward_type,
        reward_value=r.reward_value,
        completed_at=r.completed_at,
        rewarded_at=r.rewarded_at,
        created_at=r.created_at,
    )


async def list_referrals(db: AsyncSession, user: User) -> ReferralListData:
    result = await db.execute(
        select(Referral)
        .where(Referral.referrer_id == user.id)
        .order_by(Referral.created_at.desc(), Referral.id.desc())
    )
    referrals = result.scalars().all()

    return ReferralListData(
        total=len(referrals),
        items=[_map_referral(r) for r in referrals],
    )


async def referral_stats(db: AsyncSession, user: User) -> ReferralStatsOut:
    row = (
        await db.execute(
            select(
                func.count(Referral.id).filter(
                    Referral.status == ReferralStatus.rewarded
                ).label("rewarded"),
                func.coalesce(
                    func.sum(Referral.reward_value).filter(
                        Referral.reward_type == RewardType.premium_extension
                    ),
                    0,
                ).label("premium_days"),
            ).where(Referral.referrer_id == user.id)
        )
    ).one()

    return ReferralStatsOut(
        referral_code=user.referral_code,
        referral_link=referral_link(user.referral_code) if user.referral_code else None,
        referral_count=user.referral_count,
        bonus_quotes=user.bonus_quotes,
        rewarded_referrals=row.rewarded or 0,
        premium_days_earned=row.premium_days or 0,
    )
