# fechou/services/plans/plan_jobs.py

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.constants.activity_codes import ActivityCode
from fechou.models.users.user_models import User
from fechou.models.enums.user_plan import UserPlan, SubscriptionStatus
from fechou.utils.activity_helpers import emit_activity
from fechou.utils.datetime_utils import utcnow, month_start
from fechou.utils.logger import get_logger

logger = get_logger(__name__)


async def auto_reset_monthly_quotes(db: AsyncSession) -> int:
    now = utcnow()

    result = await db.execute(
        update(User)
        .where(
            (User.last_quote_reset.is_(None))
            | (User.last_quote_reset < month_start(now))
        )
        .values(quotes_used_this_month=0, last_quote_reset=now)
        .returning(User.id, User.email)
    )
    reset = result.all()

    if not reset:
        return 0

    for user_id, email in reset:
        await emit_activity(
            db,
            user_id=user_id,
            username="system",
            code=ActivityCode.AUTO_RESET_QUOTES,
            target_email=email,
            today=now.date().isoformat(),
        )

    await db.commit()
    logger.info("Monthly quotas reset", extra={"count": len(reset)})
    return len(reset)


async def mark_overdue_plans(db: AsyncSession) -> int:
    now = utcnow()

    result = await db.execute(
        update(User)
        .where(
            User.plan == UserPlan.PREMIUM,
            User.plan_expires_at.isnot(None),
            User.plan_expires_at <= now,
            User.payment_status != SubscriptionStatus.vencido,
        )
        .values(payment_status=SubscriptionStatus.vencido)
        .returning(User.id, User.email, User.plan_expires_at)
    )
    overdue = result.all()

    if not overdue:
        return 0

    for user_id, email, expired_at in overdue:
        await emit_activity(
            db,
            user_id=user_id,
            username="system",
            code=ActivityCode.PLAN_OVERDUE,
            target_email=email,
            expired_at=expired_at.date().isoformat() if expired_at else "",
        )

    await db.commit()
    logger.info("Premium plans marked overdue", extra={"count": len(overdue)})
    return len(overdue)
