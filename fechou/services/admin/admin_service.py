# fechou/services/admin/admin_service.py

from decimal import Decimal

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.exceptions import AppException
from fechou.constants.error_codes import ErrorCode
from fechou.constants.activity_codes import ActivityCode
from fechou.models.users.user_models import User
from fechou.models.quotes.quote_models import Quote
from fechou.models.enums.user_plan import UserPlan
from fechou.models.enums.quote_status import QuoteStatus
from fechou.schemas.admin.admin_schemas import (
    AdminUserOut,
    AdminUserListData,
    UserPlanUpdate,
    AdminStatsOut,
)
from fechou.services.plans.plan_service import (
    PREMIUM_PLANS,
    parse_plan,
    apply_plan,
    parse_subscription_status,
)
from fechou.services.stats.stats_service import (
    won_count,
    won_revenue,
    average_value,
    conversion_rate,
)
from fechou.utils.activity_helpers import emit_activity
from fechou.utils.datetime_utils import utcnow, month_start
from fechou.utils.decimal_utils import to_decimal
from fechou.utils.logger import get_logger

logger = get_logger(__name__)


def _map_admin_user(u: User, quotes_this_month: int = 0) -> AdminUserOut:
    return AdminUserOut(
        id=u.id,
        email=u.email,
        first_name=u.first_name,
        last_name=u.last_name,
        business_name=u.business_name,
        plan=u.plan,
        plan_expires_at=u.plan_expires_at,
        quotes_limit=u.quotes_limit,
        quotes_used_this_month=u.quotes_used_this_month,
        bonus_quotes=u.bonus_quotes,
        payment_status=u.payment_status,
        payment_method=u.payment_method,
        referral_count=u.referral_count,
        is_admin=u.is_admin,
        is_active=u.is_active,
        quotes_this_month=quotes_this_month,
        last_login_at=u.last_login_at,
        created_at=u.created_at,
    )


async def _get_user(db: AsyncSession, user_id: int) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise AppException(404, "User not found", ErrorCode.USER_NOT_FOUND)
    return user


# =========================
# LIST USERS
# =========================
async def list_users(db: AsyncSession) -> AdminUserListData:
    monthly = (
        select(
            Quote.user_id.label("user_id"),
            func.count(Quote.id).label("quotes_this_month"),
        )
        .where(
            Quote.is_deleted.is_(False),
            Quote.created_at >= month_start(utcnow()),
        )
        .group_by(Quote.user_id)
        .subquery()
    )

    result = await db.execute(
        select(User, func.coalesce(monthly.c.quotes_this_month, 0))
        .outerjoin(monthly, monthly.c.user_id == User.id)
        .order_by(User.created_at.desc(), User.id.desc())
    )
    rows = result.all()

    return AdminUserListData(
        total=len(rows),
        items=[_map_admin_user(u, count) for u, count in rows],
    )


# =========================
# PLAN CHANGES
# =========================
async def _change_plan(
    db: AsyncSession,
    target: User,
    plan: UserPlan,
    admin: User,
) -> AdminUserOut:
    old_plan = target.plan
    apply_plan(target, plan, utcnow())

    await emit_activity(
        db=db,
        user_id=admin.id,
        username=admin.email,
        code=ActivityCode.CHANGE_PLAN,
        actor_email=admin.email,
        target_email=target.email,
        old_plan=old_plan.value,
        new_plan=plan.value,
        details={"target_user_id": target.id},
    )

    await db.commit()
    await db.refresh(target)

    logger.info(
        "User plan changed",
        extra={
            "user_id": target.id,
            "old_plan": old_plan.value,
            "new_plan": plan.value,
            "admin_id": admin.id,
        },
    )
    return _map_admin_user(target)


async def update_user_plan(
    db: AsyncSession,
    user_id: int,
    payload: UserPlanUpdate,
    admin: User,
) -> AdminUserOut:
    plan = parse_plan(payload.plan)
    payment_status = parse_subscription_status(payload.payment_status)

    target = await _get_user(db, user_id)
    target.payment_status = payment_status
    if payload.payment_method is not None:
        target.payment_method = payload.payment_method

    return await _change_plan(db, target, plan, admin)


async def toggle_plan(db: AsyncSession, user_id: int, admin: User) -> AdminUserOut:
    target = await _get_user(db, user_id)
    new_plan = UserPlan.FREE if target.plan in PREMIUM_PLANS else UserPlan.PREMIUM
    return await _change_plan(db, target, new_plan, admin)


async def reset_monthly_quotes(db: AsyncSession, user_id: int, admin: User) -> AdminUserOut:
    target = await _get_user(db, user_id)

    target.quotes_used_this_month = 0
    target.last_quote_reset = utcnow()

    await emit_activity(
        db=db,
        user_id=admin.id,
        username=admin.email,
        code=ActivityCode.RESET_QUOTES,
        actor_email=admin.email,
        target_email=target.email,
        details={"target_user_id": target.id},
    )

    await db.commit()
    await db.refresh(target)
    return _map_admin_user(target)


# =========================
# STATS
# =========================
async def admin_stats(db: AsyncSession) -> AdminStatsOut:
    users = (
        await db.execute(
            select(
                func.count(User.id).label("total"),
                func.count(case((User.plan.in_(list(PREMIUM_PLANS)), 1))).label("premium"),
            )
        )
    ).one()

    quotes = (
        await db.execute(
            select(
                func.count(Quote.id).label("total"),
                func.count(case((Quote.status == QuoteStatus.draft, 1))).label("draft"),
                func.count(case((Quote.status == QuoteStatus.pending, 1))).label("pending"),
                func.count(case((Quote.status == QuoteStatus.approved, 1))).label("approved"),
                func.count(case((Quote.status == QuoteStatus.rejected, 1))).label("rejected"),
                func.count(case((Quote.status == QuoteStatus.paid, 1))).label("paid"),
                won_count().label("won"),
                won_revenue().label("revenue"),
            ).where(Quote.is_deleted.is_(False))
        )
    ).one()

    monthly_revenue = await db.scalar(
        select(won_revenue()).where(
            Quote.is_deleted.is_(False),
            Quote.created_at >= month_start(utcnow()),
        )
    )

    revenue = to_decimal(quotes.revenue)

    return AdminStatsOut(
        total_users=users.total,
        premium_users=users.premium,
        free_users=users.total - users.premium,
        total_quotes=quotes.total,
        draft_quotes=quotes.draft,
        pending_quotes=quotes.pending,
        approved_quotes=quotes.approved,
        rejected_quotes=quotes.rejected,
        paid_quotes=quotes.paid,
        total_revenue=revenue,
        monthly_revenue=to_decimal(monthly_revenue or Decimal("0")),
        average_quote_value=average_value(revenue, quotes.won),
        conversion_rate=conversion_rate(quotes.won, quotes.total),
    )
