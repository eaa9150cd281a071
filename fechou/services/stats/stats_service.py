# fechou/services/stats/stats_service.py

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.models.quotes.quote_models import Quote
from fechou.models.reviews.review_models import Review
from fechou.models.enums.quote_status import QuoteStatus
from fechou.schemas.stats.stats_schemas import DashboardStatsOut
from fechou.services.reviews.review_service import average_rating
from fechou.utils.datetime_utils import utcnow, month_start, previous_month_start
from fechou.utils.decimal_utils import to_decimal

WON_STATUSES = (QuoteStatus.approved, QuoteStatus.paid)


def calculate_trend(current, previous) -> tuple[str, bool]:
    """Month-over-month change rendered the way the dashboard shows it."""
    current = Decimal(str(current or 0))
    previous = Decimal(str(previous or 0))

    if previous == 0:
        return ("+100%", True) if current > 0 else ("", False)

    percentage = (current - previous) / previous * 100
    sign = "+" if percentage >= 0 else ""
    rounded = percentage.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{sign}{rounded}%", percentage >= 0


def won_count():
    return func.count(case((Quote.status.in_(WON_STATUSES), 1)))


def won_revenue():
    return func.coalesce(
        func.sum(case((Quote.status.in_(WON_STATUSES), Quote.total), else_=0)),
        0,
    )


def average_value(revenue: Decimal, won: int) -> Decimal:
    return to_decimal(revenue / won) if won else Decimal("0.00")


def conversion_rate(won: int, total: int) -> float:
    return round(won / total * 100, 1) if total else 0.0


async def _period_quotes(db: AsyncSession, user_id: int, start: datetime, end: datetime | None):
    conditions = [
        Quote.user_id == user_id,
        Quote.is_deleted.is_(False),
        Quote.created_at >= start,
    ]
    if end is not None:
        conditions.append(Quote.created_at < end)

    return (
        await db.execute(
            select(
                func.count(Quote.id).label("quotes"),
                won_count().label("won"),
                won_revenue().label("revenue"),
            ).where(*conditions)
        )
    ).one()


async def _period_rating(db: AsyncSession, user_id: int, start: datetime, end: datetime | None) -> float:
    conditions = [Review.user_id == user_id, Review.created_at >= start]
    if end is not None:
        conditions.append(Review.created_at < end)
    avg = await db.scalar(select(func.avg(Review.rating)).where(*conditions))
    return float(avg) if avg is not None else 0.0


async def dashboard_stats(db: AsyncSession, user) -> DashboardStatsOut:
    now = utcnow()
    this_month = month_start(now)
    last_month = previous_month_start(now)

    totals = (
        await db.execute(
            select(
                func.count(Quote.id).label("quotes"),
                won_count().label("won"),
                func.count(case((Quote.status == QuoteStatus.pending, 1))).label("pending"),
                func.count(case((Quote.status == QuoteStatus.draft, 1))).label("draft"),
                won_revenue().label("revenue"),
            ).where(
                Quote.user_id == user.id,
                Quote.is_deleted.is_(False),
            )
        )
    ).one()

    current = await _period_quotes(db, user.id, this_month, None)
    previous = await _period_quotes(db, user.id, last_month, this_month)

    revenue = to_decimal(totals.revenue)
    quote_trend, quote_up = calculate_trend(current.quotes, previous.quotes)
    approval_trend, approval_up = calculate_trend(current.won, previous.won)
    revenue_trend, revenue_up = calculate_trend(current.revenue, previous.revenue)
    rating_trend, rating_up = calculate_trend(
        await _period_rating(db, user.id, this_month, None),
        await _period_rating(db, user.id, last_month, this_month),
    )

    return DashboardStatsOut(
        total_quotes=totals.quotes,
        approved_quotes=totals.won,
        pending_quotes=totals.pending,
        draft_quotes=totals.draft,
        total_revenue=revenue,
        this_month_quotes=current.quotes,
        this_month_revenue=to_decimal(current.revenue),
        average_rating=await average_rating(db, user.id),
        average_quote_value=average_value(revenue, totals.won),
        conversion_rate=conversion_rate(totals.won, totals.quotes),
        quote_trend=quote_trend,
        quote_trend_up=quote_up,
        approval_trend=approval_trend,
        approval_trend_up=approval_up,
        revenue_trend=revenue_trend,
        revenue_trend_up=revenue_up,
        rating_trend=rating_trend,
        rating_trend_up=rating_up,
    )
