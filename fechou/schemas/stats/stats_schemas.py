from pydantic import BaseModel
from decimal import Decimal


class DashboardStatsOut(BaseModel):
    total_quotes: int
    approved_quotes: int
    pending_quotes: int
    draft_quotes: int
    total_revenue: Decimal
    this_month_quotes: int
    this_month_revenue: Decimal
    average_rating: float
    average_quote_value: Decimal
    conversion_rate: float

    quote_trend: str
    quote_trend_up: bool
    approval_trend: str
    approval_trend_up: bool
    revenue_trend: str
    revenue_trend_up: bool
    rating_trend: str
    rating_trend_up: bool
