from pydantic import BaseModel, EmailStr
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

from fechou.models.enums.user_plan import UserPlan, SubscriptionStatus


class AdminUserOut(BaseModel):
    id: int
    email: EmailStr
    first_name: Optional[str]
    last_name: Optional[str]
    business_name: Optional[str]
    plan: UserPlan
    plan_expires_at: Optional[datetime]
    quotes_limit: int
    quotes_used_this_month: int
    bonus_quotes: int
    payment_status: SubscriptionStatus
    payment_method: Optional[str]
    referral_count: int
    is_admin: bool
    is_active: bool
    quotes_this_month: int
    last_login_at: Optional[datetime]
    created_at: datetime


class AdminUserListData(BaseModel):
    total: int
    items: List[AdminUserOut]


class UserPlanUpdate(BaseModel):
    plan: str
    payment_status: str = "ativo"
    payment_method: Optional[str] = None


class AdminStatsOut(BaseModel):
    total_users: int
    premium_users: int
    free_users: int
    total_quotes: int
    draft_quotes: int
    pending_quotes: int
    approved_quotes: int
    rejected_quotes: int
    paid_quotes: int
    total_revenue: Decimal
    monthly_revenue: Decimal
    average_quote_value: Decimal
    conversion_rate: float
