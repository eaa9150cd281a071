from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

from fechou.models.enums.referral_enums import ReferralStatus, RewardType


class ReferralOut(BaseModel):
    id: int
    referred_id: int
    referred_email: Optional[str]
    referred_name: Optional[str]
    referral_code: str
    status: ReferralStatus
    reward_type: Optional[RewardType]
    reward_value: Optional[int]
    completed_at: Optional[datetime]
    rewarded_at: Optional[datetime]
    created_at: datetime


class ReferralListData(BaseModel):
    total: int
    items: List[ReferralOut]


class ReferralCodeOut(BaseModel):
    referral_code: str
    referral_link: str


class ReferralStatsOut(BaseModel):
    referral_code: Optional[str]
    referral_link: Optional[str]
    referral_count: int
    bonus_quotes: int
    rewarded_referrals: int
    premium_days_earned: int
