from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.db import get_db
from fechou.schemas.referrals.referral_schemas import (
    ReferralListData,
    ReferralCodeOut,
    ReferralStatsOut,
)
from fechou.services.referrals.referral_service import (
    list_referrals,
    referral_stats,
    generate_referral_code,
)
from fechou.utils.get_user import get_current_user
from fechou.utils.response import success_response, APIResponse

router = APIRouter(prefix="/referrals", tags=["Referrals"])


@router.get("", response_model=APIResponse[ReferralListData])
async def list_referrals_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_referrals(db, user)
    return success_response("Referrals fetched", data)


@router.get("/stats", response_model=APIResponse[ReferralStatsOut])
async def referral_stats_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    stats = await referral_stats(db, user)
    return success_response("Referral stats fetched", stats)


@router.post("/code", response_model=APIResponse[ReferralCodeOut])
async def generate_referral_code_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    code = await generate_referral_code(db, user)
    return success_response("Referral code ready", code)
