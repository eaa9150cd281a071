from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.db import get_db
from fechou.schemas.users.user_schemas import PlanLimitsOut
from fechou.schemas.users.activity_schemas import UserActivityOut
from fechou.services.users.user_service import get_plan_limits
from fechou.services.users.activity_service import list_own_activity
from fechou.utils.get_user import get_current_user
from fechou.utils.response import success_response, APIResponse

router = APIRouter(prefix="/user", tags=["User"])


@router.get("/activity", response_model=APIResponse[List[UserActivityOut]])
async def own_activity_api(
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
):
    activities = await list_own_activity(db, current_user, limit)
    return success_response("Activity fetched", activities)


@router.get("/plan", response_model=APIResponse[PlanLimitsOut])
async def plan_limits_api(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_user),
):
    limits = await get_plan_limits(db, current_user)
    return success_response("Plan limits fetched", limits)
