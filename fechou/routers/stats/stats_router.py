from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.db import get_db
from fechou.schemas.stats.stats_schemas import DashboardStatsOut
from fechou.services.stats.stats_service import dashboard_stats
from fechou.utils.get_user import get_current_user
from fechou.utils.response import success_response, APIResponse

router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get("", response_model=APIResponse[DashboardStatsOut])
async def dashboard_stats_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    stats = await dashboard_stats(db, user)
    return success_response("Dashboard stats fetched", stats)
