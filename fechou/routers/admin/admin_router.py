from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.db import get_db
from fechou.schemas.admin.admin_schemas import (
    AdminUserOut,
    AdminUserListData,
    UserPlanUpdate,
    AdminStatsOut,
)
from fechou.schemas.users.activity_schemas import (
    UserActivityFilters,
    UserActivityListData,
)
from fechou.services.admin.admin_service import (
    list_users,
    update_user_plan,
    toggle_plan,
    reset_monthly_quotes,
    admin_stats,
)
from fechou.services.users.activity_service import list_user_activities
from fechou.utils.check_roles import require_admin
from fechou.utils.response import success_response, APIResponse
from fechou.utils.logger import get_logger

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = get_logger(__name__)


@router.get("/users", response_model=APIResponse[AdminUserListData])
async def list_users_api(
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_admin),
):
    logger.info("Admin list users", extra={"admin_id": admin.id})
    users = await list_users(db)
    return success_response("Users fetched", users)


@router.patch("/users/{user_id}/plan", response_model=APIResponse[AdminUserOut])
async def update_user_plan_api(
    user_id: int,
    payload: UserPlanUpdate,
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_admin),
):
    logger.info("Update user plan", extra={"user_id": user_id, "plan": payload.plan})
    user = await update_user_plan(db, user_id, payload, admin)
    return success_response("Plan updated successfully", user)


@router.patch("/users/{user_id}/toggle-plan", response_model=APIResponse[AdminUserOut])
async def toggle_plan_api(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_admin),
):
    logger.info("Toggle user plan", extra={"user_id": user_id})
    user = await toggle_plan(db, user_id, admin)
    return success_response("Plan toggled successfully", user)


@router.patch("/users/{user_id}/reset-quotes", response_model=APIResponse[AdminUserOut])
async def reset_quotes_api(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_admin),
):
    logger.info("Reset monthly quotes", extra={"user_id": user_id})
    user = await reset_monthly_quotes(db, user_id, admin)
    return success_response("Monthly quotes reset successfully", user)


@router.get("/stats", response_model=APIResponse[AdminStatsOut])
async def admin_stats_api(
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_admin),
):
    stats = await admin_stats(db)
    return success_response("Admin stats fetched", stats)


@router.get("/activities", response_model=APIResponse[UserActivityListData])
async def list_activities_api(
    filters: UserActivityFilters = Depends(),
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_admin),
):
    logger.info("List user activities", extra=filters.model_dump())
    data = await list_user_activities(db=db, filters=filters)
    return success_response("User activities fetched", data)
