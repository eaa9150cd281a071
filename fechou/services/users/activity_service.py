# fechou/services/users/activity_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc, asc

from fechou.models.support.activity_models import UserActivity
from fechou.schemas.users.activity_schemas import (
    UserActivityOut,
    UserActivityFilters,
    UserActivityListData,
)
from fechou.utils.logger import get_logger

logger = get_logger(__name__)

ALLOWED_SORT_FIELDS = {
    "created_at": UserActivity.created_at,
    "username": UserActivity.username_snapshot,
}


async def list_own_activity(
    db: AsyncSession,
    user,
    limit: int = 50,
) -> list[UserActivityOut]:
    result = await db.execute(
        select(UserActivity)
        .where(UserActivity.user_id == user.id)
        .order_by(UserActivity.created_at.desc(), UserActivity.id.desc())
        .limit(limit)
    )
    return [UserActivityOut.model_validate(a) for a in result.scalars().all()]


async def list_user_activities(
    *,
    db: AsyncSession,
    filters: UserActivityFilters,
) -> UserActivityListData:
    # -------------------------
    # Base queries
    # -------------------------
    query = select(UserActivity)
    count_query = select(func.count(UserActivity.id))

    # -------------------------
    # Filters
    # -------------------------
    conditions = []
    if filters.user_id:
        conditions.append(UserActivity.user_id == filters.user_id)

    if filters.username:
        conditions.append(
            UserActivity.username_snapshot.ilike(f"%{filters.username}%")
        )

    if filters.category:
        conditions.append(UserActivity.category == filters.category)

    if conditions:
        query = query.where(*conditions)
        count_query = count_query.where(*conditions)

    # -------------------------
    # Sorting
    # -------------------------
    order_fn = desc if filters.sort_order == "desc" else asc
    query = query.order_by(
        order_fn(ALLOWED_SORT_FIELDS[filters.sort_by]),
        order_fn(UserActivity.id),
    )

    # -------------------------
    # Pagination
    # -------------------------
    offset = (filters.page - 1) * filters.page_size
    query = query.limit(filters.page_size).offset(offset)

    total = await db.scalar(count_query)
    result = await db.execute(query)

    logger.info(
        "User activities fetched",
        extra={
            "total": total,
            "page": filters.page,
            "page_size": filters.page_size,
        },
    )

    return UserActivityListData(
        total=total or 0,
        items=[UserActivityOut.model_validate(a) for a in result.scalars().all()],
    )
