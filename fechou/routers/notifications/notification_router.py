from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.db import get_db
from fechou.schemas.notifications.notification_schemas import (
    NotificationOut,
    NotificationListData,
    UnreadCountOut,
    MarkAllReadOut,
)
from fechou.services.notifications.notification_service import (
    list_notifications,
    unread_count,
    mark_read,
    mark_all_read,
)
from fechou.utils.get_user import get_current_user
from fechou.utils.response import success_response, APIResponse

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=APIResponse[NotificationListData])
async def list_notifications_api(
    unread_only: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_notifications(
        db, user, unread_only=unread_only, page=page, page_size=page_size
    )
    return success_response("Notifications fetched", data)


@router.get("/unread-count", response_model=APIResponse[UnreadCountOut])
async def unread_count_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    count = await unread_count(db, user)
    return success_response("Unread count fetched", UnreadCountOut(unread=count))


@router.patch("/read-all", response_model=APIResponse[MarkAllReadOut])
async def mark_all_read_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    updated = await mark_all_read(db, user)
    return success_response("Notifications marked as read", MarkAllReadOut(updated=updated))


@router.patch("/{notification_id}/read", response_model=APIResponse[NotificationOut])
async def mark_read_api(
    notification_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    notification = await mark_read(db, notification_id, user)
    return success_response("Notification marked as read", notification)
