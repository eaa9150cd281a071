# fechou/services/notifications/notification_service.py

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.models.notifications.notification_models import Notification
from fechou.models.enums.notification_type import NotificationType
from fechou.schemas.notifications.notification_schemas import (
    NotificationOut,
    NotificationListData,
)
from fechou.core.exceptions import AppException
from fechou.constants.error_codes import ErrorCode
from fechou.utils.datetime_utils import utcnow
from fechou.utils.logger import get_logger

logger = get_logger(__name__)


def notify(
    db: AsyncSession,
    *,
    user_id: int,
    type: NotificationType,
    title: str,
    message: str,
    data: dict | None = None,
) -> Notification:
    """Queue a notification in the caller's transaction."""
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        data=data,
    )
    db.add(notification)
    return notification


async def _count_unread(db: AsyncSession, user_id: int) -> int:
    return await db.scalar(
        select(func.count(Notification.id)).where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False),
        )
    ) or 0


# =========================
# LIST
# =========================
async def list_notifications(
    db: AsyncSession,
    user,
    *,
    unread_only: bool = False,
    page: int = 1,
    page_size: int = 20,
) -> NotificationListData:
    base = select(Notification).where(Notification.user_id == user.id)
    if unread_only:
        base = base.where(Notification.is_read.is_(False))

    total = await db.scalar(
        select(func.count()).select_from(base.subquery())
    )

    result = await db.execute(
        base.order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return NotificationListData(
        total=total or 0,
        unread=await _count_unread(db, user.id),
        items=[NotificationOut.model_validate(n) for n in result.scalars().all()],
    )


async def unread_count(db: AsyncSession, user) -> int:
    return await _count_unread(db, user.id)


# =========================
# MARK READ
# =========================
async def mark_read(db: AsyncSession, notification_id: int, user) -> NotificationOut:
    notification = await db.get(Notification, notification_id)
    if not notification or notification.user_id != user.id:
        raise AppException(
            404,
            "Notification not found",
            ErrorCode.NOTIFICATION_NOT_FOUND,
        )

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utcnow()
        await db.commit()
        await db.refresh(notification)

    return NotificationOut.model_validate(notification)


async def mark_all_read(db: AsyncSession, user) -> int:
    result = await db.execute(
        update(Notification)
        .where(
            Notification.user_id == user.id,
            Notification.is_read.is_(False),
        )
        .values(is_read=True, read_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    await db.commit()

    logger.info(
        "Notifications marked read",
        extra={"user_id": user.id, "count": result.rowcount},
    )
    return result.rowcount
