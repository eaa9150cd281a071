# fechou/services/reviews/review_service.py

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.exceptions import AppException
from fechou.constants.error_codes import ErrorCode
from fechou.constants.activity_codes import ActivityCode
from fechou.models.reviews.review_models import Review
from fechou.models.enums.notification_type import NotificationType
from fechou.schemas.reviews.review_schemas import (
    ReviewCreate,
    ReviewRespond,
    ReviewOut,
    ReviewClientOut,
    ReviewListData,
)
from fechou.services.notifications.notification_service import notify
from fechou.services.quotes.quote_service import get_quote_by_number
from fechou.utils.activity_helpers import emit_activity
from fechou.utils.datetime_utils import utcnow
from fechou.utils.logger import get_logger

logger = get_logger(__name__)


def _map_review(r: Review) -> ReviewOut:
    return ReviewOut(
        id=r.id,
        quote_id=r.quote_id,
        rating=r.rating,
        comment=r.comment,
        is_public=r.is_public,
        response=r.response,
        responded_at=r.responded_at,
        created_at=r.created_at,
        client=ReviewClientOut(id=r.client.id, name=r.client.name) if r.client else None,
    )


async def average_rating(db: AsyncSession, user_id: int) -> float:
    avg = await db.scalar(
        select(func.avg(Review.rating)).where(Review.user_id == user_id)
    )
    return round(float(avg), 1) if avg is not None else 0.0


# =========================
# PUBLIC CREATE
# =========================
async def create_review(db: AsyncSession, payload: ReviewCreate) -> ReviewOut:
    q = await get_quote_by_number(db, payload.quote_number)

    exists = await db.scalar(
        select(Review.id).where(
            Review.quote_id == q.id,
            Review.client_id == q.client_id,
        )
    )
    if exists:
        raise AppException(
            409,
            "This quote has already been reviewed",
            ErrorCode.REVIEW_ALREADY_EXISTS,
        )

    review = Review(
        user_id=q.user_id,
        client_id=q.client_id,
        client=q.client,
        quote_id=q.id,
        rating=payload.rating,
        comment=payload.comment,
    )
    db.add(review)
    await db.flush()

    notify(
        db,
        user_id=q.user_id,
        type=NotificationType.REVIEW_RECEIVED,
        title="New review",
        message=f"{q.client.name} rated quote {q.quote_number} with {payload.rating} star(s).",
        data={"review_id": review.id, "quote_id": q.id, "rating": payload.rating},
    )

    await db.commit()

    logger.info("Review received", extra={"review_id": review.id, "quote_id": q.id})
    return _map_review(review)


# =========================
# LIST
# =========================
async def list_reviews(
    db: AsyncSession,
    user,
    *,
    page: int = 1,
    page_size: int = 50,
) -> ReviewListData:
    base = select(Review).where(Review.user_id == user.id)

    total = await db.scalar(
        select(func.count()).select_from(base.subquery())
    )

    result = await db.execute(
        base.order_by(Review.created_at.desc(), Review.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return ReviewListData(
        total=total or 0,
        average_rating=await average_rating(db, user.id),
        items=[_map_review(r) for r in result.scalars().all()],
    )


# =========================
# RESPOND
# =========================
async def respond_review(
    db: AsyncSession,
    review_id: int,
    payload: ReviewRespond,
    user,
) -> ReviewOut:
    review = await db.get(Review, review_id)
    if not review or review.user_id != user.id:
        raise AppException(404, "Review not found", ErrorCode.REVIEW_NOT_FOUND)

    review.response = payload.response
    review.responded_at = utcnow()

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.RESPOND_REVIEW,
        actor_email=user.email,
        target_id=review.id,
    )

    await db.commit()
    return _map_review(review)
