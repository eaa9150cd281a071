from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.db import get_db
from fechou.schemas.reviews.review_schemas import (
    ReviewRespond,
    ReviewOut,
    ReviewListData,
)
from fechou.services.reviews.review_service import list_reviews, respond_review
from fechou.utils.get_user import get_current_user
from fechou.utils.response import success_response, APIResponse

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.get("", response_model=APIResponse[ReviewListData])
async def list_reviews_api(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_reviews(db, user, page=page, page_size=page_size)
    return success_response("Reviews fetched", data)


@router.post("/{review_id}/respond", response_model=APIResponse[ReviewOut])
async def respond_review_api(
    review_id: int,
    payload: ReviewRespond,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    review = await respond_review(db, review_id, payload, user)
    return success_response("Response saved successfully", review)
