from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.db import get_db
from fechou.schemas.quotes.quote_schemas import (
    QuoteRejectRequest,
    PublicQuoteOut,
    ReceiptOut,
)
from fechou.schemas.reviews.review_schemas import (
    ReviewCreate,
    ReviewOut,
    ReviewExistsOut,
)
from fechou.schemas.users.user_schemas import PublicProfileOut
from fechou.services.quotes.public_quote_service import (
    view_public_quote,
    approve_public_quote,
    reject_public_quote,
    public_quote_pdf,
    public_receipt,
    public_receipt_pdf,
    public_review_exists,
)
from fechou.services.reviews.review_service import create_review
from fechou.services.users.user_service import get_public_profile
from fechou.routers.quotes.quote_router import pdf_response
from fechou.utils.response import success_response, APIResponse
from fechou.utils.logger import get_logger

router = APIRouter(prefix="/public", tags=["Public"])
logger = get_logger(__name__)


@router.get("/quotes/{quote_number}", response_model=APIResponse[PublicQuoteOut])
async def view_public_quote_api(
    quote_number: str,
    db: AsyncSession = Depends(get_db),
):
    quote = await view_public_quote(db, quote_number)
    return success_response("Quote fetched", quote)


@router.post("/quotes/{quote_number}/approve", response_model=APIResponse[PublicQuoteOut])
async def approve_public_quote_api(
    quote_number: str,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Client approving quote", extra={"quote_number": quote_number})
    quote = await approve_public_quote(db, quote_number)
    return success_response("Quote approved successfully", quote)


@router.post("/quotes/{quote_number}/reject", response_model=APIResponse[PublicQuoteOut])
async def reject_public_quote_api(
    quote_number: str,
    payload: QuoteRejectRequest,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Client rejecting quote", extra={"quote_number": quote_number})
    quote = await reject_public_quote(db, quote_number, payload.reason)
    return success_response("Quote rejected successfully", quote)


@router.get("/quotes/{quote_number}/pdf")
async def public_quote_pdf_api(
    quote_number: str,
    db: AsyncSession = Depends(get_db),
):
    filename, content = await public_quote_pdf(db, quote_number)
    return pdf_response(filename, content)


@router.get("/quotes/{quote_number}/receipt", response_model=APIResponse[ReceiptOut])
async def public_receipt_api(
    quote_number: str,
    db: AsyncSession = Depends(get_db),
):
    receipt = await public_receipt(db, quote_number)
    return success_response("Receipt fetched", receipt)


@router.get("/quotes/{quote_number}/receipt/pdf")
async def public_receipt_pdf_api(
    quote_number: str,
    db: AsyncSession = Depends(get_db),
):
    filename, content = await public_receipt_pdf(db, quote_number)
    return pdf_response(filename, content)


@router.get("/quotes/{quote_number}/review", response_model=APIResponse[ReviewExistsOut])
async def public_review_exists_api(
    quote_number: str,
    db: AsyncSession = Depends(get_db),
):
    exists = await public_review_exists(db, quote_number)
    return success_response("Review status fetched", ReviewExistsOut(exists=exists))


@router.post("/reviews", response_model=APIResponse[ReviewOut], status_code=201)
async def create_review_api(
    payload: ReviewCreate,
    db: AsyncSession = Depends(get_db),
):
    logger.info("Client review", extra={"quote_number": payload.quote_number})
    review = await create_review(db, payload)
    return success_response("Review submitted successfully", review)


@router.get("/users/{user_id}", response_model=APIResponse[PublicProfileOut])
async def public_profile_api(
    user_id: int,
    db: AsyncSession = Depends(get_db),
):
    profile = await get_public_profile(db, user_id)
    return success_response("Profile fetched", profile)
