from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.db import get_db
from fechou.models.enums.quote_status import QuoteStatus
from fechou.schemas.quotes.quote_schemas import (
    QuoteCreate,
    QuoteUpdate,
    QuoteStatusUpdate,
    ConfirmPaymentRequest,
    QuoteOut,
    QuoteListData,
)
from fechou.services.quotes.quote_service import (
    create_quote,
    list_quotes,
    get_quote,
    update_quote,
    delete_quote,
    send_quote,
    update_quote_status,
    confirm_payment,
    quote_pdf,
    receipt_pdf,
)
from fechou.utils.get_user import get_current_user
from fechou.utils.response import success_response, APIResponse
from fechou.utils.logger import get_logger

router = APIRouter(prefix="/quotes", tags=["Quotes"])
logger = get_logger(__name__)


def pdf_response(filename: str, content: bytes) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@router.post("", response_model=APIResponse[QuoteOut], status_code=201)
async def create_quote_api(
    payload: QuoteCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Create quote", extra={"user_id": user.id, "client_id": payload.client_id})
    quote = await create_quote(db, payload, user)
    return success_response("Quote created successfully", quote)


@router.get("", response_model=APIResponse[QuoteListData])
async def list_quotes_api(
    status: Optional[QuoteStatus] = Query(None),
    client_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_quotes(
        db,
        user,
        status=status,
        client_id=client_id,
        page=page,
        page_size=page_size,
    )
    return success_response("Quotes fetched", data)


@router.get("/{quote_id}", response_model=APIResponse[QuoteOut])
async def get_quote_api(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    quote = await get_quote(db, quote_id, user)
    return success_response("Quote fetched", quote)


@router.put("/{quote_id}", response_model=APIResponse[QuoteOut])
async def update_quote_api(
    quote_id: int,
    payload: QuoteUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Update quote", extra={"quote_id": quote_id})
    quote = await update_quote(db, quote_id, payload, user)
    return success_response("Quote updated successfully", quote)


@router.delete("/{quote_id}", response_model=APIResponse)
async def delete_quote_api(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Delete quote", extra={"quote_id": quote_id})
    await delete_quote(db, quote_id, user)
    return success_response("Quote deleted successfully")


# =========================
# LIFECYCLE
# =========================
@router.post("/{quote_id}/send", response_model=APIResponse[QuoteOut])
async def send_quote_api(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Send quote", extra={"quote_id": quote_id})
    quote = await send_quote(db, quote_id, user)
    return success_response("Quote sent successfully", quote)


@router.patch("/{quote_id}/status", response_model=APIResponse[QuoteOut])
async def update_quote_status_api(
    quote_id: int,
    payload: QuoteStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info(
        "Change quote status",
        extra={"quote_id": quote_id, "status": payload.status.value},
    )
    quote = await update_quote_status(
        db, quote_id, payload.status, user, payload.rejection_reason
    )
    return success_response("Quote status updated successfully", quote)


@router.post("/{quote_id}/confirm-payment", response_model=APIResponse[QuoteOut])
async def confirm_payment_api(
    quote_id: int,
    payload: ConfirmPaymentRequest,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    logger.info("Confirm payment", extra={"quote_id": quote_id, "method": payload.method.value})
    quote = await confirm_payment(db, quote_id, payload, user)
    return success_response("Payment confirmed successfully", quote)


# =========================
# DOCUMENTS
# =========================
@router.get("/{quote_id}/pdf")
async def quote_pdf_api(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    filename, content = await quote_pdf(db, quote_id, user)
    return pdf_response(filename, content)


@router.get("/{quote_id}/receipt/pdf")
async def receipt_pdf_api(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    filename, content = await receipt_pdf(db, quote_id, user)
    return pdf_response(filename, content)
