# fechou/services/quotes/public_quote_service.py

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.exceptions import AppException
from fechou.constants.error_codes import ErrorCode
from fechou.models.quotes.quote_models import Quote
from fechou.models.reviews.review_models import Review
from fechou.models.enums.quote_status import QuoteStatus
from fechou.models.enums.notification_type import NotificationType
from fechou.schemas.quotes.quote_schemas import (
    PublicQuoteOut,
    ReceiptOut,
    ReceiptPaymentOut,
)
from fechou.schemas.users.user_schemas import PublicProfileOut
from fechou.services.notifications.notification_service import notify
from fechou.services.quotes.quote_service import (
    get_quote_by_number,
    load_quote,
    quote_fields,
    transition_quote,
    latest_payment,
    render_quote_pdf,
    render_receipt_pdf,
)
from fechou.utils.datetime_utils import utcnow
from fechou.utils.logger import get_logger

logger = get_logger(__name__)


async def _has_review(db: AsyncSession, q: Quote) -> bool:
    return bool(
        await db.scalar(
            select(Review.id).where(
                Review.quote_id == q.id,
                Review.client_id == q.client_id,
            )
        )
    )


async def _map_public(db: AsyncSession, q: Quote) -> PublicQuoteOut:
    return PublicQuoteOut(
        **quote_fields(q),
        provider=PublicProfileOut.model_validate(q.user),
        has_review=await _has_review(db, q),
    )


def _client_actor(q: Quote) -> str:
    return f"Client {q.client.name}" if q.client else "Client"


# =========================
# VIEW
# =========================
async def view_public_quote(db: AsyncSession, quote_number: str) -> PublicQuoteOut:
    q = await get_quote_by_number(db, quote_number)

    if q.status == QuoteStatus.pending and q.viewed_at is None:
        # only the first view stamps viewed_at and notifies
        result = await db.execute(
            update(Quote)
            .where(Quote.id == q.id, Quote.viewed_at.is_(None))
            .values(viewed_at=utcnow())
            .returning(Quote.id)
            .execution_options(synchronize_session=False)
        )

        if result.scalar_one_or_none() is not None:
            notify(
                db,
                user_id=q.user_id,
                type=NotificationType.QUOTE_VIEWED,
                title="Quote viewed",
                message=f"{_client_actor(q)} opened quote {q.quote_number}.",
                data={"quote_id": q.id, "quote_number": q.quote_number},
            )
            logger.info("Quote viewed for the first time", extra={"quote_id": q.id})

        await db.commit()
        q = await load_quote(db, Quote.id == q.id)

    return await _map_public(db, q)


# =========================
# CLIENT DECISIONS
# =========================
async def approve_public_quote(db: AsyncSession, quote_number: str) -> PublicQuoteOut:
    q = await get_quote_by_number(db, quote_number)
    q = await transition_quote(db, q, QuoteStatus.approved, actor_email=_client_actor(q))
    return await _map_public(db, q)


async def reject_public_quote(
    db: AsyncSession,
    quote_number: str,
    reason: Optional[str] = None,
) -> PublicQuoteOut:
    q = await get_quote_by_number(db, quote_number)
    q = await transition_quote(
        db,
        q,
        QuoteStatus.rejected,
        actor_email=_client_actor(q),
        rejection_reason=reason,
    )
    return await _map_public(db, q)


# =========================
# DOCUMENTS
# =========================
async def public_quote_pdf(db: AsyncSession, quote_number: str) -> tuple[str, bytes]:
    q = await get_quote_by_number(db, quote_number)
    return f"pedido-{q.quote_number}.pdf", render_quote_pdf(q)


async def public_receipt(db: AsyncSession, quote_number: str) -> ReceiptOut:
    q = await get_quote_by_number(db, quote_number)

    if q.status != QuoteStatus.paid:
        raise AppException(
            409,
            "Receipts are only available for paid quotes",
            ErrorCode.QUOTE_NOT_PAID,
        )

    payment = await latest_payment(db, q.id)

    return ReceiptOut(
        quote=await _map_public(db, q),
        payment=(
            ReceiptPaymentOut(
                id=payment.id,
                amount=payment.amount,
                method=payment.method,
                paid_at=payment.paid_at,
            )
            if payment
            else None
        ),
        amount_paid=payment.amount if payment else q.total,
        paid_at=payment.paid_at if payment and payment.paid_at else q.paid_at,
    )


async def public_receipt_pdf(db: AsyncSession, quote_number: str) -> tuple[str, bytes]:
    q = await get_quote_by_number(db, quote_number)
    return f"recibo-{q.quote_number}.pdf", await render_receipt_pdf(db, q)


async def public_review_exists(db: AsyncSession, quote_number: str) -> bool:
    q = await get_quote_by_number(db, quote_number)
    return await _has_review(db, q)
