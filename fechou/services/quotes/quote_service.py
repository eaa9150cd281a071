# fechou/services/quotes/quote_service.py

import secrets
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.config import FREE_VISIBLE_QUOTES
from fechou.core.exceptions import AppException
from fechou.constants.error_codes import ErrorCode
from fechou.constants.activity_codes import ActivityCode
from fechou.models.clients.client_models import Client
from fechou.models.quotes.quote_models import Quote, QuoteItem
from fechou.models.payments.payment_models import Payment
from fechou.models.enums.quote_status import QuoteStatus
from fechou.models.enums.payment_enums import PaymentStatus
from fechou.models.enums.notification_type import NotificationType
from fechou.schemas.quotes.quote_schemas import (
    QuoteCreate,
    QuoteUpdate,
    QuoteItemIn,
    QuoteOut,
    QuoteItemOut,
    QuoteListItem,
    QuoteListData,
    ConfirmPaymentRequest,
)
from fechou.services.clients.client_service import get_owned_client, map_client
from fechou.services.notifications.notification_service import notify
from fechou.services.plans.plan_service import consume_quote_quota, is_premium
from fechou.utils.activity_helpers import emit_activity
from fechou.utils.datetime_utils import utcnow
from fechou.utils.decimal_utils import to_decimal, line_total, format_brl
from fechou.utils.pdf_generators.quote_pdf import build_quote_pdf
from fechou.utils.pdf_generators.receipt_pdf import build_receipt_pdf
from fechou.utils.logger import get_logger

logger = get_logger(__name__)

QUOTE_NUMBER_PREFIX = "FH"
MAX_NUMBER_ATTEMPTS = 10
EDITABLE_STATUSES = {QuoteStatus.draft, QuoteStatus.pending}

ALLOWED_TRANSITIONS = {
    QuoteStatus.draft: {QuoteStatus.pending},
    QuoteStatus.pending: {QuoteStatus.approved, QuoteStatus.rejected, QuoteStatus.draft},
    QuoteStatus.approved: {QuoteStatus.paid},
    QuoteStatus.rejected: set(),
    QuoteStatus.paid: set(),
}

STATUS_NOTIFICATIONS = {
    QuoteStatus.approved: (NotificationType.QUOTE_APPROVED, "Quote approved", "Quote {number} was approved by {client}."),
    QuoteStatus.rejected: (NotificationType.QUOTE_REJECTED, "Quote rejected", "Quote {number} was rejected by {client}."),
    QuoteStatus.paid: (NotificationType.QUOTE_PAID, "Quote paid", "Payment of quote {number} ({total}) was confirmed."),
}


# =====================================================
# HELPERS
# =====================================================
async def _generate_quote_number(db: AsyncSession) -> str:
    for _ in range(MAX_NUMBER_ATTEMPTS):
        number = f"{QUOTE_NUMBER_PREFIX}{secrets.randbelow(10**8):08d}"
        taken = await db.scalar(select(Quote.id).where(Quote.quote_number == number))
        if not taken:
            return number

    raise AppException(
        409,
        "Could not allocate a quote number. Please retry.",
        ErrorCode.QUOTE_NUMBER_EXHAUSTED,
    )


def _build_items(items: list[QuoteItemIn]) -> tuple[list[QuoteItem], Decimal]:
    if not items:
        raise AppException(
            400,
            "Quote must contain at least one item",
            ErrorCode.QUOTE_EMPTY,
        )

    built = [
        QuoteItem(
            description=i.description.strip(),
            quantity=i.quantity,
            unit_price=to_decimal(i.unit_price),
            total=line_total(i.quantity, i.unit_price),
            order=position,
        )
        for position, i in enumerate(items)
    ]
    subtotal = to_decimal(sum((i.total for i in built), Decimal("0.00")))
    return built, subtotal


def _check_discount(discount: Decimal, subtotal: Decimal) -> Decimal:
    discount = to_decimal(discount)
    if discount < 0 or discount > subtotal:
        raise AppException(
            400,
            "Discount must be between 0 and the quote subtotal",
            ErrorCode.QUOTE_INVALID_DISCOUNT,
            details={"discount": str(discount), "subtotal": str(subtotal)},
        )
    return discount


async def load_quote(db: AsyncSession, *conditions) -> Quote:
    result = await db.execute(
        select(Quote)
        .where(Quote.is_deleted.is_(False), *conditions)
        .execution_options(populate_existing=True)
    )
    q = result.scalar_one_or_none()
    if not q:
        raise AppException(404, "Quote not found", ErrorCode.QUOTE_NOT_FOUND)
    return q


async def get_owned_quote(db: AsyncSession, quote_id: int, user) -> Quote:
    return await load_quote(db, Quote.id == quote_id, Quote.user_id == user.id)


async def get_quote_by_number(db: AsyncSession, quote_number: str) -> Quote:
    return await load_quote(db, Quote.quote_number == quote_number.upper())


def quote_fields(q: Quote) -> dict:
    return dict(
        id=q.id,
        quote_number=q.quote_number,
        client_id=q.client_id,
        title=q.title,
        description=q.description,
        observations=q.observations,
        payment_terms=q.payment_terms,
        execution_deadline=q.execution_deadline,
        subtotal=q.subtotal,
        discount=q.discount,
        total=q.total,
        status=q.status,
        valid_until=q.valid_until,
        viewed_at=q.viewed_at,
        sent_at=q.sent_at,
        approved_at=q.approved_at,
        rejected_at=q.rejected_at,
        rejection_reason=q.rejection_reason,
        paid_at=q.paid_at,
        send_by_whatsapp=q.send_by_whatsapp,
        send_by_email=q.send_by_email,
        photos=q.photos or [],
        created_at=q.created_at,
        updated_at=q.updated_at,
        client=map_client(q.client) if q.client else None,
        items=[
            QuoteItemOut(
                id=i.id,
                description=i.description,
                quantity=i.quantity,
                unit_price=i.unit_price,
                total=i.total,
                order=i.order,
            )
            for i in q.items
        ],
    )


def _map_quote(q: Quote) -> QuoteOut:
    return QuoteOut(**quote_fields(q))


# =====================================================
# CREATE
# =====================================================
async def create_quote(
    db: AsyncSession,
    payload: QuoteCreate,
    user,
) -> QuoteOut:
    await get_owned_client(db, payload.client_id, user)

    items, subtotal = _build_items(payload.items)
    discount = _check_discount(payload.discount, subtotal)

    await consume_quote_quota(db, user)

    now = utcnow()
    q = Quote(
        quote_number=await _generate_quote_number(db),
        user_id=user.id,
        client_id=payload.client_id,
        title=payload.title.strip(),
        description=payload.description,
        observations=payload.observations,
        payment_terms=payload.payment_terms,
        execution_deadline=payload.execution_deadline,
        subtotal=subtotal,
        discount=discount,
        total=to_decimal(subtotal - discount),
        status=QuoteStatus.pending if payload.send_now else QuoteStatus.draft,
        sent_at=now if payload.send_now else None,
        valid_until=payload.valid_until,
        send_by_whatsapp=payload.send_by_whatsapp,
        send_by_email=payload.send_by_email,
        photos=payload.photos or [],
        items=items,
    )
    db.add(q)
    await db.flush()

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.CREATE_QUOTE,
        actor_email=user.email,
        target_name=q.quote_number,
        total=format_brl(q.total),
        details={"quote_id": q.id, "client_id": q.client_id},
    )

    await db.commit()

    logger.info(
        "Quote created",
        extra={"quote_id": q.id, "quote_number": q.quote_number, "user_id": user.id},
    )

    return _map_quote(await load_quote(db, Quote.id == q.id))


# =====================================================
# LIST / GET
# =====================================================
async def list_quotes(
    db: AsyncSession,
    user,
    *,
    status: Optional[QuoteStatus] = None,
    client_id: Optional[int] = None,
    page: int = 1,
    page_size: int = 50,
) -> QuoteListData:
    items_count = (
        select(QuoteItem.quote_id, func.count(QuoteItem.id).label("items_count"))
        .group_by(QuoteItem.quote_id)
        .subquery()
    )

    base = (
        select(
            Quote.id,
            Quote.quote_number,
            Quote.title,
            Quote.client_id,
            Client.name.label("client_name"),
            Quote.status,
            func.coalesce(items_count.c.items_count, 0).label("items_count"),
            Quote.total,
            Quote.valid_until,
            Quote.created_at,
        )
        .join(Client, Client.id == Quote.client_id)
        .outerjoin(items_count, items_count.c.quote_id == Quote.id)
        .where(
            Quote.user_id == user.id,
            Quote.is_deleted.is_(False),
        )
    )

    if status:
        base = base.where(Quote.status == status)
    if client_id:
        base = base.where(Quote.client_id == client_id)

    total = await db.scalar(
        select(func.count()).select_from(base.subquery())
    )

    visible_limit = None
    offset = (page - 1) * page_size
    limit = page_size

    if not is_premium(user):
        # free plan only sees its most recent quotes
        visible_limit = FREE_VISIBLE_QUOTES
        limit = max(min(page_size, visible_limit - offset), 0)

    rows = []
    if limit > 0:
        result = await db.execute(
            base.order_by(desc(Quote.created_at), desc(Quote.id))
            .offset(offset)
            .limit(limit)
        )
        rows = result.all()

    return QuoteListData(
        total=total or 0,
        visible_limit=visible_limit,
        items=[
            QuoteListItem(
                id=r.id,
                quote_number=r.quote_number,
                title=r.title,
                client_id=r.client_id,
                client_name=r.client_name,
                status=r.status,
                items_count=r.items_count,
                total=r.total,
                valid_until=r.valid_until,
                created_at=r.created_at,
            )
            for r in rows
        ],
    )


async def get_quote(db: AsyncSession, quote_id: int, user) -> QuoteOut:
    return _map_quote(await get_owned_quote(db, quote_id, user))


# =====================================================
# UPDATE
# =====================================================
async def update_quote(
    db: AsyncSession,
    quote_id: int,
    payload: QuoteUpdate,
    user,
) -> QuoteOut:
    q = await get_owned_quote(db, quote_id, user)

    if q.status not in EDITABLE_STATUSES:
        raise AppException(
            409,
            f"Quotes in status '{q.status.value}' can no longer be edited",
            ErrorCode.QUOTE_INVALID_STATE,
        )

    values = payload.model_dump(exclude_unset=True, exclude={"items", "discount"})
    changes: list[str] = []

    if values.get("client_id") and values["client_id"] != q.client_id:
        await get_owned_client(db, values["client_id"], user)

    for field, value in values.items():
        if field in ("client_id", "title") and value is None:
            continue
        if getattr(q, field) != value:
            setattr(q, field, value)
            changes.append(field)

    subtotal = q.subtotal
    if payload.items is not None:
        items, subtotal = _build_items(payload.items)
        q.items.clear()
        await db.flush()
        q.items.extend(items)
        q.subtotal = subtotal
        changes.append("items")

    if payload.discount is not None or payload.items is not None:
        discount = _check_discount(
            payload.discount if payload.discount is not None else q.discount,
            subtotal,
        )
        if discount != q.discount:
            changes.append("discount")
        q.discount = discount
        q.total = to_decimal(subtotal - discount)

    if not changes:
        return _map_quote(q)

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.UPDATE_QUOTE,
        actor_email=user.email,
        target_name=q.quote_number,
        changes=", ".join(changes),
    )

    await db.commit()

    logger.info("Quote updated", extra={"quote_id": q.id, "fields": changes})
    return _map_quote(await load_quote(db, Quote.id == q.id))


# =====================================================
# DELETE (SOFT)
# =====================================================
async def delete_quote(db: AsyncSession, quote_id: int, user) -> None:
    q = await get_owned_quote(db, quote_id, user)
    q.is_deleted = True

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.DELETE_QUOTE,
        actor_email=user.email,
        target_name=q.quote_number,
    )

    await db.commit()
    logger.info("Quote deleted", extra={"quote_id": quote_id, "user_id": user.id})


# =====================================================
# STATUS LIFECYCLE
# =====================================================
async def transition_quote(
    db: AsyncSession,
    q: Quote,
    new_status: QuoteStatus,
    *,
    actor_email: str,
    rejection_reason: Optional[str] = None,
) -> Quote:
    """Move ``q`` to ``new_status`` if the lifecycle allows it.

    The UPDATE is conditioned on the status we read, so a concurrent
    request that already moved the quote makes this one fail with 409.
    Commits and returns the reloaded quote.
    """
    quote_id = q.id
    current = q.status
    if new_status not in ALLOWED_TRANSITIONS[current]:
        raise AppException(
            409,
            f"Cannot change quote from '{current.value}' to '{new_status.value}'",
            ErrorCode.QUOTE_INVALID_TRANSITION,
            details={
                "current": current.value,
                "allowed": sorted(s.value for s in ALLOWED_TRANSITIONS[current]),
            },
        )

    now = utcnow()
    values = {"status": new_status, "updated_at": now}

    if new_status == QuoteStatus.pending and current == QuoteStatus.draft:
        values["sent_at"] = now
    elif new_status == QuoteStatus.approved:
        values["approved_at"] = now
    elif new_status == QuoteStatus.rejected:
        values["rejected_at"] = now
        values["rejection_reason"] = rejection_reason
    elif new_status == QuoteStatus.paid:
        values["paid_at"] = now

    result = await db.execute(
        update(Quote)
        .where(
            Quote.id == quote_id,
            Quote.status == current,
            Quote.is_deleted.is_(False),
        )
        .values(**values)
        .returning(Quote.id)
        .execution_options(synchronize_session=False)
    )

    if result.scalar_one_or_none() is None:
        await db.rollback()
        logger.warning(
            "Concurrent quote status change",
            extra={"quote_id": quote_id, "from": current.value, "to": new_status.value},
        )
        raise AppException(
            409,
            "Quote status was changed by another request",
            ErrorCode.QUOTE_INVALID_STATE,
        )

    if new_status in STATUS_NOTIFICATIONS:
        ntype, title, template = STATUS_NOTIFICATIONS[new_status]
        notify(
            db,
            user_id=q.user_id,
            type=ntype,
            title=title,
            message=template.format(
                number=q.quote_number,
                client=q.client.name if q.client else "client",
                total=format_brl(q.total),
            ),
            data={"quote_id": q.id, "quote_number": q.quote_number},
        )

    await emit_activity(
        db=db,
        user_id=q.user_id,
        username=q.user.email,
        code=ActivityCode.CHANGE_QUOTE_STATUS,
        actor_email=actor_email,
        target_name=q.quote_number,
        old_status=current.value,
        new_status=new_status.value,
        details={"rejection_reason": rejection_reason} if rejection_reason else None,
    )

    await db.commit()

    logger.info(
        "Quote status changed",
        extra={"quote_id": q.id, "from": current.value, "to": new_status.value},
    )
    return await load_quote(db, Quote.id == quote_id)


async def send_quote(db: AsyncSession, quote_id: int, user) -> QuoteOut:
    q = await get_owned_quote(db, quote_id, user)

    if q.status != QuoteStatus.draft:
        raise AppException(
            409,
            "Only draft quotes can be sent",
            ErrorCode.QUOTE_INVALID_TRANSITION,
        )

    q = await transition_quote(db, q, QuoteStatus.pending, actor_email=user.email)
    return _map_quote(q)


async def update_quote_status(
    db: AsyncSession,
    quote_id: int,
    new_status: QuoteStatus,
    user,
    rejection_reason: Optional[str] = None,
) -> QuoteOut:
    q = await get_owned_quote(db, quote_id, user)
    q = await transition_quote(
        db,
        q,
        new_status,
        actor_email=user.email,
        rejection_reason=rejection_reason,
    )
    return _map_quote(q)


# =====================================================
# PAYMENT
# =====================================================
async def confirm_payment(
    db: AsyncSession,
    quote_id: int,
    payload: ConfirmPaymentRequest,
    user,
) -> QuoteOut:
    q = await get_owned_quote(db, quote_id, user)

    if q.status != QuoteStatus.approved:
        raise AppException(
            409,
            "Only approved quotes can be marked as paid",
            ErrorCode.QUOTE_INVALID_TRANSITION,
        )

    amount = to_decimal(payload.amount) if payload.amount is not None else q.total

    db.add(
        Payment(
            user_id=user.id,
            quote_id=q.id,
            amount=amount,
            method=payload.method,
            status=PaymentStatus.PAID,
            paid_at=utcnow(),
        )
    )

    await emit_activity(
        db=db,
        user_id=user.id,
        username=user.email,
        code=ActivityCode.CONFIRM_PAYMENT,
        actor_email=user.email,
        target_name=q.quote_number,
        method=payload.method.value,
        amount=format_brl(amount),
    )

    q = await transition_quote(db, q, QuoteStatus.paid, actor_email=user.email)
    return _map_quote(q)


async def latest_payment(db: AsyncSession, quote_id: int) -> Payment | None:
    result = await db.execute(
        select(Payment)
        .where(
            Payment.quote_id == quote_id,
            Payment.status == PaymentStatus.PAID,
        )
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .limit(1)
    )
    return result.scalars().first()


# =====================================================
# PDF
# =====================================================
def render_quote_pdf(q: Quote) -> bytes:
    return build_quote_pdf(q, watermark=not is_premium(q.user))


async def render_receipt_pdf(db: AsyncSession, q: Quote) -> bytes:
    if q.status != QuoteStatus.paid:
        raise AppException(
            409,
            "Receipts are only available for paid quotes",
            ErrorCode.QUOTE_NOT_PAID,
        )
    payment = await latest_payment(db, q.id)
    return build_receipt_pdf(q, payment, watermark=not is_premium(q.user))


async def quote_pdf(db: AsyncSession, quote_id: int, user) -> tuple[str, bytes]:
    q = await get_owned_quote(db, quote_id, user)
    return f"pedido-{q.quote_number}.pdf", render_quote_pdf(q)


async def receipt_pdf(db: AsyncSession, quote_id: int, user) -> tuple[str, bytes]:
    q = await get_owned_quote(db, quote_id, user)
    return f"recibo-{q.quote_number}.pdf", await render_receipt_pdf(db, q)
