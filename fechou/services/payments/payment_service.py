# fechou/services/payments/payment_service.py

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.models.payments.payment_models import Payment
from fechou.schemas.payments.payment_schemas import PaymentOut, PaymentListData


def _map_payment(p: Payment) -> PaymentOut:
    return PaymentOut(
        id=p.id,
        quote_id=p.quote_id,
        quote_number=p.quote.quote_number if p.quote else None,
        amount=p.amount,
        method=p.method,
        status=p.status,
        gateway_id=p.gateway_id,
        paid_at=p.paid_at,
        created_at=p.created_at,
    )


async def list_payments(
    db: AsyncSession,
    user,
    *,
    page: int = 1,
    page_size: int = 50,
) -> PaymentListData:
    base = select(Payment).where(Payment.user_id == user.id)

    total = await db.scalar(
        select(func.count()).select_from(base.subquery())
    )

    result = await db.execute(
        base.order_by(Payment.created_at.desc(), Payment.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return PaymentListData(
        total=total or 0,
        items=[_map_payment(p) for p in result.scalars().all()],
    )
