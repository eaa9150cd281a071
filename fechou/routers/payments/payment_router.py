from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fechou.core.db import get_db
from fechou.schemas.payments.payment_schemas import PaymentListData
from fechou.services.payments.payment_service import list_payments
from fechou.utils.get_user import get_current_user
from fechou.utils.response import success_response, APIResponse

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("", response_model=APIResponse[PaymentListData])
async def list_payments_api(
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    data = await list_payments(db, user, page=page, page_size=page_size)
    return success_response("Payments fetched", data)
