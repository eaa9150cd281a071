from pydantic import BaseModel
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

from fechou.models.enums.payment_enums import PaymentMethod, PaymentStatus


class PaymentOut(BaseModel):
    id: int
    quote_id: Optional[int]
    quote_number: Optional[str]
    amount: Decimal
    method: PaymentMethod
    status: PaymentStatus
    gateway_id: Optional[str]
    paid_at: Optional[datetime]
    created_at: datetime


class PaymentListData(BaseModel):
    total: int
    items: List[PaymentOut]
