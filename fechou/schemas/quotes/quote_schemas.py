from pydantic import BaseModel, Field
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from fechou.models.enums.quote_status import QuoteStatus
from fechou.models.enums.payment_enums import PaymentMethod
from fechou.schemas.clients.client_schemas import ClientOut
from fechou.schemas.users.user_schemas import PublicProfileOut

# =====================================================
# ITEM PAYLOADS
# =====================================================

class QuoteItemIn(BaseModel):
    description: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class QuoteItemOut(BaseModel):
    id: int
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal
    order: int


# =====================================================
# QUOTE CREATE / UPDATE
# =====================================================

class QuoteCreate(BaseModel):
    client_id: int
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    observations: Optional[str] = None
    payment_terms: Optional[str] = None
    execution_deadline: Optional[str] = Field(None, max_length=255)
    items: List[QuoteItemIn]
    discount: Decimal = Field(Decimal("0.00"), max_digits=10, decimal_places=2)
    valid_until: Optional[datetime] = None
    send_by_whatsapp: bool = True
    send_by_email: bool = False
    photos: Optional[List[str]] = None
    send_now: bool = False


class QuoteUpdate(BaseModel):
    client_id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    observations: Optional[str] = None
    payment_terms: Optional[str] = None
    execution_deadline: Optional[str] = Field(None, max_length=255)
    items: Optional[List[QuoteItemIn]] = None
    discount: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2)
    valid_until: Optional[datetime] = None
    send_by_whatsapp: Optional[bool] = None
    send_by_email: Optional[bool] = None
    photos: Optional[List[str]] = None


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus
    rejection_reason: Optional[str] = None


class QuoteRejectRequest(BaseModel):
    reason: Optional[str] = None


class ConfirmPaymentRequest(BaseModel):
    method: PaymentMethod = PaymentMethod.PIX
    amount: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)


# =====================================================
# QUOTE RESPONSES
# =====================================================

class QuoteOut(BaseModel):
    id: int
    quote_number: str
    client_id: int
    title: str
    description: Optional[str]
    observations: Optional[str]
    payment_terms: Optional[str]
    execution_deadline: Optional[str]

    subtotal: Decimal
    discount: Decimal
    total: Decimal

    status: QuoteStatus
    valid_until: Optional[datetime]
    viewed_at: Optional[datetime]
    sent_at: Optional[datetime]
    approved_at: Optional[datetime]
    rejected_at: Optional[datetime]
    rejection_reason: Optional[str]
    paid_at: Optional[datetime]

    send_by_whatsapp: bool
    send_by_email: bool
    photos: List[str] = []

    created_at: datetime
    updated_at: Optional[datetime]

    client: Optional[ClientOut] = None
    items: List[QuoteItemOut]


class QuoteListItem(BaseModel):
    id: int
    quote_number: str
    title: str
    client_id: int
    client_name: str
    status: QuoteStatus
    items_count: int
    total: Decimal
    valid_until: Optional[datetime]
    created_at: datetime


class QuoteListData(BaseModel):
    total: int
    visible_limit: Optional[int] = None
    items: List[QuoteListItem]


class PublicQuoteOut(QuoteOut):
    provider: PublicProfileOut
    has_review: bool = False


class ReceiptPaymentOut(BaseModel):
    id: int
    amount: Decimal
    method: PaymentMethod
    paid_at: Optional[datetime]


class ReceiptOut(BaseModel):
    quote: PublicQuoteOut
    payment: Optional[ReceiptPaymentOut] = None
    amount_paid: Decimal
    paid_at: Optional[datetime]
