from decimal import Decimal

from sqlalchemy import (
    Column, Integer, String, ForeignKey, Numeric, Enum, JSON, Index,
    CheckConstraint, Boolean, DateTime,
)
from sqlalchemy.orm import relationship

from fechou.core.db import Base
from fechou.models.base.mixins import TimestampMixin, SoftDeleteMixin
from fechou.models.enums.quote_status import QuoteStatus


class Quote(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "quotes"

    id = Column(Integer, primary_key=True)
    quote_number = Column(String(20), nullable=False, unique=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(String, nullable=True)
    observations = Column(String, nullable=True)
    payment_terms = Column(String, nullable=True)
    execution_deadline = Column(String(255), nullable=True)

    subtotal = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    discount = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    total = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))

    status = Column(Enum(QuoteStatus), nullable=False, default=QuoteStatus.draft, index=True)
    valid_until = Column(DateTime(timezone=True), nullable=True)
    viewed_at = Column(DateTime(timezone=True), nullable=True)
    sent_at = Column(DateTime(timezone=True), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejected_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(String, nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    send_by_whatsapp = Column(Boolean, nullable=False, default=True)
    send_by_email = Column(Boolean, nullable=False, default=False)
    photos = Column(JSON, nullable=True)

    user = relationship("User", lazy="selectin")
    client = relationship("Client", lazy="selectin")
    items = relationship(
        "QuoteItem",
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteItem.order",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_quote_user_status", "user_id", "status"),
        CheckConstraint("subtotal >= 0 AND discount >= 0 AND total >= 0", name="ck_quote_amounts_non_negative"),
        CheckConstraint("discount <= subtotal", name="ck_quote_discount_within_subtotal"),
    )

    def __repr__(self):
        return f"<Quote {self.quote_number} status={self.status}>"


class QuoteItem(Base):
    __tablename__ = "quote_items"

    id = Column(Integer, primary_key=True)
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="CASCADE"), nullable=False, index=True)
    description = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
    order = Column(Integer, nullable=False, default=0)

    quote = relationship("Quote", back_populates="items", lazy="selectin")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_quote_item_quantity_positive"),
        CheckConstraint("unit_price >= 0", name="ck_quote_item_price_non_negative"),
        CheckConstraint("total >= 0", name="ck_quote_item_total_non_negative"),
    )

    def __repr__(self):
        return f"<QuoteItem id={self.id} quote_id={self.quote_id} qty={self.quantity}>"
