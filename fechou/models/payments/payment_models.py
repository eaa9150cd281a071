from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Enum, DateTime, CheckConstraint
from sqlalchemy.orm import relationship

from fechou.core.db import Base
from fechou.models.base.mixins import TimestampMixin
from fechou.models.enums.payment_enums import PaymentMethod, PaymentStatus


class Payment(Base, TimestampMixin):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="SET NULL"), nullable=True, index=True)

    amount = Column(Numeric(10, 2), nullable=False)
    method = Column(Enum(PaymentMethod), nullable=False)
    status = Column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.PENDING, index=True)
    gateway_id = Column(String(255), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    quote = relationship("Quote", lazy="selectin")

    __table_args__ = (CheckConstraint("amount > 0", name="ck_payment_amount_positive"),)

    def __repr__(self):
        return f"<Payment id={self.id} quote_id={self.quote_id} amount={self.amount} status={self.status}>"
