from sqlalchemy import Column, Integer, String, ForeignKey, Boolean, DateTime, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from fechou.core.db import Base
from fechou.models.base.mixins import TimestampMixin


class Review(Base, TimestampMixin):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id", ondelete="SET NULL"), nullable=True, index=True)

    rating = Column(Integer, nullable=False)
    comment = Column(String, nullable=True)
    is_public = Column(Boolean, nullable=False, default=True)
    response = Column(String, nullable=True)
    responded_at = Column(DateTime(timezone=True), nullable=True)

    client = relationship("Client", lazy="selectin")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_review_rating_range"),
        UniqueConstraint("quote_id", "client_id", name="uq_review_quote_client"),
    )

    def __repr__(self):
        return f"<Review id={self.id} quote_id={self.quote_id} rating={self.rating}>"
