from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from fechou.core.db import Base
from fechou.models.enums.referral_enums import ReferralStatus, RewardType
from fechou.utils.datetime_utils import utcnow


class Referral(Base):
    __tablename__ = "referrals"

    id = Column(Integer, primary_key=True)
    referrer_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    referred_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    referral_code = Column(String(20), nullable=False)
    status = Column(Enum(ReferralStatus), nullable=False, default=ReferralStatus.pending)
    reward_type = Column(Enum(RewardType), nullable=True)
    reward_value = Column(Integer, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    rewarded_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    referred = relationship("User", foreign_keys=[referred_id], lazy="selectin")

    def __repr__(self):
        return f"<Referral id={self.id} referrer_id={self.referrer_id} status={self.status}>"
