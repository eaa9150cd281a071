from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from fechou.core.db import Base
from fechou.models.base.mixins import TimestampMixin
from fechou.models.enums.user_plan import UserPlan, SubscriptionStatus
from fechou.utils.datetime_utils import utcnow


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=True)
    firebase_uid = Column(String(128), unique=True, nullable=True, index=True)

    # ---- profile ----
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    profile_image_url = Column(String, nullable=True)
    cpf_cnpj = Column(String(20), unique=True, nullable=True)
    profession = Column(String(100), nullable=True)
    business_name = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(String, nullable=True)
    cep = Column(String(10), nullable=True)
    numero = Column(String(20), nullable=True)
    complemento = Column(String(100), nullable=True)
    cidade = Column(String(100), nullable=True)
    estado = Column(String(2), nullable=True)
    logo_url = Column(String, nullable=True)
    pix_key = Column(String(255), nullable=True)

    # ---- plan ----
    plan = Column(Enum(UserPlan), nullable=False, default=UserPlan.FREE, index=True)
    plan_expires_at = Column(DateTime(timezone=True), nullable=True)
    quotes_limit = Column(Integer, nullable=False, default=5)
    quotes_used_this_month = Column(Integer, nullable=False, default=0)
    last_quote_reset = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    bonus_quotes = Column(Integer, nullable=False, default=0)
    payment_status = Column(Enum(SubscriptionStatus), nullable=False, default=SubscriptionStatus.ativo)
    payment_method = Column(String(50), nullable=True)

    # ---- referrals ----
    referral_count = Column(Integer, nullable=False, default=0)
    referral_code = Column(String(20), unique=True, nullable=True, index=True)
    referred_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # ---- preferences / branding ----
    whatsapp_notifications = Column(Boolean, nullable=False, default=True)
    email_notifications = Column(Boolean, nullable=False, default=True)
    primary_color = Column(String(7), nullable=False, default="#3B82F6")
    secondary_color = Column(String(7), nullable=False, default="#10B981")

    # ---- access ----
    is_admin = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    token_version = Column(Integer, nullable=False, default=0)
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("ix_users_plan_expiry", "plan", "plan_expires_at"),)

    @property
    def display_name(self) -> str:
        full = " ".join(p for p in (self.first_name, self.last_name) if p)
        return full or self.email

    def __repr__(self):
        return f"<User id={self.id} email={self.email} plan={self.plan}>"


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(255), unique=True, nullable=False, index=True)
    revoked = Column(Boolean, default=False, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    user = relationship("User", lazy="selectin")

    def __repr__(self):
        return f"<RefreshToken id={self.id} user_id={self.user_id} revoked={self.revoked}>"
