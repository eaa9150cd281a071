from sqlalchemy import Column, Integer, String, ForeignKey, Index, JSON, DateTime
from sqlalchemy.sql import func

from fechou.core.db import Base
from fechou.utils.datetime_utils import utcnow


class UserActivity(Base):
    """Immutable audit log. APPEND-ONLY. Never updated, never deleted."""

    __tablename__ = "user_activity"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    username_snapshot = Column(String(255), nullable=False, index=True)
    action = Column(String(50), nullable=False, index=True)
    category = Column(String(50), nullable=False)
    message = Column(String, nullable=False)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (Index("ix_user_activity_user_created", "user_id", "created_at"),)

    def __repr__(self):
        return f"<UserActivity id={self.id} user={self.username_snapshot} action={self.action}>"
