from sqlalchemy import Column, Integer, String, ForeignKey, Boolean, DateTime, Enum, JSON, Index
from sqlalchemy.sql import func

from fechou.core.db import Base
from fechou.models.enums.notification_type import NotificationType
from fechou.utils.datetime_utils import utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(String, nullable=False)
    type = Column(Enum(NotificationType), nullable=False)
    data = Column(JSON, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (Index("ix_notification_user_read", "user_id", "is_read"),)

    def __repr__(self):
        return f"<Notification id={self.id} user_id={self.user_id} type={self.type}>"
