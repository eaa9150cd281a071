from sqlalchemy import Column, Boolean, DateTime
from sqlalchemy.sql import func

from fechou.utils.datetime_utils import utcnow


class TimestampMixin:
    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        onupdate=utcnow,
    )


class SoftDeleteMixin:
    is_deleted = Column(Boolean, default=False, nullable=False)
