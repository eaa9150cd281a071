from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, CheckConstraint
from fechou.core.db import Base
from fechou.models.base.mixins import TimestampMixin


class SavedItem(Base, TimestampMixin):
    __tablename__ = "saved_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)

    __table_args__ = (CheckConstraint("unit_price >= 0", name="ck_saved_item_price_non_negative"),)

    def __repr__(self):
        return f"<SavedItem id={self.id} name={self.name}>"
