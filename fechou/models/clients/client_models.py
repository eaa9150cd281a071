from sqlalchemy import Column, Integer, String, ForeignKey, Index
from fechou.core.db import Base
from fechou.models.base.mixins import TimestampMixin, SoftDeleteMixin


class Client(Base, TimestampMixin, SoftDeleteMixin):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=False)
    cpf = Column(String(20), nullable=True)
    address = Column(String, nullable=True)
    number = Column(String(20), nullable=True)
    complement = Column(String(100), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(2), nullable=True)
    zip_code = Column(String(10), nullable=True)
    notes = Column(String, nullable=True)

    __table_args__ = (Index("ix_client_user_deleted", "user_id", "is_deleted"),)

    def __repr__(self):
        return f"<Client id={self.id} user_id={self.user_id} name={self.name}>"
