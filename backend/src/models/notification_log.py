"""Notification log model"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from lifecycle.contract import SoftDeleteMixin

from .base import Base, PortableJSONB, TimestampMixin


class NotificationLog(SoftDeleteMixin, TimestampMixin, Base):
    """Notification delivered to an account. Erased with the account."""
    __tablename__ = "notification_log"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = Column(Text, nullable=False)
    payload_json = Column(PortableJSONB, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)

    account = relationship("Account")
