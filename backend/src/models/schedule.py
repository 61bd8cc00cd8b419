"""Team schedule and announcement models"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from lifecycle.contract import SoftDeleteMixin

from .base import Base, TimestampMixin


class Schedule(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "schedule"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey("team.id"), nullable=False, index=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="MEETING")
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    description = Column(Text, nullable=True)

    team = relationship("Team", back_populates="schedules")
    account = relationship("Account")


class Announcement(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "announcement"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey("team.id"), nullable=False, index=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="SET NULL"), nullable=True, index=True
    )
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)

    team = relationship("Team", back_populates="announcements")
    account = relationship("Account")
