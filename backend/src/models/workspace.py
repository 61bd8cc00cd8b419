"""Workspace and team models (roots of the ownership graph)"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from lifecycle.contract import SoftDeleteMixin

from .base import Base, TimestampMixin


class Workspace(SoftDeleteMixin, TimestampMixin, Base):
    """Top-level collaboration space. Owns teams, members and chat rooms."""
    __tablename__ = "workspace"
    __soft_delete_cascade__ = ("teams", "members", "chat_rooms")

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    url = Column(String(255), nullable=True, unique=True)
    # Nullable: detached when the owner's account is erased
    owner_id = Column(Integer, ForeignKey("account.id", ondelete="SET NULL"), nullable=True)

    owner = relationship("Account")
    teams = relationship("Team", back_populates="workspace")
    members = relationship("WorkspaceMember", back_populates="workspace")
    chat_rooms = relationship("ChatRoom", back_populates="workspace")

    def __repr__(self):
        return f"<Workspace(id={self.id}, name='{self.name}')>"


class WorkspaceMember(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "workspace_member"

    id = Column(Integer, primary_key=True, autoincrement=True)
    workspace_id = Column(Integer, ForeignKey("workspace.id"), nullable=False, index=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )

    workspace = relationship("Workspace", back_populates="members")
    account = relationship("Account")


class Team(SoftDeleteMixin, TimestampMixin, Base):
    """Team inside a workspace. Owns boards, kanbans, schedules and members."""
    __tablename__ = "team"
    __soft_delete_cascade__ = (
        "boards",
        "kanbans",
        "schedules",
        "announcements",
        "members",
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    workspace_id = Column(Integer, ForeignKey("workspace.id"), nullable=False, index=True)

    workspace = relationship("Workspace", back_populates="teams")
    boards = relationship("Board", back_populates="team")
    kanbans = relationship("Kanban", back_populates="team")
    schedules = relationship("Schedule", back_populates="team")
    announcements = relationship("Announcement", back_populates="team")
    members = relationship("TeamMember", back_populates="team")

    def __repr__(self):
        return f"<Team(id={self.id}, name='{self.name}')>"


class TeamMember(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "team_member"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey("team.id"), nullable=False, index=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )

    team = relationship("Team", back_populates="members")
    account = relationship("Account")
