"""Kanban board models"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from lifecycle.contract import SoftDeleteMixin

from .base import Base, TimestampMixin


class Kanban(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "kanban"
    __soft_delete_cascade__ = ("lists",)

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey("team.id"), nullable=False, index=True)

    team = relationship("Team", back_populates="kanbans")
    lists = relationship("KanbanList", back_populates="kanban")


class KanbanList(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "kanban_list"
    __soft_delete_cascade__ = ("tasks",)

    id = Column(Integer, primary_key=True, autoincrement=True)
    kanban_id = Column(Integer, ForeignKey("kanban.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)

    kanban = relationship("Kanban", back_populates="lists")
    tasks = relationship("KanbanTask", back_populates="kanban_list")


class KanbanTask(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "kanban_task"
    __soft_delete_cascade__ = ("comments", "members", "attachments")

    id = Column(Integer, primary_key=True, autoincrement=True)
    kanban_list_id = Column(Integer, ForeignKey("kanban_list.id"), nullable=False, index=True)
    subject = Column(Text, nullable=False)
    content = Column(Text, nullable=True)
    deadline = Column(DateTime, nullable=True)

    kanban_list = relationship("KanbanList", back_populates="tasks")
    comments = relationship("KanbanTaskComment", back_populates="task")
    members = relationship("KanbanTaskMember", back_populates="task")
    attachments = relationship("KanbanTaskAttach", back_populates="task")


class KanbanTaskComment(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "kanban_task_comment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("kanban_task.id"), nullable=False, index=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="SET NULL"), nullable=True, index=True
    )
    content = Column(Text, nullable=False)

    task = relationship("KanbanTask", back_populates="comments")
    account = relationship("Account")


class KanbanTaskMember(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "kanban_task_member"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("kanban_task.id"), nullable=False, index=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )

    task = relationship("KanbanTask", back_populates="members")
    account = relationship("Account")


class KanbanTaskAttach(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "kanban_task_attach"
    __soft_delete_cascade__ = ("file_info",)

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(Integer, ForeignKey("kanban_task.id"), nullable=False, index=True)
    file_info_id = Column(Integer, ForeignKey("file_info.id"), nullable=False, unique=True)

    task = relationship("KanbanTask", back_populates="attachments")
    file_info = relationship("FileInfo")
