"""SQLAlchemy models for the collaboration backend"""

from .base import Base, PortableJSONB, TimestampMixin
from .account import Account, RefreshToken, EmailVerification, UserHashtag, UserHashtagList
from .workspace import Workspace, WorkspaceMember, Team, TeamMember
from .board import Board, Post, Comment, PostAttach
from .kanban import (
    Kanban,
    KanbanList,
    KanbanTask,
    KanbanTaskComment,
    KanbanTaskMember,
    KanbanTaskAttach,
)
from .file_info import FileInfo
from .chat import ChatRoom, ChatMember, ChatMessage, ChatAttach
from .schedule import Schedule, Announcement
from .notification_log import NotificationLog
from .deleted_account_record import DeletedAccountRecord

__all__ = [
    "Base",
    "PortableJSONB",
    "TimestampMixin",
    "Account",
    "RefreshToken",
    "EmailVerification",
    "UserHashtag",
    "UserHashtagList",
    "Workspace",
    "WorkspaceMember",
    "Team",
    "TeamMember",
    "Board",
    "Post",
    "Comment",
    "PostAttach",
    "Kanban",
    "KanbanList",
    "KanbanTask",
    "KanbanTaskComment",
    "KanbanTaskMember",
    "KanbanTaskAttach",
    "ChatRoom",
    "ChatMember",
    "ChatMessage",
    "ChatAttach",
    "FileInfo",
    "Schedule",
    "Announcement",
    "NotificationLog",
    "DeletedAccountRecord",
]
