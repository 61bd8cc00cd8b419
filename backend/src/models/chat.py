"""Chat room, membership, message and attachment models"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from lifecycle.contract import SoftDeleteMixin

from .base import Base, TimestampMixin


class ChatRoom(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "chat_room"
    __soft_delete_cascade__ = ("members", "messages")

    id = Column(Integer, primary_key=True, autoincrement=True)
    workspace_id = Column(Integer, ForeignKey("workspace.id"), nullable=False, index=True)
    name = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="GROUP")

    workspace = relationship("Workspace", back_populates="chat_rooms")
    members = relationship("ChatMember", back_populates="chat_room")
    messages = relationship("ChatMessage", back_populates="chat_room")


class ChatMember(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "chat_member"

    id = Column(Integer, primary_key=True, autoincrement=True)
    chat_room_id = Column(Integer, ForeignKey("chat_room.id"), nullable=False, index=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )

    chat_room = relationship("ChatRoom", back_populates="members")
    account = relationship("Account")


class ChatMessage(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "chat_message"
    __soft_delete_cascade__ = ("attachments",)

    id = Column(Integer, primary_key=True, autoincrement=True)
    chat_room_id = Column(Integer, ForeignKey("chat_room.id"), nullable=False, index=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="SET NULL"), nullable=True, index=True
    )
    content = Column(Text, nullable=False)

    chat_room = relationship("ChatRoom", back_populates="messages")
    account = relationship("Account")
    attachments = relationship("ChatAttach", back_populates="chat_message")


class ChatAttach(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "chat_attach"
    __soft_delete_cascade__ = ("file_info",)

    id = Column(Integer, primary_key=True, autoincrement=True)
    chat_message_id = Column(Integer, ForeignKey("chat_message.id"), nullable=False, index=True)
    file_info_id = Column(Integer, ForeignKey("file_info.id"), nullable=False, unique=True)

    chat_message = relationship("ChatMessage", back_populates="attachments")
    file_info = relationship("FileInfo")
