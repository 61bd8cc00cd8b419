"""Board, post, comment and attachment models"""

from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from lifecycle.contract import SoftDeleteMixin

from .base import Base, TimestampMixin


class Board(SoftDeleteMixin, TimestampMixin, Base):
    """Team board. Deleting a board deletes its posts and their children."""
    __tablename__ = "board"
    __soft_delete_cascade__ = ("posts",)

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_id = Column(Integer, ForeignKey("team.id"), nullable=False, index=True)

    team = relationship("Team", back_populates="boards")
    posts = relationship("Post", back_populates="board")

    def __repr__(self):
        return f"<Board(id={self.id}, team_id={self.team_id})>"


class Post(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "post"
    __soft_delete_cascade__ = ("comments", "attachments")

    id = Column(Integer, primary_key=True, autoincrement=True)
    board_id = Column(Integer, ForeignKey("board.id"), nullable=False, index=True)
    # Author; NULL once the author's account has been erased
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="SET NULL"), nullable=True, index=True
    )
    post_no = Column(Integer, nullable=True)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=True)

    board = relationship("Board", back_populates="posts")
    account = relationship("Account")
    comments = relationship("Comment", back_populates="post")
    attachments = relationship("PostAttach", back_populates="post")

    def __repr__(self):
        return f"<Post(id={self.id}, board_id={self.board_id})>"


class Comment(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "comment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("post.id"), nullable=False, index=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="SET NULL"), nullable=True, index=True
    )
    content = Column(Text, nullable=False)

    post = relationship("Post", back_populates="comments")
    account = relationship("Account")


class PostAttach(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "post_attach"
    __soft_delete_cascade__ = ("file_info",)

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(Integer, ForeignKey("post.id"), nullable=False, index=True)
    file_info_id = Column(Integer, ForeignKey("file_info.id"), nullable=False, unique=True)

    post = relationship("Post", back_populates="attachments")
    file_info = relationship("FileInfo")
