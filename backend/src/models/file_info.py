"""Stored file metadata shared by post, task and chat attachments"""

from sqlalchemy import BigInteger, Column, Integer, String, Text

from lifecycle.contract import SoftDeleteMixin

from .base import Base, TimestampMixin


class FileInfo(SoftDeleteMixin, TimestampMixin, Base):
    """One uploaded file. Each attachment row owns exactly one."""
    __tablename__ = "file_info"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name_origin = Column(String(255), nullable=False)
    name_hashed = Column(Text, nullable=False)  # storage key
    size = Column(BigInteger, nullable=True)

    def __repr__(self):
        return f"<FileInfo(id={self.id}, name_origin={self.name_origin})>"
