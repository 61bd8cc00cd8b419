"""DeletedAccountRecord model for erasure auditing"""

from sqlalchemy import Column, DateTime, Integer, String

from lifecycle.clock import utcnow

from .base import Base


class DeletedAccountRecord(Base):
    """Tombstone written in the same transaction that erases an account.

    Holds no personal data: the email is stored only as a SHA-256 hash so an
    operator can confirm that a given address was erased.
    """
    __tablename__ = "deleted_account_record"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(Integer, nullable=False, index=True)  # former account.id
    email_hash = Column(String(64), nullable=False, index=True)
    withdrawn_at = Column(DateTime, nullable=False)
    permanent_deletion_date = Column(DateTime, nullable=False)
    erased_at = Column(DateTime, nullable=False, default=utcnow)
    trigger = Column(String(20), nullable=False)  # scheduled | manual

    def __repr__(self):
        return f"<DeletedAccountRecord(account_id={self.account_id}, email_hash={self.email_hash[:8]}...)>"
