"""Account and account-scoped authentication/profile models"""

import re
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship, validates

from lifecycle.clock import utcnow
from lifecycle.contract import SoftDeleteMixin
from lifecycle.exceptions import InvalidTransitionError

from .base import Base, TimestampMixin


class Account(SoftDeleteMixin, TimestampMixin, Base):
    """User account with a withdrawal grace period.

    ``deleted_at`` marks withdrawal and ``permanent_deletion_date`` the moment
    the account becomes eligible for erasure. Both are written only by
    accounts.service.AccountWithdrawalService; the generic soft-delete
    operations are refused so the two columns never drift apart.

    Account-owned content is not part of the cascade graph: withdrawal is
    reversible, and the erasure job decides per relation whether rows are
    erased or anonymized (see retention.erasure).
    """
    __tablename__ = "account"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    role = Column(String(20), nullable=False, default="USER")
    mbti = Column(String(4), nullable=True)
    introduction = Column(Text, nullable=True)
    profile_image = Column(Text, nullable=True)
    permanent_deletion_date = Column(DateTime, nullable=True, index=True)

    refresh_tokens = relationship(
        "RefreshToken", back_populates="account", passive_deletes=True
    )
    hashtag_links = relationship(
        "UserHashtagList", back_populates="account", passive_deletes=True
    )

    __table_args__ = (
        CheckConstraint(
            "role IN ('ADMIN', 'USER')",
            name='ck_account_role'
        ),
        CheckConstraint(
            "(deleted_at IS NULL AND permanent_deletion_date IS NULL) OR "
            "(deleted_at IS NOT NULL AND permanent_deletion_date IS NOT NULL)",
            name='ck_account_withdrawal_dates'
        ),
    )

    @validates('email')
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise ValueError("Invalid email format")
        return value.lower()

    def mark_deleted(self, now: Optional[datetime] = None) -> bool:
        """Refuse the generic soft delete; use AccountWithdrawalService.withdraw().

        Raises:
            InvalidTransitionError: Always
        """
        raise InvalidTransitionError(
            "Accounts are withdrawn through AccountWithdrawalService.withdraw()"
        )

    def restore(self) -> bool:
        """Refuse the generic restore; use AccountWithdrawalService.restore_account().

        Raises:
            InvalidTransitionError: Always
        """
        raise InvalidTransitionError(
            "Accounts are restored through AccountWithdrawalService.restore_account()"
        )

    def __repr__(self):
        return f"<Account(id={self.id}, deleted_at={self.deleted_at})>"


class RefreshToken(Base):
    """Issued refresh token. Revoked on withdrawal, erased with the account."""
    __tablename__ = "refresh_token"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )
    token = Column(String(512), nullable=False, unique=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    invalidated = Column(Boolean, nullable=False, default=False)
    invalidated_at = Column(DateTime, nullable=True)

    account = relationship("Account", back_populates="refresh_tokens")


class EmailVerification(Base):
    """Pending email verification code, keyed by email address."""
    __tablename__ = "email_verification"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, index=True)
    verification_code = Column(String(32), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class UserHashtag(Base):
    """Hashtag used for team matching"""
    __tablename__ = "user_hashtag"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)


class UserHashtagList(Base):
    """Link between an account and one of its hashtags"""
    __tablename__ = "user_hashtag_list"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(
        Integer, ForeignKey("account.id", ondelete="CASCADE"), nullable=False, index=True
    )
    hashtag_id = Column(
        Integer, ForeignKey("user_hashtag.id", ondelete="CASCADE"), nullable=False
    )

    account = relationship("Account", back_populates="hashtag_links")
    hashtag = relationship("UserHashtag")

    __table_args__ = (
        UniqueConstraint('account_id', 'hashtag_id', name='uq_user_hashtag_list'),
    )
