"""Account repository for lifecycle queries.

All queries over withdrawn accounts opt out of the active-row filter with the
``include_deleted`` execution option. Lookups of active accounts go through
plain ORM selects, which the active-row filter already scopes.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from lifecycle.query_filter import INCLUDE_DELETED
from models.account import Account


class AccountRepository:
    """Repository for account database operations."""

    def __init__(self, db: Session):
        """Initialize repository with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def _including_withdrawn(self, stmt):
        return stmt.execution_options(**{INCLUDE_DELETED: True})

    def get_including_withdrawn(self, account_id: int) -> Optional[Account]:
        """Get an account regardless of withdrawal state."""
        return self.db.scalars(
            self._including_withdrawn(select(Account).where(Account.id == account_id))
        ).first()

    def find_withdrawn_by_email(self, email: str) -> Optional[Account]:
        """Get the withdrawn account registered with ``email``, if any."""
        return self.db.scalars(
            self._including_withdrawn(
                select(Account).where(
                    and_(
                        Account.email == email.lower(),
                        Account.deleted_at.is_not(None),
                    )
                )
            )
        ).first()

    def find_erasable_accounts(self, now: datetime) -> List[Account]:
        """Withdrawn accounts whose permanent deletion date is at or before ``now``."""
        return list(self.db.scalars(
            self._including_withdrawn(
                select(Account)
                .where(self._erasable_at(now))
                .order_by(Account.permanent_deletion_date, Account.id)
            )
        ))

    def find_erasable_before(self, cutoff: datetime) -> List[Account]:
        """Withdrawn accounts whose permanent deletion date is strictly before ``cutoff``."""
        return list(self.db.scalars(
            self._including_withdrawn(
                select(Account)
                .where(
                    and_(
                        Account.deleted_at.is_not(None),
                        Account.permanent_deletion_date < cutoff,
                    )
                )
                .order_by(Account.permanent_deletion_date, Account.id)
            )
        ))

    def find_in_grace_period(self, now: datetime) -> List[Account]:
        """Withdrawn accounts that can still be restored at ``now``."""
        return list(self.db.scalars(
            self._including_withdrawn(
                select(Account)
                .where(self._in_grace_period_at(now))
                .order_by(Account.permanent_deletion_date, Account.id)
            )
        ))

    def count_erasable(self, now: datetime) -> int:
        return self.db.scalar(
            self._including_withdrawn(
                select(func.count()).select_from(Account).where(self._erasable_at(now))
            )
        ) or 0

    def count_in_grace_period(self, now: datetime) -> int:
        return self.db.scalar(
            self._including_withdrawn(
                select(func.count()).select_from(Account).where(self._in_grace_period_at(now))
            )
        ) or 0

    def save(self, account: Account) -> Account:
        self.db.add(account)
        self.db.flush()
        return account

    def delete(self, account: Account) -> None:
        """Physically delete the account row (irreversible once committed)."""
        self.db.delete(account)
        self.db.flush()

    @staticmethod
    def _erasable_at(now: datetime):
        return and_(
            Account.deleted_at.is_not(None),
            Account.permanent_deletion_date <= now,
        )

    @staticmethod
    def _in_grace_period_at(now: datetime):
        return and_(
            Account.deleted_at.is_not(None),
            Account.permanent_deletion_date > now,
        )
