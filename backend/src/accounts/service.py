"""Account withdrawal service.

Application-facing operations for the withdrawal grace period:
- withdraw: start the grace period and sign the account out
- restore_account: undo a withdrawal before the deadline
- get_remaining_days / get_status: read the derived lifecycle state
- ensure_email_available: refuse re-registration while in the grace period

The grace period is read once when the service is built. A withdrawal fixes
its own permanent deletion date, so later configuration changes never move
an existing deadline.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from config import settings
from lifecycle.clock import utcnow
from lifecycle.exceptions import InvalidTransitionError
from models.account import Account, RefreshToken
from observability.masking import mask_email
from observability.metrics import account_transitions_total

from . import status as account_state
from .exceptions import AccountNotFoundError, AccountWithdrawalError
from .repository import AccountRepository
from .status import AccountStatus

logger = logging.getLogger(__name__)


class AccountWithdrawalService:
    """Withdraw, restore and inspect accounts.

    Each mutating call is its own unit of work: it commits on success and
    rolls back before re-raising on failure.
    """

    def __init__(
        self,
        db: Session,
        grace_period_days: Optional[int] = None,
        repository: Optional[AccountRepository] = None,
    ):
        """Initialize withdrawal service.

        Args:
            db: Database session
            grace_period_days: Override for ACCOUNT_GRACE_PERIOD_DAYS
            repository: Optional repository (defaults to AccountRepository(db))
        """
        if grace_period_days is None:
            grace_period_days = settings.ACCOUNT_GRACE_PERIOD_DAYS
        if grace_period_days < 0:
            raise ValueError(f"Grace period must be >= 0 days, got {grace_period_days}")

        self.db = db
        self.grace_period_days = grace_period_days
        self.repository = repository or AccountRepository(db)

    def _load(self, account_id: int) -> Account:
        account = self.repository.get_including_withdrawn(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def withdraw(self, account_id: int, now: Optional[datetime] = None) -> Account:
        """Start the withdrawal grace period for an active account.

        Also invalidates the account's refresh tokens.

        Raises:
            AccountNotFoundError: Unknown account
            AccountWithdrawalError: Account already withdrawn (no change made)
        """
        now = now or utcnow()
        account = self._load(account_id)

        try:
            deadline = account_state.withdraw(account, now, self.grace_period_days)
        except AccountWithdrawalError:
            account_transitions_total.labels(transition="withdraw", status="rejected").inc()
            raise

        try:
            self.db.execute(
                update(RefreshToken)
                .where(RefreshToken.account_id == account.id)
                .where(RefreshToken.invalidated.is_(False))
                .values(invalidated=True, invalidated_at=now)
            )
            self.repository.save(account)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        account_transitions_total.labels(transition="withdraw", status="success").inc()
        logger.info(
            f"Account {account.id} withdrawn; permanent deletion on {deadline.isoformat()}",
            extra={"account_id": account.id, "masked_email": mask_email(account.email)},
        )
        return account

    def restore_account(self, account_id: int, now: Optional[datetime] = None) -> Account:
        """Cancel a withdrawal while the grace period is still running.

        Raises:
            AccountNotFoundError: Unknown (or already erased) account
            AccountRestoreExpiredError: ``now`` is at or past the deadline
            InvalidTransitionError: Account is not withdrawn
        """
        now = now or utcnow()
        account = self._load(account_id)

        try:
            account_state.restore_account(account, now)
        except Exception:
            account_transitions_total.labels(transition="restore", status="rejected").inc()
            raise

        try:
            self.repository.save(account)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        account_transitions_total.labels(transition="restore", status="success").inc()
        logger.info(
            f"Account {account.id} restored",
            extra={"account_id": account.id, "masked_email": mask_email(account.email)},
        )
        return account

    def get_status(self, account_id: int, now: Optional[datetime] = None) -> AccountStatus:
        return account_state.account_status(self._load(account_id), now or utcnow())

    def get_remaining_days(self, account_id: int, now: Optional[datetime] = None) -> int:
        """Days left before the account becomes erasable (0 once it is).

        Raises:
            AccountNotFoundError: Unknown account
            InvalidTransitionError: Account is active (no deadline exists)
        """
        now = now or utcnow()
        account = self._load(account_id)
        if account.permanent_deletion_date is None:
            raise InvalidTransitionError(
                f"Account {account_id} is active and has no permanent deletion date"
            )
        return account_state.remaining_days(account.permanent_deletion_date, now)

    def ensure_email_available(self, email: str, now: Optional[datetime] = None) -> None:
        """Refuse sign-up or verification for an email held by a withdrawn account.

        Raises:
            AccountWithdrawalError: The email belongs to a withdrawn account that
                has not been erased yet
        """
        now = now or utcnow()
        account = self.repository.find_withdrawn_by_email(email)
        if account is None:
            return

        raise AccountWithdrawalError(
            "This email belongs to an account that is being withdrawn.",
            permanent_deletion_date=account.permanent_deletion_date,
            remaining_days=account_state.remaining_days(account.permanent_deletion_date, now),
        )
