"""Account lifecycle exceptions"""

from datetime import datetime
from typing import Any, Optional

from lifecycle.exceptions import InvalidTransitionError, LifecycleError


class AccountNotFoundError(LifecycleError):
    """Raised when no account (active or withdrawn) has the given id."""

    def __init__(self, account_id: Any):
        super().__init__(f"Account {account_id} not found")
        self.account_id = account_id


class AccountWithdrawalError(InvalidTransitionError):
    """Raised for operations refused because the account is withdrawn.

    Carries the permanent deletion date and the remaining grace days so a
    caller can tell the user when the address becomes available again.

    Attributes:
        permanent_deletion_date: When the account becomes erasable (or None)
        remaining_days: Whole days left in the grace period (-1 if unknown)
    """

    def __init__(
        self,
        message: str,
        permanent_deletion_date: Optional[datetime] = None,
        remaining_days: Optional[int] = None,
    ):
        super().__init__(message)
        self.permanent_deletion_date = permanent_deletion_date
        self.remaining_days = remaining_days if remaining_days is not None else -1

    def detailed_message(self) -> str:
        if self.permanent_deletion_date is not None:
            return (
                f"{self} Permanent deletion date: "
                f"{self.permanent_deletion_date.date().isoformat()} "
                f"(remaining days: {self.remaining_days})"
            )
        return str(self)


class AccountRestoreExpiredError(InvalidTransitionError):
    """Raised when restore is attempted at or after the permanent deletion date."""

    def __init__(self, account_id: Any, permanent_deletion_date: datetime):
        super().__init__(
            f"Account {account_id} can no longer be restored: grace period ended "
            f"at {permanent_deletion_date.isoformat()}"
        )
        self.account_id = account_id
        self.permanent_deletion_date = permanent_deletion_date
