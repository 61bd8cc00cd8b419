"""Account withdrawal state machine.

State Flow:
    ACTIVE → WITHDRAWN → ERASABLE → ERASED
    WITHDRAWN → ACTIVE (restore, only before the permanent deletion date)

WITHDRAWN → ERASABLE happens purely by the passage of time. ERASED is
terminal and only reachable through the erasure job; the row no longer exists
afterwards, so it is never derived from a stored account.

Status is always derived from ``deleted_at`` and ``permanent_deletion_date``
against an explicit ``now``; it is never stored.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from lifecycle.exceptions import InvalidTransitionError

from .exceptions import AccountRestoreExpiredError, AccountWithdrawalError


class AccountStatus(str, Enum):
    """Derived account lifecycle status."""
    ACTIVE = "ACTIVE"
    WITHDRAWN = "WITHDRAWN"
    ERASABLE = "ERASABLE"
    ERASED = "ERASED"


ALLOWED_TRANSITIONS = {
    AccountStatus.ACTIVE: [AccountStatus.WITHDRAWN],
    AccountStatus.WITHDRAWN: [
        AccountStatus.ACTIVE,
        AccountStatus.ERASABLE,
    ],
    AccountStatus.ERASABLE: [AccountStatus.ERASED],
    AccountStatus.ERASED: [],  # Terminal state
}


def derive_status(
    deleted_at: Optional[datetime],
    permanent_deletion_date: Optional[datetime],
    now: datetime,
) -> AccountStatus:
    """Compute the status of an account at ``now``.

    The erasure boundary is inclusive: an account whose permanent deletion
    date equals ``now`` is ERASABLE.
    """
    if deleted_at is None:
        return AccountStatus.ACTIVE
    if permanent_deletion_date is None or now < permanent_deletion_date:
        return AccountStatus.WITHDRAWN
    return AccountStatus.ERASABLE


def account_status(account, now: datetime) -> AccountStatus:
    return derive_status(account.deleted_at, account.permanent_deletion_date, now)


def can_transition(current_status: AccountStatus, new_status: AccountStatus) -> bool:
    """Check if a state transition is allowed without raising exception."""
    return new_status in ALLOWED_TRANSITIONS.get(current_status, [])


def get_allowed_transitions(status: AccountStatus) -> List[AccountStatus]:
    return ALLOWED_TRANSITIONS.get(status, [])


def calculate_permanent_deletion_date(now: datetime, grace_period_days: int) -> datetime:
    """Deadline after which a withdrawal can no longer be undone.

    Raises:
        ValueError: If grace_period_days is negative
    """
    if grace_period_days < 0:
        raise ValueError(f"Grace period must be >= 0 days, got {grace_period_days}")
    return now + timedelta(days=grace_period_days)


def remaining_days(permanent_deletion_date: datetime, now: datetime) -> int:
    """Whole days left until the permanent deletion date, never negative."""
    return max(0, (permanent_deletion_date - now).days)


def withdraw(account, now: datetime, grace_period_days: int) -> datetime:
    """Move an ACTIVE account into its grace period.

    Sets ``deleted_at = now`` and ``permanent_deletion_date = now + grace``.

    Returns:
        The permanent deletion date

    Raises:
        AccountWithdrawalError: If the account is already withdrawn
        ValueError: If grace_period_days is negative
    """
    current = account_status(account, now)
    if not can_transition(current, AccountStatus.WITHDRAWN):
        pdd = account.permanent_deletion_date
        raise AccountWithdrawalError(
            f"Account {account.id} is already withdrawn ({current.value})",
            permanent_deletion_date=pdd,
            remaining_days=remaining_days(pdd, now) if pdd else None,
        )

    deadline = calculate_permanent_deletion_date(now, grace_period_days)
    account.deleted_at = now
    account.permanent_deletion_date = deadline
    return deadline


def restore_account(account, now: datetime) -> None:
    """Return a WITHDRAWN account to ACTIVE.

    Raises:
        AccountRestoreExpiredError: If ``now`` is at or past the deadline
        InvalidTransitionError: If the account is not withdrawn
    """
    current = account_status(account, now)
    if current == AccountStatus.ERASABLE:
        raise AccountRestoreExpiredError(account.id, account.permanent_deletion_date)
    if not can_transition(current, AccountStatus.ACTIVE):
        allowed = ", ".join(s.value for s in get_allowed_transitions(current)) or "none"
        raise InvalidTransitionError(
            f"Invalid transition: {current.value} -> {AccountStatus.ACTIVE.value} "
            f"for account {account.id} (allowed: {allowed})"
        )

    account.deleted_at = None
    account.permanent_deletion_date = None
