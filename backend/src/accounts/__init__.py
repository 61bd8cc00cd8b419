"""Account withdrawal lifecycle.

This module provides:
- AccountStatus and the withdrawal state machine (status.py)
- AccountRepository for withdrawn-account queries (repository.py)
- AccountWithdrawalService for withdraw/restore/remaining-days (service.py)

Service and repository are imported lazily to avoid circular imports with
the models package. Use: from accounts.service import AccountWithdrawalService
"""

from .status import (
    AccountStatus,
    ALLOWED_TRANSITIONS,
    derive_status,
    can_transition,
    remaining_days,
)
from .exceptions import (
    AccountNotFoundError,
    AccountWithdrawalError,
    AccountRestoreExpiredError,
)

__all__ = [
    "AccountStatus",
    "ALLOWED_TRANSITIONS",
    "derive_status",
    "can_transition",
    "remaining_days",
    "AccountNotFoundError",
    "AccountWithdrawalError",
    "AccountRestoreExpiredError",
]
