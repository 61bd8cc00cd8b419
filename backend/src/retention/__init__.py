"""Account erasure module.

Erases withdrawn accounts once their grace period has ended.

This module provides:
- Related-data policies (erase vs. anonymize) per referencing table
- The erasure job (scheduled and operator-initiated)
- Monitoring counts and reports over withdrawn accounts

Service and tasks are imported lazily to avoid circular dependencies
Use: from retention.service import AccountCleanupService
Use: from retention.tasks import cleanup_expired_accounts_task
"""

from .schemas import (
    CleanupStatistics,
    WithdrawnAccountSummary,
    AccountRetentionReport,
    TRIGGER_SCHEDULED,
    TRIGGER_MANUAL,
)

__all__ = [
    "CleanupStatistics",
    "WithdrawnAccountSummary",
    "AccountRetentionReport",
    "TRIGGER_SCHEDULED",
    "TRIGGER_MANUAL",
]
