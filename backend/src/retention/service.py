"""Account erasure service.

This service implements the grace-period cleanup:
- Find withdrawn accounts whose permanent deletion date has passed
- Erase or anonymize their related data
- Write a tombstone and physically delete the account row
- Report counts of withdrawn accounts for monitoring

Each account is its own transaction. A failure rolls back that account only;
it stays ERASABLE and is selected again by the next run. Re-running after a
successful run erases nothing.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from accounts.repository import AccountRepository
from accounts.status import AccountStatus, account_status, remaining_days
from config import settings
from lifecycle.clock import utcnow
from models.account import Account
from models.deleted_account_record import DeletedAccountRecord
from observability.correlation import generate_run_id, get_run_id, run_id_var
from observability.masking import hash_email, mask_email
from observability.metrics import (
    account_erasures_total,
    accounts_in_grace_period,
    accounts_pending_erasure,
    cleanup_duration_seconds,
)

from .erasure import AccountDataEraser
from .schemas import (
    AccountRetentionReport,
    CleanupStatistics,
    TRIGGER_MANUAL,
    TRIGGER_SCHEDULED,
    WithdrawnAccountSummary,
)

logger = logging.getLogger(__name__)


class AccountCleanupService:
    """Erase accounts whose withdrawal grace period has ended.

    Usage:
        service = AccountCleanupService(session)
        statistics = service.run_cleanup(now)
    """

    def __init__(
        self,
        db: Session,
        eraser: Optional[AccountDataEraser] = None,
        repository: Optional[AccountRepository] = None,
        anomaly_threshold: Optional[int] = None,
    ):
        """Initialize cleanup service.

        Args:
            db: Database session
            eraser: Related-data eraser (defaults to AccountDataEraser(db))
            repository: Account repository (defaults to AccountRepository(db))
            anomaly_threshold: Override for CLEANUP_ANOMALY_THRESHOLD
        """
        self.db = db
        self.eraser = eraser or AccountDataEraser(db)
        self.repository = repository or AccountRepository(db)
        self.anomaly_threshold = anomaly_threshold or settings.CLEANUP_ANOMALY_THRESHOLD

    def run_cleanup(self, now: Optional[datetime] = None) -> CleanupStatistics:
        """Erase every account that is ERASABLE at ``now``.

        This is the entry point called by the scheduled Celery task.

        Args:
            now: Reference time (defaults to current UTC time)

        Returns:
            CleanupStatistics for the run
        """
        now = now or utcnow()
        candidates = self.repository.find_erasable_accounts(now)

        return self._erase_accounts(
            account_ids=[account.id for account in candidates],
            now=now,
            trigger=TRIGGER_SCHEDULED,
            is_eligible=lambda account: account_status(account, now) == AccountStatus.ERASABLE,
        )

    def process_accounts_before(
        self,
        cutoff: datetime,
        now: Optional[datetime] = None,
    ) -> CleanupStatistics:
        """Erase withdrawn accounts whose permanent deletion date is before ``cutoff``.

        Operator-initiated. A cutoff in the future erases accounts that are
        still in their grace period; this cannot be undone.

        Args:
            cutoff: Exclusive upper bound on permanent_deletion_date
            now: Reference time recorded in the statistics

        Returns:
            CleanupStatistics for the run
        """
        now = now or utcnow()
        candidates = self.repository.find_erasable_before(cutoff)

        logger.warning(
            f"Manual account erasure requested for deadlines before {cutoff.isoformat()}",
            extra={"cutoff": cutoff.isoformat(), "trigger": TRIGGER_MANUAL},
        )

        return self._erase_accounts(
            account_ids=[account.id for account in candidates],
            now=now,
            trigger=TRIGGER_MANUAL,
            is_eligible=lambda account: (
                account.deleted_at is not None
                and account.permanent_deletion_date is not None
                and account.permanent_deletion_date < cutoff
            ),
            cutoff=cutoff,
        )

    def count_erasable(self, now: Optional[datetime] = None) -> int:
        return self.repository.count_erasable(now or utcnow())

    def count_in_grace_period(self, now: Optional[datetime] = None) -> int:
        return self.repository.count_in_grace_period(now or utcnow())

    def list_in_grace_period(self, now: Optional[datetime] = None) -> List[WithdrawnAccountSummary]:
        """Withdrawn accounts that can still be restored, earliest deadline first."""
        now = now or utcnow()
        return [
            WithdrawnAccountSummary(
                account_id=account.id,
                masked_email=mask_email(account.email),
                withdrawn_at=account.deleted_at,
                permanent_deletion_date=account.permanent_deletion_date,
                remaining_days=remaining_days(account.permanent_deletion_date, now),
            )
            for account in self.repository.find_in_grace_period(now)
        ]

    def generate_report(self, now: Optional[datetime] = None) -> AccountRetentionReport:
        """Count withdrawn accounts and publish the monitoring gauges.

        Read-only: nothing is erased.
        """
        now = now or utcnow()
        in_grace = self.list_in_grace_period(now)

        report = AccountRetentionReport(
            generated_at=now,
            grace_period_days=settings.ACCOUNT_GRACE_PERIOD_DAYS,
            accounts_in_grace_period=len(in_grace),
            accounts_pending_erasure=self.count_erasable(now),
            next_permanent_deletion_date=(
                in_grace[0].permanent_deletion_date if in_grace else None
            ),
        )

        accounts_in_grace_period.set(report.accounts_in_grace_period)
        accounts_pending_erasure.set(report.accounts_pending_erasure)

        logger.info(
            "Generated account retention report",
            extra={
                "stats": {
                    "in_grace_period": report.accounts_in_grace_period,
                    "pending_erasure": report.accounts_pending_erasure,
                }
            },
        )
        return report

    def _erase_accounts(
        self,
        account_ids: List[int],
        now: datetime,
        trigger: str,
        is_eligible: Callable[[Account], bool],
        cutoff: Optional[datetime] = None,
    ) -> CleanupStatistics:
        start_time = utcnow()
        token = run_id_var.set(generate_run_id())

        try:
            logger.info(
                f"Account erasure started: {len(account_ids)} account(s) selected",
                extra={"trigger": trigger},
            )

            totals = {
                "accounts_erased": 0,
                "accounts_skipped": 0,
                "accounts_failed": 0,
                "related_rows_erased": 0,
                "related_rows_anonymized": 0,
            }
            failed_account_ids: List[int] = []

            for account_id in account_ids:
                self._erase_account(
                    account_id, now, trigger, is_eligible, totals, failed_account_ids
                )

            end_time = utcnow()
            duration = (end_time - start_time).total_seconds()
            cleanup_duration_seconds.labels(trigger=trigger).observe(duration)

            statistics = CleanupStatistics(
                run_id=get_run_id(),
                trigger=trigger,
                reference_time=now,
                cutoff=cutoff,
                job_started_at=start_time,
                job_completed_at=end_time,
                duration_seconds=duration,
                accounts_found=len(account_ids),
                failed_account_ids=failed_account_ids,
                anomaly_threshold=self.anomaly_threshold,
                **totals,
            )

            logger.info(
                f"Account erasure completed: {statistics.accounts_erased} erased, "
                f"{statistics.accounts_skipped} skipped, {statistics.accounts_failed} failed",
                extra={"trigger": trigger, "stats": statistics.model_dump(mode="json")},
            )

            if statistics.is_anomaly:
                logger.warning(
                    f"Account erasure anomaly detected: {statistics.accounts_erased} accounts erased",
                    extra={"trigger": trigger},
                )

            if statistics.has_errors:
                logger.error(
                    f"Account erasure completed with {statistics.accounts_failed} failure(s)",
                    extra={"trigger": trigger},
                )

            return statistics
        finally:
            run_id_var.reset(token)

    def _erase_account(
        self,
        account_id: int,
        now: datetime,
        trigger: str,
        is_eligible: Callable[[Account], bool],
        totals: dict,
        failed_account_ids: List[int],
    ) -> None:
        masked_email = None
        try:
            account = self.repository.get_including_withdrawn(account_id)
            if account is None or not is_eligible(account):
                # Restored or erased since the scan
                self.db.rollback()
                totals["accounts_skipped"] += 1
                account_erasures_total.labels(trigger=trigger, status="skipped").inc()
                logger.info(
                    f"Account {account_id} no longer eligible for erasure, skipped",
                    extra={"account_id": account_id, "trigger": trigger},
                )
                return

            masked_email = mask_email(account.email)
            purged = self.eraser.purge_related_data(account)

            self.db.add(DeletedAccountRecord(
                account_id=account.id,
                email_hash=hash_email(account.email),
                withdrawn_at=account.deleted_at,
                permanent_deletion_date=account.permanent_deletion_date,
                erased_at=now,
                trigger=trigger,
            ))
            self.repository.delete(account)
            self.db.commit()

        except Exception as e:
            self.db.rollback()
            totals["accounts_failed"] += 1
            failed_account_ids.append(account_id)
            account_erasures_total.labels(trigger=trigger, status="failed").inc()
            logger.error(
                f"Failed to erase account {account_id}",
                exc_info=True,
                extra={
                    "account_id": account_id,
                    "masked_email": masked_email,
                    "trigger": trigger,
                    "error": str(e),
                },
            )
            return

        totals["accounts_erased"] += 1
        totals["related_rows_erased"] += purged.total_erased
        totals["related_rows_anonymized"] += purged.total_anonymized
        account_erasures_total.labels(trigger=trigger, status="erased").inc()
        logger.info(
            f"Account {account_id} erased",
            extra={"account_id": account_id, "masked_email": masked_email, "trigger": trigger},
        )
