"""Pydantic schemas for the account erasure job.

This module defines:
- CleanupStatistics: Outcome of one erasure run
- WithdrawnAccountSummary: One account still in its grace period
- AccountRetentionReport: Monitoring snapshot of withdrawn accounts
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

TRIGGER_SCHEDULED = "scheduled"
TRIGGER_MANUAL = "manual"


class CleanupStatistics(BaseModel):
    """Statistics from one erasure run.

    Tracks how many accounts were found, erased, skipped and failed, and how
    many related rows were erased or anonymized. Used for monitoring and
    alerting on job health.
    """

    run_id: str = Field(
        description="Correlation ID shared by every log line of the run"
    )

    trigger: str = Field(
        description="What started the run: scheduled or manual"
    )

    reference_time: datetime = Field(
        description="The 'now' the run evaluated deadlines against"
    )

    cutoff: Optional[datetime] = Field(
        default=None,
        description="Manual runs only: accounts with a deadline before this are erased"
    )

    job_started_at: datetime = Field(
        description="When the run started"
    )

    job_completed_at: datetime = Field(
        description="When the run completed"
    )

    duration_seconds: float = Field(
        ge=0.0,
        description="Run duration in seconds"
    )

    accounts_found: int = Field(
        default=0,
        ge=0,
        description="Accounts selected by the scan"
    )

    accounts_erased: int = Field(
        default=0,
        ge=0,
        description="Accounts physically deleted"
    )

    accounts_skipped: int = Field(
        default=0,
        ge=0,
        description="Accounts restored or already erased since the scan"
    )

    accounts_failed: int = Field(
        default=0,
        ge=0,
        description="Accounts whose erasure was rolled back"
    )

    related_rows_erased: int = Field(
        default=0,
        ge=0,
        description="Rows hard-deleted from tables referencing erased accounts"
    )

    related_rows_anonymized: int = Field(
        default=0,
        ge=0,
        description="Rows detached from erased accounts"
    )

    failed_account_ids: List[int] = Field(
        default_factory=list,
        description="Accounts left ERASABLE for the next run"
    )

    anomaly_threshold: int = Field(
        default=1000,
        ge=1,
        description="Erasures per run above which the run is flagged"
    )

    @property
    def has_errors(self) -> bool:
        """Whether any account failed to be erased."""
        return self.accounts_failed > 0

    @property
    def is_anomaly(self) -> bool:
        """Whether erasure volume exceeds the configured threshold (alert condition)."""
        return self.accounts_erased > self.anomaly_threshold

    def to_task_result(self) -> dict:
        """JSON-able payload returned by the Celery tasks."""
        result = self.model_dump(mode="json")
        result["status"] = "completed"
        result["has_errors"] = self.has_errors
        result["is_anomaly"] = self.is_anomaly
        return result


class WithdrawnAccountSummary(BaseModel):
    """PII-safe view of one withdrawn account."""

    account_id: int
    masked_email: str
    withdrawn_at: datetime
    permanent_deletion_date: datetime
    remaining_days: int = Field(ge=0)


class AccountRetentionReport(BaseModel):
    """Snapshot of withdrawn accounts at ``generated_at``.

    Provides counts of accounts that the next run would erase and accounts
    that can still be restored.
    """

    generated_at: datetime = Field(
        description="The 'now' the report was computed for"
    )

    grace_period_days: int = Field(
        ge=0,
        description="Grace period applied to new withdrawals"
    )

    accounts_in_grace_period: int = Field(
        default=0,
        ge=0,
        description="Withdrawn accounts that can still be restored"
    )

    accounts_pending_erasure: int = Field(
        default=0,
        ge=0,
        description="Accounts past their permanent deletion date"
    )

    next_permanent_deletion_date: Optional[datetime] = Field(
        default=None,
        description="Earliest deadline among accounts still in the grace period"
    )

    @property
    def total_withdrawn(self) -> int:
        return self.accounts_in_grace_period + self.accounts_pending_erasure
