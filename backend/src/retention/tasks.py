"""Celery tasks for account erasure.

Tasks:
- cleanup_expired_accounts_task: scheduled run (see celery_app.beat_schedule)
- cleanup_accounts_before_task: operator-initiated run with an explicit cutoff
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from celery import shared_task

from database import SessionLocal
from .service import AccountCleanupService

logger = logging.getLogger(__name__)


@shared_task(name="accounts.cleanup_expired", bind=True)
def cleanup_expired_accounts_task(self) -> Dict[str, Any]:
    """Erase every account whose permanent deletion date has passed.

    Scheduled by Celery Beat from ACCOUNT_CLEANUP_SCHEDULE (02:00 UTC daily
    by default). Idempotent: a second run in succession erases nothing.

    Returns:
        Dict with cleanup statistics (see CleanupStatistics), plus
        status='completed', or status='failed' with the error message

    Raises:
        Nothing: errors are logged and reported in the result
    """
    logger.info("Account cleanup task started")

    db = SessionLocal()
    try:
        statistics = AccountCleanupService(db).run_cleanup()
        result = statistics.to_task_result()

        logger.info(
            "Account cleanup task completed",
            extra={"trigger": statistics.trigger, "stats": result},
        )
        return result

    except Exception as e:
        logger.error(
            "Account cleanup task failed",
            exc_info=True,
            extra={"error": str(e)},
        )

        # Return error status but don't raise (allow task to complete)
        return {
            'status': 'failed',
            'error': str(e),
            'accounts_erased': 0,
        }

    finally:
        db.close()


@shared_task(name="accounts.cleanup_before", bind=True)
def cleanup_accounts_before_task(self, cutoff_iso: str) -> Dict[str, Any]:
    """Erase withdrawn accounts whose permanent deletion date is before a cutoff.

    Manual trigger for operators. Accounts still in their grace period are
    erased if their deadline is before the cutoff.

    Args:
        cutoff_iso: ISO-8601 cutoff; timezone-aware values are converted to UTC

    Returns:
        Dict with cleanup statistics, or status='failed' with the error message
    """
    logger.info(f"Manual account cleanup task started (cutoff {cutoff_iso})")

    try:
        cutoff = _parse_cutoff(cutoff_iso)
    except ValueError as e:
        logger.error(
            f"Invalid cutoff: {cutoff_iso}",
            extra={"error": str(e)},
        )
        return {
            'status': 'failed',
            'cutoff': cutoff_iso,
            'error': str(e),
            'accounts_erased': 0,
        }

    db = SessionLocal()
    try:
        statistics = AccountCleanupService(db).process_accounts_before(cutoff)
        result = statistics.to_task_result()

        logger.info(
            "Manual account cleanup task completed",
            extra={"trigger": statistics.trigger, "cutoff": cutoff_iso, "stats": result},
        )
        return result

    except Exception as e:
        logger.error(
            "Manual account cleanup task failed",
            exc_info=True,
            extra={"cutoff": cutoff_iso, "error": str(e)},
        )

        return {
            'status': 'failed',
            'cutoff': cutoff_iso,
            'error': str(e),
            'accounts_erased': 0,
        }

    finally:
        db.close()


def _parse_cutoff(value: str) -> datetime:
    """Parse an ISO-8601 string into a naive UTC datetime."""
    cutoff = datetime.fromisoformat(value)
    if cutoff.tzinfo is not None:
        cutoff = cutoff.astimezone(timezone.utc).replace(tzinfo=None)
    return cutoff
