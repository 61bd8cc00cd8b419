"""Unit tests for the account erasure Celery tasks.

Tasks are called directly (no broker); SessionLocal is pointed at the test
database.
"""

from datetime import datetime

import pytest

import retention.tasks as tasks
from retention.tasks import (
    _parse_cutoff,
    cleanup_accounts_before_task,
    cleanup_expired_accounts_task,
)


@pytest.fixture
def task_sessions(session_factory, monkeypatch):
    monkeypatch.setattr(tasks, "SessionLocal", session_factory)
    return session_factory


class TestCleanupExpiredTask:
    """Test accounts.cleanup_expired."""

    def test_task_registered_under_name(self):
        assert cleanup_expired_accounts_task.name == "accounts.cleanup_expired"
        assert cleanup_accounts_before_task.name == "accounts.cleanup_before"

    def test_erases_long_expired_account(self, task_sessions, make_account):
        make_account("ancient@test.com", withdrawn_at=datetime(2020, 1, 1))

        result = cleanup_expired_accounts_task()

        assert result["status"] == "completed"
        assert result["trigger"] == "scheduled"
        assert result["accounts_erased"] == 1

    def test_failure_reported_not_raised(self, task_sessions, monkeypatch):
        def boom(self, now=None):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(tasks.AccountCleanupService, "run_cleanup", boom)

        result = cleanup_expired_accounts_task()

        assert result["status"] == "failed"
        assert "database unavailable" in result["error"]
        assert result["accounts_erased"] == 0


class TestCleanupBeforeTask:
    """Test accounts.cleanup_before."""

    def test_erases_before_cutoff(self, task_sessions, make_account):
        make_account("before@test.com", withdrawn_at=datetime(2024, 1, 1))
        make_account("after@test.com", withdrawn_at=datetime(2024, 6, 1))

        result = cleanup_accounts_before_task("2024-03-01T00:00:00")

        assert result["status"] == "completed"
        assert result["trigger"] == "manual"
        assert result["accounts_erased"] == 1

    def test_invalid_cutoff(self, task_sessions):
        result = cleanup_accounts_before_task("not-a-date")

        assert result["status"] == "failed"
        assert result["cutoff"] == "not-a-date"


class TestParseCutoff:
    def test_naive_value_kept(self):
        assert _parse_cutoff("2024-03-01T12:00:00") == datetime(2024, 3, 1, 12, 0)

    def test_aware_value_converted_to_utc(self):
        assert _parse_cutoff("2024-03-01T09:00:00+09:00") == datetime(2024, 3, 1, 0, 0)

    def test_date_only(self):
        assert _parse_cutoff("2024-03-01") == datetime(2024, 3, 1)
