"""Unit tests for AccountWithdrawalService.

Tests withdraw/restore/remaining-days against the database, including the
30-day grace period scenario end to end with the erasure job.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from accounts.exceptions import (
    AccountNotFoundError,
    AccountRestoreExpiredError,
    AccountWithdrawalError,
)
from accounts.repository import AccountRepository
from accounts.service import AccountWithdrawalService
from accounts.status import AccountStatus
from lifecycle.exceptions import InvalidTransitionError
from models import Account, RefreshToken
from retention.service import AccountCleanupService

T0 = datetime(2024, 3, 1, 9, 0, 0)


@pytest.fixture
def service(db_session):
    return AccountWithdrawalService(db_session, grace_period_days=30)


class TestWithdraw:
    """Test AccountWithdrawalService.withdraw()."""

    def test_withdraw_sets_deadline(self, service, make_account):
        account = make_account("withdraw@test.com")

        service.withdraw(account.id, now=T0)

        assert account.deleted_at == T0
        assert account.permanent_deletion_date == T0 + timedelta(days=30)
        assert service.get_status(account.id, now=T0) == AccountStatus.WITHDRAWN
        assert service.get_remaining_days(account.id, now=T0) == 30

    def test_withdrawn_account_hidden_from_active_lookups(self, db_session, service, make_account):
        account = make_account("hidden@test.com")
        service.withdraw(account.id, now=T0)

        repository = AccountRepository(db_session)

        assert db_session.scalars(select(Account).where(Account.id == account.id)).first() is None
        assert repository.get_including_withdrawn(account.id) is not None

    def test_withdraw_twice_rejected(self, service, make_account):
        account = make_account("twice@test.com")
        service.withdraw(account.id, now=T0)

        with pytest.raises(AccountWithdrawalError):
            service.withdraw(account.id, now=T0 + timedelta(days=1))

        assert account.deleted_at == T0

    def test_withdraw_revokes_refresh_tokens(self, db_session, service, make_account):
        account = make_account("tokens@test.com")
        db_session.add(RefreshToken(
            account_id=account.id,
            token="refresh-token-1",
            expires_at=T0 + timedelta(days=14),
        ))
        db_session.commit()

        service.withdraw(account.id, now=T0)

        token = db_session.scalars(select(RefreshToken)).one()
        assert token.invalidated is True
        assert token.invalidated_at == T0

    def test_unknown_account(self, service):
        with pytest.raises(AccountNotFoundError):
            service.withdraw(404, now=T0)

    def test_grace_period_from_settings(self, db_session):
        from config import settings

        assert AccountWithdrawalService(db_session).grace_period_days == settings.ACCOUNT_GRACE_PERIOD_DAYS

    def test_negative_grace_period_rejected(self, db_session):
        with pytest.raises(ValueError):
            AccountWithdrawalService(db_session, grace_period_days=-1)


class TestRestore:
    """Test AccountWithdrawalService.restore_account()."""

    def test_restore_within_grace_period(self, service, make_account):
        account = make_account("restore@test.com")
        service.withdraw(account.id, now=T0)

        service.restore_account(account.id, now=T0 + timedelta(days=29))

        assert account.deleted_at is None
        assert account.permanent_deletion_date is None
        assert service.get_status(account.id, now=T0 + timedelta(days=29)) == AccountStatus.ACTIVE

    def test_restore_after_deadline_rejected(self, service, make_account):
        account = make_account("late@test.com")
        service.withdraw(account.id, now=T0)

        with pytest.raises(AccountRestoreExpiredError):
            service.restore_account(account.id, now=T0 + timedelta(days=31))

        assert service.get_status(account.id, now=T0 + timedelta(days=31)) == AccountStatus.ERASABLE

    def test_restore_active_rejected(self, service, make_account):
        account = make_account("active@test.com")

        with pytest.raises(InvalidTransitionError):
            service.restore_account(account.id, now=T0)

    def test_remaining_days_for_active_account_rejected(self, service, make_account):
        account = make_account("nodeadline@test.com")

        with pytest.raises(InvalidTransitionError):
            service.get_remaining_days(account.id, now=T0)


class TestEnsureEmailAvailable:
    """Sign-up with an email still held by a withdrawn account is refused."""

    def test_withdrawn_email_rejected(self, service, make_account):
        account = make_account("taken@test.com")
        service.withdraw(account.id, now=T0)

        with pytest.raises(AccountWithdrawalError) as exc:
            service.ensure_email_available("Taken@Test.com", now=T0 + timedelta(days=10))

        assert exc.value.remaining_days == 20
        assert exc.value.permanent_deletion_date == T0 + timedelta(days=30)

    def test_active_and_unknown_emails_allowed(self, service, make_account):
        make_account("free@test.com")

        service.ensure_email_available("free@test.com", now=T0)
        service.ensure_email_available("nobody@test.com", now=T0)


class TestGracePeriodScenario:
    """Withdrawn at T with a 30-day grace period."""

    def test_restore_at_t_plus_29(self, service, make_account):
        account = make_account("scenario1@test.com")
        service.withdraw(account.id, now=T0)

        assert service.get_remaining_days(account.id, now=T0 + timedelta(days=29)) == 1
        service.restore_account(account.id, now=T0 + timedelta(days=29))

        assert service.get_status(account.id, now=T0 + timedelta(days=29)) == AccountStatus.ACTIVE

    def test_erased_at_t_plus_31(self, db_session, service, make_account):
        account = make_account("scenario2@test.com")
        account_id = account.id
        service.withdraw(account_id, now=T0)

        with pytest.raises(AccountRestoreExpiredError):
            service.restore_account(account_id, now=T0 + timedelta(days=31))
        assert service.get_remaining_days(account_id, now=T0 + timedelta(days=31)) == 0

        cleanup = AccountCleanupService(db_session)
        first = cleanup.run_cleanup(now=T0 + timedelta(days=31))
        second = cleanup.run_cleanup(now=T0 + timedelta(days=32))

        assert first.accounts_erased == 1
        assert second.accounts_found == 0
        assert second.accounts_erased == 0
        with pytest.raises(AccountNotFoundError):
            service.get_status(account_id, now=T0 + timedelta(days=32))
