"""Unit tests for settings validation."""

import pytest
from pydantic import ValidationError

from config import Settings


class TestLifecycleSettings:
    """Test grace period and schedule settings."""

    def test_defaults(self):
        settings = Settings()

        assert settings.ACCOUNT_GRACE_PERIOD_DAYS == 30
        assert settings.ACCOUNT_CLEANUP_SCHEDULE == "0 2 * * *"

    def test_negative_grace_period_rejected(self):
        """Test that a negative grace period fails at load time."""
        with pytest.raises(ValidationError) as exc:
            Settings(ACCOUNT_GRACE_PERIOD_DAYS=-1)

        assert "greater than or equal to 0" in str(exc.value)

    def test_zero_grace_period_allowed(self):
        assert Settings(ACCOUNT_GRACE_PERIOD_DAYS=0).ACCOUNT_GRACE_PERIOD_DAYS == 0

    def test_grace_period_from_environment(self, monkeypatch):
        monkeypatch.setenv("ACCOUNT_GRACE_PERIOD_DAYS", "14")

        assert Settings().ACCOUNT_GRACE_PERIOD_DAYS == 14

    @pytest.mark.parametrize("schedule", ["0 2 * *", "every day", "0 2 * * * *"])
    def test_malformed_cron_rejected(self, schedule):
        with pytest.raises(ValidationError):
            Settings(ACCOUNT_CLEANUP_SCHEDULE=schedule)

    def test_cron_fields(self):
        settings = Settings(ACCOUNT_CLEANUP_SCHEDULE="30  3 * * 1")

        assert settings.cron_fields() == {
            "minute": "30",
            "hour": "3",
            "day_of_month": "*",
            "month_of_year": "*",
            "day_of_week": "1",
        }

    def test_log_level_normalized(self):
        assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(LOG_LEVEL="LOUD")
