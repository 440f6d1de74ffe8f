"""
Tests for configuration helpers
Run with: pytest backend/tests/test_config.py -v
"""
from unittest.mock import patch

from rental_alerts import config
from rental_alerts.config import Settings, normalize_database_url


class TestDatabaseUrl:

    def test_heroku_postgres_url(self):
        assert normalize_database_url("postgres://u:p@db:5432/rentals") == "postgresql+asyncpg://u:p@db:5432/rentals"

    def test_plain_postgresql_url(self):
        assert normalize_database_url("postgresql://u:p@db/rentals") == "postgresql+asyncpg://u:p@db/rentals"

    def test_asyncpg_and_sqlite_untouched(self):
        assert normalize_database_url("postgresql+asyncpg://db/r") == "postgresql+asyncpg://db/r"
        assert normalize_database_url("sqlite+aiosqlite:///x.db") == "sqlite+aiosqlite:///x.db"

    def test_default_sqlite_in_data_path(self):
        with patch.object(config, "settings", Settings(data_path="/tmp/alerts", database_url=None)):
            assert config.get_database_url() == "sqlite+aiosqlite:////tmp/alerts/rental_alerts.db"
            assert config.is_postgresql() is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("ALERT_CHECK_INTERVAL_MINUTES", "15")
        monkeypatch.setenv("SCHEDULER_ENABLED", "false")

        loaded = Settings()

        assert loaded.alert_check_interval_minutes == 15
        assert loaded.scheduler_enabled is False
        assert loaded.max_concurrent_rules == 8
