"""Tests for application settings."""

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from shopbook.config import AppSettings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's SHOPBOOK_* variables and .env out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "SHOPBOOK_DATA_DIR",
        "SHOPBOOK_LOG_LEVEL",
        "SHOPBOOK_BACKUPS_ENABLED",
        "SHOPBOOK_BACKUP_INTERVAL_DAYS",
        "SHOPBOOK_LOW_STOCK_THRESHOLD",
    ):
        monkeypatch.delenv(name, raising=False)


class TestAppSettings:
    """Tests for AppSettings."""

    def test_defaults(self):
        """Test the weekly backup and the low stock threshold."""
        settings = AppSettings()
        assert settings.backups_enabled is True
        assert settings.backup_interval == timedelta(days=7)
        assert settings.low_stock_threshold == 5
        assert settings.log_level == "INFO"

    def test_derived_paths(self, tmp_path):
        """Test every location hangs off the data directory."""
        settings = AppSettings(data_dir=tmp_path)
        assert settings.data_file_path == tmp_path / "data" / "shop-data.json"
        assert settings.backup_dir_path == tmp_path / "backups"

    def test_environment_variables(self, monkeypatch, tmp_path):
        """Test the SHOPBOOK_ prefix."""
        monkeypatch.setenv("SHOPBOOK_DATA_DIR", str(tmp_path / "shop"))
        monkeypatch.setenv("SHOPBOOK_BACKUP_INTERVAL_DAYS", "1")
        monkeypatch.setenv("SHOPBOOK_BACKUPS_ENABLED", "false")
        settings = AppSettings()
        assert settings.data_dir == tmp_path / "shop"
        assert settings.backup_interval == timedelta(days=1)
        assert settings.backups_enabled is False

    def test_home_is_expanded(self, monkeypatch):
        """Test '~' in the data directory is expanded."""
        monkeypatch.setenv("SHOPBOOK_DATA_DIR", "~/my-shop")
        assert AppSettings().data_dir == Path.home() / "my-shop"

    def test_log_level_normalized(self):
        """Test lower-case levels are accepted."""
        assert AppSettings(log_level="debug").log_level == "DEBUG"

    def test_log_level_rejected(self):
        """Test an unknown level is refused."""
        with pytest.raises(ValidationError):
            AppSettings(log_level="LOUD")

    def test_interval_must_be_at_least_one_day(self):
        """Test a zero-day interval is refused."""
        with pytest.raises(ValidationError):
            AppSettings(backup_interval_days=0)

    def test_no_unused_environment_setting(self):
        """Test only settings the application reads are declared."""
        assert "app_environment" not in AppSettings.model_fields
