"""
Tests for configuration loading.
"""

import pytest
from pathlib import Path

from finance_tracker.config import StorageSettings, TrackerSettings, get_settings
from finance_tracker.config.settings import validate_all_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_key_names(self):
        """Test the browser app's storage key names."""
        settings = StorageSettings(key_prefix="financeTracker")
        assert settings.transactions_key == "financeTracker_transactions"
        assert settings.settings_key == "financeTracker_settings"
        assert settings.theme_key == "financeTracker_theme"

    def test_rejects_path_in_prefix(self):
        """Test that key prefixes cannot contain path separators."""
        with pytest.raises(ValueError):
            StorageSettings(key_prefix="../evil")

    def test_from_environment(self, monkeypatch, tmp_path):
        """Test loading from FINANCE_TRACKER_STORAGE_* variables."""
        monkeypatch.setenv("FINANCE_TRACKER_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("FINANCE_TRACKER_STORAGE_DATA_DIR", str(tmp_path))
        settings = StorageSettings()
        assert settings.backend == "memory"
        assert settings.data_dir == Path(tmp_path)

    def test_rejects_unknown_backend(self):
        """Test that only known backends are accepted."""
        with pytest.raises(ValueError):
            StorageSettings(backend="sqlite")


class TestTrackerSettings:
    """Tests for TrackerSettings."""

    def test_defaults(self, monkeypatch):
        """Test the browser app's defaults."""
        for name in ("DEFAULT_CURRENCY", "MONTHLY_SERIES_MONTHS", "RECENT_LIMIT"):
            monkeypatch.delenv(f"FINANCE_TRACKER_{name}", raising=False)
        settings = TrackerSettings()
        assert settings.default_currency == "₹"
        assert settings.monthly_series_months == 6
        assert settings.recent_limit == 5
        assert settings.budget_warning_percent == 70.0
        assert settings.budget_critical_percent == 90.0

    def test_from_environment(self, monkeypatch):
        """Test loading from FINANCE_TRACKER_* variables."""
        monkeypatch.setenv("FINANCE_TRACKER_DEFAULT_CURRENCY", "$")
        monkeypatch.setenv("FINANCE_TRACKER_RECENT_LIMIT", "10")
        settings = TrackerSettings()
        assert settings.default_currency == "$"
        assert settings.recent_limit == 10

    def test_rejects_inverted_budget_thresholds(self):
        """Test that the warning level cannot sit above the critical level."""
        with pytest.raises(ValueError, match="must not exceed"):
            TrackerSettings(budget_warning_percent=95.0, budget_critical_percent=90.0)

    def test_equal_budget_thresholds(self):
        """Test that equal thresholds are allowed."""
        settings = TrackerSettings(budget_warning_percent=80.0, budget_critical_percent=80.0)
        assert settings.budget_warning_percent == settings.budget_critical_percent

    def test_rejects_zero_window(self):
        """Test that the trend window must cover at least one month."""
        with pytest.raises(ValueError):
            TrackerSettings(monthly_series_months=0)


class TestSettingsRoot:
    """Tests for the cached settings root."""

    def test_get_settings_is_cached(self):
        """Test that the same object is returned."""
        assert get_settings() is get_settings()

    def test_validate_all_settings(self, monkeypatch):
        """Test the startup check reports bad values."""
        monkeypatch.setenv("FINANCE_TRACKER_RECENT_LIMIT", "0")
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["tracker"] is False
        assert "tracker_error" in results


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
