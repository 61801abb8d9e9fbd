"""Tests for query report configuration.

Test Organization:
- TestSettingsDefaults: Default configuration values
- TestSettingsFromEnvironment: Environment variable parsing
- TestSettingsValidation: Rejected values
- TestEnvironmentProperties: Environment detection properties
- TestGetSettingsCaching: Settings singleton caching
"""

import pytest
from pydantic import ValidationError

from query_report.infrastructure.config import CustomFilterPolicy, Settings, get_settings


class TestSettingsDefaults:
    """Test default configuration values."""

    def test_has_expected_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test defaults match the conventional request shape.

        Arrange: Clear related environment variables
        Act: Create Settings instance
        Assert: Buckets, locale and policy have expected defaults
        """
        # Arrange
        for name in (
            "QUERY_REPORT_SEARCH_PARAM",
            "QUERY_REPORT_CUSTOM_SEARCH_PARAM",
            "QUERY_REPORT_CUSTOM_FILTER_POLICY",
            "QUERY_REPORT_LOCALE",
        ):
            monkeypatch.delenv(name, raising=False)

        # Act
        settings = Settings()

        # Assert
        assert settings.search_param == "q"
        assert settings.custom_search_param == "custom_search"
        assert settings.custom_filter_policy is CustomFilterPolicy.FIRST_ELIGIBLE
        assert settings.locale == "en"
        assert settings.label_scope == "query_report.filters"


class TestSettingsFromEnvironment:
    """Test environment variable parsing."""

    def test_reads_policy_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the custom filter policy can be switched by environment."""
        # Arrange
        monkeypatch.setenv("QUERY_REPORT_CUSTOM_FILTER_POLICY", "first_applied")

        # Act
        settings = Settings()

        # Assert
        assert settings.custom_filter_policy is CustomFilterPolicy.FIRST_APPLIED

    def test_reads_bucket_names_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test bucket names can be renamed by environment."""
        # Arrange
        monkeypatch.setenv("QUERY_REPORT_SEARCH_PARAM", " filter ")
        monkeypatch.setenv("QUERY_REPORT_CUSTOM_SEARCH_PARAM", "extra")

        # Act
        settings = Settings()

        # Assert
        assert settings.search_param == "filter"
        assert settings.custom_search_param == "extra"

    def test_log_level_is_upper_cased(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test lower-case log levels are accepted."""
        # Arrange
        monkeypatch.setenv("LOG_LEVEL", "debug")

        # Act & Assert
        assert Settings().log_level == "DEBUG"


class TestSettingsValidation:
    """Test rejected values."""

    def test_rejects_unknown_policy(self) -> None:
        """Test only known policies are accepted."""
        # Act & Assert
        with pytest.raises(ValidationError):
            Settings(custom_filter_policy="sometimes")

    def test_rejects_unknown_log_level(self) -> None:
        """Test only standard log levels are accepted."""
        # Act & Assert
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    @pytest.mark.parametrize("field", ["search_param", "custom_search_param", "label_scope"])
    def test_rejects_blank_names(self, field: str) -> None:
        """Test bucket names and label scope cannot be blank."""
        # Act & Assert
        with pytest.raises(ValidationError):
            Settings(**{field: "  "})


class TestEnvironmentProperties:
    """Test environment detection properties."""

    @pytest.mark.parametrize(
        ("app_env", "production"),
        [("production", True), ("Production", True), ("development", False), ("testing", False)],
    )
    def test_production_flag(self, app_env: str, production: bool) -> None:
        """Test production detection is case-insensitive."""
        # Act
        settings = Settings(app_env=app_env)

        # Assert
        assert settings.is_production is production


class TestGetSettingsCaching:
    """Test settings singleton caching."""

    def test_returns_cached_instance(self) -> None:
        """Test get_settings returns the same object."""
        # Arrange
        get_settings.cache_clear()

        # Act & Assert
        assert get_settings() is get_settings()
