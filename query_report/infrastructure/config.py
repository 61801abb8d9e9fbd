"""Filter registry configuration with environment variable support."""

from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CustomFilterPolicy(str, Enum):
    """When the custom filter pass stops scanning registered filters."""

    # Stop at the first custom filter with one or two comparators, even when
    # its values are absent and its predicate did not run.
    FIRST_ELIGIBLE = "first_eligible"
    # Keep scanning until a custom predicate actually runs.
    FIRST_APPLIED = "first_applied"


class Settings(BaseSettings):
    """Query report settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Localization
    locale: str = Field(default="en", alias="QUERY_REPORT_LOCALE")
    default_locale: str = Field(default="en", alias="QUERY_REPORT_DEFAULT_LOCALE")
    label_scope: str = Field(
        default="query_report.filters",
        alias="QUERY_REPORT_LABEL_SCOPE",
        description="Translation key prefix for comparator labels",
    )

    # Request parameter buckets
    search_param: str = Field(
        default="q",
        alias="QUERY_REPORT_SEARCH_PARAM",
        description="Request parameter holding generic search conditions",
    )
    custom_search_param: str = Field(
        default="custom_search",
        alias="QUERY_REPORT_CUSTOM_SEARCH_PARAM",
        description="Request parameter holding custom filter values",
    )

    # Custom filter pass
    custom_filter_policy: CustomFilterPolicy = Field(
        default=CustomFilterPolicy.FIRST_ELIGIBLE,
        alias="QUERY_REPORT_CUSTOM_FILTER_POLICY",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @field_validator("search_param", "custom_search_param", "label_scope", "locale", "default_locale")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject blank names."""
        if not v.strip():
            raise ValueError("Value must not be blank")
        return v.strip()

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
