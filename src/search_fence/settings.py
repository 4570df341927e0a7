"""
Application Settings

Centralized configuration using Pydantic Settings for type safety and validation.
"""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class AccountSettings(BaseModel):
    """Connection details for one Jira account."""

    alias: str = "Default"
    host: str
    auth_type: Literal["basic", "bearer", "none"] = "basic"
    username: str = ""
    password: str = ""
    bearer_token: str = ""
    priority: int = 1
    color: str = "#000000"


class Settings(BaseSettings):
    """Application settings with validation and type safety."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Jira accounts, tried in ascending priority order
    jira_accounts: list[AccountSettings] = []

    # Search defaults
    search_results_limit: int = 10
    search_columns: str = (
        "KEY, SUMMARY, TYPE, CREATED, UPDATED, REPORTER, ASSIGNEE, PRIORITY, STATUS"
    )

    # Custom field id -> name, as exposed by the Jira field API
    custom_fields: dict[str, str] = {}

    # Block grammar
    compact_symbol: str = "-"
    comment_pattern: str = r"^\s*#"

    # Display
    show_color_band: bool = True

    # Cache settings
    cache_dir: str = "cache"
    cache_ttl_hours: float = 0.25

    # HTTP settings
    request_timeout: float = 30.0
    max_retries: int = 5

    @property
    def custom_field_name_to_id(self) -> dict[str, str]:
        """Get the reverse custom field table (name -> id)."""
        return {name: field_id for field_id, name in self.custom_fields.items()}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
