"""Configuration system for PropScout.

Uses pydantic-settings to load configuration from environment variables
and .env files with sensible defaults for the explore and compare views.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Environment variables are prefixed with PROPSCOUT_ (e.g., PROPSCOUT_API_URL).
    """

    model_config = SettingsConfigDict(
        env_prefix="PROPSCOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Catalog backend
    api_url: str = Field(
        default="http://localhost:5000",
        description="Base URL of the property catalog API",
    )
    request_timeout: float = Field(
        default=15.0,
        gt=0,
        description="HTTP timeout in seconds for catalog requests",
    )

    # Debounce windows
    viewport_debounce_seconds: float = Field(
        default=0.2,
        ge=0,
        description="Quiet period before a map move recomputes the visible list",
    )
    search_debounce_seconds: float = Field(
        default=0.3,
        ge=0,
        description="Quiet period before a typed query hits the catalog",
    )

    # Compare view
    search_result_limit: int = Field(
        default=10,
        ge=1,
        description="Maximum number of search results offered for comparison",
    )
    comparison_capacity: int = Field(
        default=3,
        ge=1,
        description="Maximum number of properties compared side by side",
    )

    # Explore view
    focus_zoom: int = Field(
        default=15,
        ge=0,
        le=22,
        description="Zoom level used when the map recenters on a selection",
    )
    list_scroll_delay_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Delay before scrolling the list after a list-card click",
    )
    initial_center_lat: float = Field(default=19.0760, ge=-90, le=90)
    initial_center_lng: float = Field(default=72.8777, ge=-180, le=180)
    initial_zoom: int = Field(default=12, ge=0, le=22)


# Singleton instance for easy import
config = Settings()
