"""Configuration for the Lookbook browse engine and CLI."""

from dataclasses import dataclass
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from LOOKBOOK_* environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="LOOKBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Runtime environment",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )

    # Lookbook API
    api_url: str = Field(
        default="http://localhost:4002/api",
        description="Base URL of the Lookbook API",
    )
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout (seconds)")

    # Paging
    grid_page_size: int = Field(default=8, ge=1, description="Cards per grid page")
    list_page_size: int = Field(default=100, ge=1, description="Rows per list page")
    detail_list_limit: int = Field(
        default=100,
        ge=1,
        description="Size of the unfiltered collection fetched for detail navigation",
    )

    # Timing
    search_debounce_ms: int = Field(default=500, ge=0, description="Search input debounce")
    prefetch_delay_ms: int = Field(
        default=300, ge=0, description="Settle delay before prefetching neighbours"
    )

    # Detail view
    carousel_size: int = Field(default=3, ge=1, description="Projects per carousel step")
    scroll_lock_min_width: int = Field(
        default=1536, description="Viewport width (px) at which the 4x2 grid locks scrolling"
    )

    # Slug cache
    cache_maxsize: int = Field(default=500, ge=1, description="Max cached detail records")
    cache_ttl_seconds: float = Field(default=300.0, gt=0, description="Detail cache TTL")

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @model_validator(mode="after")
    def check_page_sizes(self) -> "Settings":
        """List mode shows everything the grid does and more."""
        if self.list_page_size < self.grid_page_size:
            raise ValueError(
                f"list_page_size ({self.list_page_size}) must be >= "
                f"grid_page_size ({self.grid_page_size})"
            )
        return self

    def browse_settings(self) -> "BrowseSettings":
        """Engine-facing subset of these settings."""
        return BrowseSettings(
            grid_page_size=self.grid_page_size,
            list_page_size=self.list_page_size,
            detail_list_limit=self.detail_list_limit,
            search_debounce=self.search_debounce_ms / 1000,
            prefetch_delay=self.prefetch_delay_ms / 1000,
            carousel_size=self.carousel_size,
            scroll_lock_min_width=self.scroll_lock_min_width,
        )


@dataclass(frozen=True)
class BrowseSettings:
    """Tunables the browse session reads; delays are in seconds."""

    grid_page_size: int = 8
    list_page_size: int = 100
    detail_list_limit: int = 100
    search_debounce: float = 0.5
    prefetch_delay: float = 0.3
    carousel_size: int = 3
    scroll_lock_min_width: int = 1536


settings = Settings()
