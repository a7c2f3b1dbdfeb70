"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PORTFOLIO_",
        extra="ignore",
    )

    app_name: str = "GitHub Portfolio Stats"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080

    # GitHub API settings
    github_api_base_url: str = "https://api.github.com"
    github_api_timeout: float = 10.0
    github_user_agent: str = "portfolio-stats"
    github_page_size: int = Field(default=100, ge=1, le=100)

    # Account to aggregate; the bare GITHUB_* names are accepted as well
    github_username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("github_username", "PORTFOLIO_GITHUB_USERNAME"),
    )
    github_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("github_token", "PORTFOLIO_GITHUB_TOKEN"),
    )

    # Cache settings
    cache_ttl_seconds: int = 900
    cache_control: str = "s-maxage=900, stale-while-revalidate=60"

    # Aggregation limits
    top_languages: int = Field(default=5, ge=1)
    latest_limit: int = Field(default=6, ge=1)


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
