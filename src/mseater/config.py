"""Crawler configuration loaded from environment variables.

Process-wide settings only. Per-crawl parameters (title, zip, seat count,
request interval) live on CrawlRequest.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class CrawlerConfig(BaseSettings):
    """Crawler configuration loaded from environment variables.

    Settings are loaded from MSEATER_* environment variables with sensible
    defaults. For local development, create a .env file in the project root.
    """

    base_url: str = Field(
        default="https://www.fandango.com",
        description="Ticketing site root used to build search URLs",
    )
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/125.0.0.0 Safari/537.36"
        ),
        description="User agent for every browser context",
    )
    headless: bool = Field(
        default=True,
        description="Launch Chromium without a visible window",
    )

    # Timeouts (milliseconds, Playwright units)
    navigation_timeout_ms: float = Field(
        default=30000,
        description="Default navigation and action timeout for pages",
    )
    seat_map_timeout_ms: float = Field(
        default=30000,
        description="How long to wait for the seat map to render",
    )
    title_timeout_ms: float = Field(
        default=30000,
        description="How long to wait for a movie title on the search page",
    )

    # Diagnostics
    page_dump_dir: str | None = Field(
        default=None,
        description="Directory for HTML dumps of seat pages with no seats (temp dir if unset)",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "MSEATER_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton pattern
_config: CrawlerConfig | None = None


def get_config() -> CrawlerConfig:
    """Get the crawler configuration singleton.

    Returns:
        CrawlerConfig: Crawler configuration instance
    """
    global _config
    if _config is None:
        _config = CrawlerConfig()
    return _config
