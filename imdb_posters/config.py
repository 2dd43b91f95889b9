"""Configuration objects and constants for the poster scraper."""

from __future__ import annotations

from dataclasses import dataclass

IMDB_BASE_URL = "https://www.imdb.com/"
DEFAULT_DOWNLOAD_TIMEOUT = 60.0
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:115.0) Gecko/20100101 Firefox/115.0"
)


@dataclass
class ScrapeConfig:
    """Top-level settings that control scraping and downloading behaviour."""

    base_url: str = IMDB_BASE_URL
    all_resolutions: bool = False
    wait_between_requests: float = 0.0
    download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    chunk_size: int = 8192
