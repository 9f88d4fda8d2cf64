"""Configuration settings for the prospect persona pipeline."""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from src.utils.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_MAX_POSTS,
    DEFAULT_RATE_LIMIT,
    DEFAULT_SCAN_TIMEOUT_SECONDS,
    DEFAULT_VENDOR as _DEFAULT_VENDOR,
    DEFAULT_WINDOW_MONTHS,
)

load_dotenv()

# Storage (in-memory store when unset)
DATABASE_URL = os.getenv("DATABASE_URL")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Playbook
DEFAULT_VENDOR = os.getenv("DEFAULT_VENDOR", _DEFAULT_VENDOR)

# Scanning
SCAN_WINDOW_MONTHS = int(os.getenv("SCAN_WINDOW_MONTHS", str(DEFAULT_WINDOW_MONTHS)))
SCAN_MAX_POSTS = int(os.getenv("SCAN_MAX_POSTS", str(DEFAULT_MAX_POSTS)))
SCAN_RATE_LIMIT_PER_SECOND = float(
    os.getenv("SCAN_RATE_LIMIT_PER_SECOND", str(DEFAULT_RATE_LIMIT))
)
SCAN_TIMEOUT_SECONDS = float(os.getenv("SCAN_TIMEOUT_SECONDS", str(DEFAULT_SCAN_TIMEOUT_SECONDS)))
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", str(DEFAULT_HTTP_TIMEOUT_SECONDS)))

# Network credentials
TWITTER_BEARER_TOKEN = os.getenv("TWITTER_BEARER_TOKEN")
YOUTUBE_API_KEY = os.getenv("YOUTUBE_API_KEY")
INSTAGRAM_ACCESS_TOKEN = os.getenv("INSTAGRAM_ACCESS_TOKEN")
INSTAGRAM_ACCOUNT_ID = os.getenv("INSTAGRAM_ACCOUNT_ID")
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")

# LinkedIn has no public posts API; points at a public-data collector service
LINKEDIN_POSTS_ENDPOINT = os.getenv("LINKEDIN_POSTS_ENDPOINT")


@dataclass(frozen=True)
class ScannerSettings:
    """
    Settings consumed by the network scanner and its strategies.

    Build from the environment with ScannerSettings.from_env(), or
    construct directly in tests.
    """

    window_months: int = DEFAULT_WINDOW_MONTHS
    max_posts: int = DEFAULT_MAX_POSTS
    rate_limit_per_second: float = DEFAULT_RATE_LIMIT
    scan_timeout_seconds: float = DEFAULT_SCAN_TIMEOUT_SECONDS
    http_timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS
    twitter_bearer_token: Optional[str] = None
    youtube_api_key: Optional[str] = None
    instagram_access_token: Optional[str] = None
    instagram_account_id: Optional[str] = None
    github_token: Optional[str] = None
    linkedin_posts_endpoint: Optional[str] = None

    @classmethod
    def from_env(cls) -> "ScannerSettings":
        return cls(
            window_months=SCAN_WINDOW_MONTHS,
            max_posts=SCAN_MAX_POSTS,
            rate_limit_per_second=SCAN_RATE_LIMIT_PER_SECOND,
            scan_timeout_seconds=SCAN_TIMEOUT_SECONDS,
            http_timeout_seconds=HTTP_TIMEOUT_SECONDS,
            twitter_bearer_token=TWITTER_BEARER_TOKEN,
            youtube_api_key=YOUTUBE_API_KEY,
            instagram_access_token=INSTAGRAM_ACCESS_TOKEN,
            instagram_account_id=INSTAGRAM_ACCOUNT_ID,
            github_token=GITHUB_TOKEN,
            linkedin_posts_endpoint=LINKEDIN_POSTS_ENDPOINT,
        )
