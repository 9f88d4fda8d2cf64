"""Network scanners for confirmed identity profiles."""

from .rate_limiter import NetworkRateLimiter
from .base_scanner import BaseNetworkScanner, Fetcher
from .linkedin_scanner import LinkedInScanner
from .twitter_scanner import TwitterScanner
from .instagram_scanner import InstagramScanner
from .github_scanner import GitHubScanner, format_github_event
from .youtube_scanner import YouTubeScanner
from .network_scanner import NetworkScanner, SCANNER_CLASSES, apply_window

__all__ = [
    'NetworkRateLimiter',
    'BaseNetworkScanner',
    'Fetcher',
    'LinkedInScanner',
    'TwitterScanner',
    'InstagramScanner',
    'GitHubScanner',
    'format_github_event',
    'YouTubeScanner',
    'NetworkScanner',
    'SCANNER_CLASSES',
    'apply_window',
]
