"""
Network scanner - collects recent public posts from confirmed profiles.

Dispatches each profile to the strategy registered for its network,
enforces the shared window/ordering/dedup/truncation contract, and turns
every fetch failure into an empty result plus a recorded warning.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from types import MappingProxyType
from typing import AsyncIterator, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Type

import httpx

from src.config import ScannerSettings
from src.models.identity_profile import IdentityProfile
from src.models.post import Post
from src.models.results import ScanReport
from src.utils.constants import (
    NETWORK_LINKEDIN,
    NETWORK_TWITTER,
    NETWORK_INSTAGRAM,
    NETWORK_GITHUB,
    NETWORK_YOUTUBE,
    RATE_LIMIT_PERIOD_SECONDS,
    SCANNER_USER_AGENT,
)
from src.utils.date_parser import to_utc, utc_now, window_start
from src.utils.errors import InputValidationError, ProfileNotConfirmedError
from .base_scanner import BaseNetworkScanner, Fetcher
from .github_scanner import GitHubScanner
from .instagram_scanner import InstagramScanner
from .linkedin_scanner import LinkedInScanner
from .rate_limiter import NetworkRateLimiter
from .twitter_scanner import TwitterScanner
from .youtube_scanner import YouTubeScanner


logger = logging.getLogger(__name__)


# Closed registry of scan strategies
SCANNER_CLASSES: Mapping[str, Type[BaseNetworkScanner]] = MappingProxyType({
    NETWORK_LINKEDIN: LinkedInScanner,
    NETWORK_TWITTER: TwitterScanner,
    NETWORK_INSTAGRAM: InstagramScanner,
    NETWORK_GITHUB: GitHubScanner,
    NETWORK_YOUTUBE: YouTubeScanner,
})


class NetworkScanner:
    """
    Scanner of confirmed identity profiles.

    Only profiles with status "confirmed" are ever scanned; anything else
    is rejected before any I/O. Each network owns one rate limiter shared
    by all concurrent scans of that network. Failures and warnings are
    returned per call in a ScanReport, never kept on the scanner.

    Example usage:
        scanner = NetworkScanner(settings=ScannerSettings.from_env())
        report = await scanner.scan_profiles(confirmed_profiles)
        print(report.posts, report.failed_profiles, report.warnings)

    Attributes:
        settings: Scanner settings
        strategies: Strategy per network
        rate_limiters: Rate limiter per network
    """

    def __init__(
        self,
        settings: Optional[ScannerSettings] = None,
        fetchers: Optional[Dict[str, Fetcher]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """
        Initialize scanner.

        Args:
            settings: Scanner settings. Defaults to ScannerSettings.from_env().
            fetchers: Optional collaborator fetcher per network, replacing
                      the built-in HTTP strategy for that network
            client: Optional shared httpx.AsyncClient. When omitted, a
                    client is opened per scan call.

        Raises:
            InputValidationError: If a fetcher targets an unknown network
        """
        self.settings = settings or ScannerSettings.from_env()
        fetchers = fetchers or {}

        unknown = sorted(set(fetchers) - set(SCANNER_CLASSES))
        if unknown:
            raise InputValidationError(f"No scan strategy for networks: {unknown}")

        self.rate_limiters: Dict[str, NetworkRateLimiter] = {
            network: NetworkRateLimiter(
                network,
                max_rate=self.settings.rate_limit_per_second,
                period=RATE_LIMIT_PERIOD_SECONDS,
            )
            for network in SCANNER_CLASSES
        }
        self.strategies: Dict[str, BaseNetworkScanner] = {
            network: scanner_cls(
                self.settings,
                rate_limiter=self.rate_limiters[network],
                fetcher=fetchers.get(network),
            )
            for network, scanner_cls in SCANNER_CLASSES.items()
        }
        self._client = client

    async def scan_profile(
        self,
        profile: IdentityProfile,
        window_months: Optional[int] = None,
        max_posts: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ScanReport:
        """
        Scan one confirmed profile under the per-profile deadline.

        Args:
            profile: Profile to scan; must be confirmed
            window_months: Look-back window in months. Defaults to settings.
            max_posts: Maximum posts to return. Defaults to settings.
            now: Window end. Defaults to the current time.

        Returns:
            ScanReport whose posts satisfy since < posted_at <= now, newest
            first, unique by link, at most max_posts. Posts are empty on any
            fetch failure or timeout, which is recorded in failed_profiles.

        Raises:
            ProfileNotConfirmedError: If the profile is not confirmed
            InputValidationError: If window_months or max_posts is invalid
        """
        return await self.scan_profiles([profile], window_months, max_posts, now)

    async def scan_profiles(
        self,
        profiles: Iterable[IdentityProfile],
        window_months: Optional[int] = None,
        max_posts: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> ScanReport:
        """
        Scan several confirmed profiles concurrently and wait for all.

        Each profile runs under its own deadline (scan_timeout_seconds);
        a profile that fails or misses it contributes no posts and is
        recorded in the report's failed_profiles.

        Args:
            profiles: Profiles to scan; all must be confirmed
            window_months: Look-back window in months
            max_posts: Maximum posts per profile
            now: Window end. Defaults to the current time.

        Returns:
            ScanReport with posts unique by (network, link), grouped by
            profile in input order

        Raises:
            ProfileNotConfirmedError: If any profile is not confirmed
            InputValidationError: If window_months or max_posts is invalid
        """
        profiles = list(profiles)
        self._require_confirmed(profiles)
        window_months, max_posts = self._resolve_limits(window_months, max_posts)
        now = to_utc(now) if now is not None else utc_now()

        report = ScanReport()
        if not profiles:
            return report

        logger.info("Scanning %d confirmed profiles (window: %d months)", len(profiles), window_months)

        async with self._client_session() as client:
            results = await asyncio.gather(*[
                self._scan_with_deadline(client, profile, window_months, max_posts, now, report)
                for profile in profiles
            ])

        seen: Set[Tuple[str, str]] = set()
        for posts in results:
            for post in posts:
                key = (post.network, post.link)
                if key in seen:
                    continue
                seen.add(key)
                report.posts.append(post)

        logger.info(
            "Scan finished: %d posts, %d failed profiles",
            len(report.posts), len(report.failed_profiles),
        )
        return report

    async def _scan_with_deadline(
        self,
        client: httpx.AsyncClient,
        profile: IdentityProfile,
        window_months: int,
        max_posts: int,
        now: datetime,
        report: ScanReport,
    ) -> List[Post]:
        try:
            return await asyncio.wait_for(
                self._scan(client, profile, window_months, max_posts, now, report),
                timeout=self.settings.scan_timeout_seconds,
            )
        except asyncio.TimeoutError:
            self._record_failure(
                report, profile, f"timed out after {self.settings.scan_timeout_seconds}s"
            )
            return []

    async def _scan(
        self,
        client: httpx.AsyncClient,
        profile: IdentityProfile,
        window_months: int,
        max_posts: int,
        now: datetime,
        report: ScanReport,
    ) -> List[Post]:
        strategy = self.strategies.get(profile.network)
        if strategy is None:
            message = f"Network '{profile.network}' is not supported, skipping {profile.url}"
            logger.warning(message)
            report.warnings.append(message)
            return []

        since = window_start(now, window_months)
        logger.debug("Scanning %s: %s", profile.network, profile.url)

        try:
            posts = await strategy.collect(client, profile, since, max_posts, report.warnings)
        except Exception as e:
            # Any collaborator error is an empty result for this profile only
            self._record_failure(report, profile, str(e) or type(e).__name__)
            return []

        return apply_window(posts, since, now, max_posts)

    @staticmethod
    def _record_failure(report: ScanReport, profile: IdentityProfile, reason: str) -> None:
        logger.warning(report.record_failure(profile, reason))

    def _resolve_limits(
        self, window_months: Optional[int], max_posts: Optional[int]
    ) -> Tuple[int, int]:
        window_months = self.settings.window_months if window_months is None else window_months
        max_posts = self.settings.max_posts if max_posts is None else max_posts

        if isinstance(window_months, bool) or not isinstance(window_months, int) or window_months <= 0:
            raise InputValidationError(f"window_months must be a positive integer, got: {window_months}")
        if isinstance(max_posts, bool) or not isinstance(max_posts, int) or max_posts <= 0:
            raise InputValidationError(f"max_posts must be a positive integer, got: {max_posts}")
        return window_months, max_posts

    @staticmethod
    def _require_confirmed(profiles: List[IdentityProfile]) -> None:
        for profile in profiles:
            if not profile.is_confirmed:
                raise ProfileNotConfirmedError(str(profile.profile_id), profile.status)

    @asynccontextmanager
    async def _client_session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(
            timeout=self.settings.http_timeout_seconds,
            headers={'User-Agent': SCANNER_USER_AGENT},
        ) as client:
            yield client


def apply_window(posts: List[Post], since: datetime, now: datetime, max_posts: int) -> List[Post]:
    """
    Apply the shared scan contract to a profile's posts.

    Keeps posts with since < posted_at <= now, orders newest first,
    collapses duplicate links (the newest copy wins) and truncates.

    Args:
        posts: Normalized posts from one profile
        since: Window start (exclusive)
        now: Window end (inclusive)
        max_posts: Maximum posts to keep

    Returns:
        Filtered list of posts
    """
    in_window = [p for p in posts if since < p.posted_at <= now]
    in_window.sort(key=lambda p: p.posted_at, reverse=True)

    seen_links: Set[str] = set()
    result = []
    for post in in_window:
        if post.link in seen_links:
            continue
        seen_links.add(post.link)
        result.append(post)
        if len(result) >= max_posts:
            break
    return result
