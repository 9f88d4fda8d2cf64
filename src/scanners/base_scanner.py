"""
Base class for network scan strategies.

A strategy fetches raw records for one profile and normalizes them into
Posts. Records share one shape regardless of the network:

    {"id": ..., "postedAt": ..., "text": ..., "link": ...,
     "language": ..., "metrics": {"likes": ..., "shares": ..., "comments": ...}}

A collaborator fetcher `async (url) -> records` can be injected to replace
the HTTP strategy (test doubles, scraping services).
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from src.config import ScannerSettings
from src.models.identity_profile import IdentityProfile
from src.models.post import Post, PostMetrics
from src.utils.date_parser import parse_timestamp
from src.utils.errors import MalformedResponseError
from src.utils.seed_validator import SeedValidator
from .rate_limiter import NetworkRateLimiter


logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[List[Dict[str, Any]]]]


class BaseNetworkScanner(ABC):
    """
    Abstract scan strategy for one network.

    Subclasses set `network` and implement `_fetch_records`. Every
    outbound request goes through the network's rate limiter.

    Attributes:
        settings: Scanner settings (credentials, endpoints, timeouts)
        fetcher: Optional injected fetcher replacing the HTTP strategy
        rate_limiter: Limiter shared by every request to this network
    """

    network: str = ""

    def __init__(
        self,
        settings: ScannerSettings,
        rate_limiter: NetworkRateLimiter,
        fetcher: Optional[Fetcher] = None,
    ) -> None:
        self.settings = settings
        self.rate_limiter = rate_limiter
        self.fetcher = fetcher
        self.validator = SeedValidator()

    async def collect(
        self,
        client: httpx.AsyncClient,
        profile: IdentityProfile,
        since: datetime,
        max_posts: int,
        warnings: Optional[List[str]] = None,
    ) -> List[Post]:
        """
        Fetch and normalize posts for a profile.

        Window filtering and truncation are left to the caller; strategies
        only pass `since` and `max_posts` upstream as hints. Skipped records
        are reported into `warnings` when given.

        Raises:
            FetchError: On missing credentials or a malformed payload
            httpx.HTTPError: On transport or HTTP status failures
        """
        if self.fetcher is not None:
            async with self.rate_limiter:
                records = await self.fetcher(profile.url)
        else:
            records = await self._fetch_records(client, profile, since, max_posts)

        if not isinstance(records, list):
            raise MalformedResponseError(
                self.network, f"expected a list of records, got {type(records).__name__}"
            )
        return self.normalize_records(profile, records, warnings)

    @abstractmethod
    async def _fetch_records(
        self,
        client: httpx.AsyncClient,
        profile: IdentityProfile,
        since: datetime,
        max_posts: int,
    ) -> List[Dict[str, Any]]:
        """Fetch raw records from the network's API."""

    def normalize_records(
        self,
        profile: IdentityProfile,
        records: List[Dict[str, Any]],
        warnings: Optional[List[str]] = None,
    ) -> List[Post]:
        """
        Convert records into Posts, skipping malformed ones with a warning.

        Args:
            profile: Profile the records were collected from
            records: Raw records
            warnings: Optional list collecting one message per skipped record

        Returns:
            Posts in record order
        """
        posts = []
        for index, record in enumerate(records):
            try:
                posts.append(self._to_post(profile, record))
            except (KeyError, TypeError, ValueError) as e:
                message = f"[{self.network}] Skipped record {index} from {profile.url}: {e}"
                logger.warning(message)
                if warnings is not None:
                    warnings.append(message)
        return posts

    def _to_post(self, profile: IdentityProfile, record: Dict[str, Any]) -> Post:
        if not isinstance(record, dict):
            raise TypeError(f"record must be an object, got {type(record).__name__}")

        external_id = record.get('id')
        if external_id in (None, ''):
            raise ValueError("record has no id")

        posted_at = record.get('postedAt', record.get('posted_at'))
        text = record.get('text') or ''

        return Post(
            profile_id=profile.profile_id,
            network=self.network,
            external_id=str(external_id),
            posted_at=parse_timestamp(posted_at),
            text=self.validator.truncate_text(str(text)),
            link=record['link'],
            language=record.get('language'),
            metrics=PostMetrics.from_dict(record.get('metrics')),
        )

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Rate-limited GET returning the decoded JSON body.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response
            MalformedResponseError: If the body is not JSON
        """
        async with self.rate_limiter:
            response = await client.get(url, params=params, headers=headers)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(self.network, f"invalid JSON from {url}: {e}") from e
