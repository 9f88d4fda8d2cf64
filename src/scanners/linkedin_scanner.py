"""
LinkedIn scan strategy.

LinkedIn exposes no public posts API, so posts are read from a
public-data collector service configured with LINKEDIN_POSTS_ENDPOINT.
The service is expected to answer GET ?profileUrl=&since=&limit= with
either a list of records or {"posts": [...]}.
"""

from datetime import datetime
from typing import Any, Dict, List

import httpx

from src.models.identity_profile import IdentityProfile
from src.utils.constants import NETWORK_LINKEDIN
from src.utils.errors import MalformedResponseError, ScannerConfigurationError
from .base_scanner import BaseNetworkScanner


class LinkedInScanner(BaseNetworkScanner):
    network = NETWORK_LINKEDIN

    async def _fetch_records(
        self,
        client: httpx.AsyncClient,
        profile: IdentityProfile,
        since: datetime,
        max_posts: int,
    ) -> List[Dict[str, Any]]:
        endpoint = self.settings.linkedin_posts_endpoint
        if not endpoint:
            raise ScannerConfigurationError(self.network, "LINKEDIN_POSTS_ENDPOINT is not set")

        payload = await self._get_json(
            client,
            endpoint,
            params={
                'profileUrl': profile.url,
                'since': since.strftime("%Y-%m-%dT%H:%M:%SZ"),
                'limit': max_posts,
            },
        )

        if isinstance(payload, dict):
            payload = payload.get('posts')
        if not isinstance(payload, list):
            raise MalformedResponseError(self.network, "collector response has no posts list")
        return payload
