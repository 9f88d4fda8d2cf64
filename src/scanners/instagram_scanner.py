"""
Instagram scan strategy (Graph API business discovery).

Business discovery lets an authenticated business account read another
professional account's public media by username. Personal accounts are
not reachable this way and come back as an upstream error.
"""

from datetime import datetime
from typing import Any, Dict, List

import httpx

from src.models.identity_profile import IdentityProfile
from src.utils.constants import INSTAGRAM_GRAPH_URL, NETWORK_INSTAGRAM
from src.utils.errors import MalformedResponseError, ScannerConfigurationError
from .base_scanner import BaseNetworkScanner


MEDIA_FIELDS = "id,caption,timestamp,permalink,like_count,comments_count"


class InstagramScanner(BaseNetworkScanner):
    network = NETWORK_INSTAGRAM

    async def _fetch_records(
        self,
        client: httpx.AsyncClient,
        profile: IdentityProfile,
        since: datetime,
        max_posts: int,
    ) -> List[Dict[str, Any]]:
        token = self.settings.instagram_access_token
        account_id = self.settings.instagram_account_id
        if not token or not account_id:
            raise ScannerConfigurationError(
                self.network, "INSTAGRAM_ACCESS_TOKEN and INSTAGRAM_ACCOUNT_ID must be set"
            )

        fields = (
            f"business_discovery.username({profile.handle})"
            f"{{media.limit({max_posts}){{{MEDIA_FIELDS}}}}}"
        )
        payload = await self._get_json(
            client,
            f"{INSTAGRAM_GRAPH_URL}/{account_id}",
            params={'fields': fields, 'access_token': token},
        )

        try:
            media = payload['business_discovery']['media'].get('data') or []
        except (KeyError, TypeError, AttributeError) as e:
            raise MalformedResponseError(self.network, f"unexpected business discovery payload: {e}") from e

        return [
            {
                'id': item.get('id'),
                'postedAt': item.get('timestamp'),
                'text': item.get('caption') or '',
                'link': item.get('permalink'),
                'metrics': {
                    'likes': item.get('like_count'),
                    'comments': item.get('comments_count'),
                },
            }
            for item in media
        ]
