"""
Twitter/X scan strategy (API v2).

Two calls per profile: resolve the username to a user id, then read the
user's timeline since the window start. Requires TWITTER_BEARER_TOKEN.
"""

from datetime import datetime
from typing import Any, Dict, List

import httpx

from src.models.identity_profile import IdentityProfile
from src.utils.constants import NETWORK_TWITTER, TWITTER_API_URL
from src.utils.errors import MalformedResponseError, ScannerConfigurationError
from .base_scanner import BaseNetworkScanner


# API v2 bounds for max_results on the timeline endpoint
MIN_PAGE_SIZE = 5
MAX_PAGE_SIZE = 100


class TwitterScanner(BaseNetworkScanner):
    network = NETWORK_TWITTER

    async def _fetch_records(
        self,
        client: httpx.AsyncClient,
        profile: IdentityProfile,
        since: datetime,
        max_posts: int,
    ) -> List[Dict[str, Any]]:
        token = self.settings.twitter_bearer_token
        if not token:
            raise ScannerConfigurationError(self.network, "TWITTER_BEARER_TOKEN is not set")
        headers = {'Authorization': f"Bearer {token}"}

        user = await self._get_json(
            client, f"{TWITTER_API_URL}/users/by/username/{profile.handle}", headers=headers
        )
        user_id = (user.get('data') or {}).get('id') if isinstance(user, dict) else None
        if not user_id:
            raise MalformedResponseError(self.network, f"user '{profile.handle}' not found")

        timeline = await self._get_json(
            client,
            f"{TWITTER_API_URL}/users/{user_id}/tweets",
            params={
                'max_results': max(MIN_PAGE_SIZE, min(max_posts, MAX_PAGE_SIZE)),
                'start_time': since.strftime("%Y-%m-%dT%H:%M:%SZ"),
                'tweet.fields': 'created_at,lang,public_metrics',
            },
            headers=headers,
        )
        if not isinstance(timeline, dict):
            raise MalformedResponseError(self.network, "timeline response is not an object")

        return [self._tweet_record(profile.handle, tweet) for tweet in timeline.get('data') or []]

    @staticmethod
    def _tweet_record(handle: str, tweet: Dict[str, Any]) -> Dict[str, Any]:
        metrics = tweet.get('public_metrics') or {}
        tweet_id = tweet.get('id')
        return {
            'id': tweet_id,
            'postedAt': tweet.get('created_at'),
            'text': tweet.get('text', ''),
            'link': f"https://twitter.com/{handle}/status/{tweet_id}",
            'language': tweet.get('lang'),
            'metrics': {
                'likes': metrics.get('like_count'),
                'shares': metrics.get('retweet_count'),
                'comments': metrics.get('reply_count'),
            },
        }
