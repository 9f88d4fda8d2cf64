"""
YouTube scan strategy (Data API v3).

Resolves the channel by handle, then lists its uploads playlist. Video
title and description form the post text. Requires YOUTUBE_API_KEY.
"""

from datetime import datetime
from typing import Any, Dict, List

import httpx

from src.models.identity_profile import IdentityProfile
from src.utils.constants import NETWORK_YOUTUBE, YOUTUBE_API_URL
from src.utils.errors import MalformedResponseError, ScannerConfigurationError
from .base_scanner import BaseNetworkScanner


MAX_PAGE_SIZE = 50


class YouTubeScanner(BaseNetworkScanner):
    network = NETWORK_YOUTUBE

    async def _fetch_records(
        self,
        client: httpx.AsyncClient,
        profile: IdentityProfile,
        since: datetime,
        max_posts: int,
    ) -> List[Dict[str, Any]]:
        api_key = self.settings.youtube_api_key
        if not api_key:
            raise ScannerConfigurationError(self.network, "YOUTUBE_API_KEY is not set")

        channels = await self._get_json(
            client,
            f"{YOUTUBE_API_URL}/channels",
            params={'part': 'contentDetails', 'forHandle': f"@{profile.handle}", 'key': api_key},
        )
        try:
            uploads = channels['items'][0]['contentDetails']['relatedPlaylists']['uploads']
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(
                self.network, f"channel '@{profile.handle}' has no uploads playlist"
            ) from e

        playlist = await self._get_json(
            client,
            f"{YOUTUBE_API_URL}/playlistItems",
            params={
                'part': 'snippet,contentDetails',
                'playlistId': uploads,
                'maxResults': min(max_posts, MAX_PAGE_SIZE),
                'key': api_key,
            },
        )
        if not isinstance(playlist, dict):
            raise MalformedResponseError(self.network, "playlist response is not an object")

        return [self._video_record(item) for item in playlist.get('items') or []]

    @staticmethod
    def _video_record(item: Dict[str, Any]) -> Dict[str, Any]:
        snippet = item.get('snippet') or {}
        details = item.get('contentDetails') or {}
        video_id = details.get('videoId')
        text = "\n".join(
            part for part in (snippet.get('title'), snippet.get('description')) if part
        )
        return {
            'id': video_id,
            'postedAt': details.get('videoPublishedAt') or snippet.get('publishedAt'),
            'text': text,
            'link': f"https://www.youtube.com/watch?v={video_id}",
            'language': snippet.get('defaultLanguage'),
        }
