"""
GitHub scan strategy (public events REST API).

Public activity events stand in for posts: each event is rendered as a
one-line sentence so the classifier can read it like any other text.
No token is required; GITHUB_TOKEN raises the upstream quota.
"""

from datetime import datetime
from typing import Any, Dict, List

import httpx

from src.models.identity_profile import IdentityProfile
from src.utils.constants import GITHUB_API_URL, NETWORK_GITHUB
from src.utils.errors import MalformedResponseError
from .base_scanner import BaseNetworkScanner


MAX_PAGE_SIZE = 100


class GitHubScanner(BaseNetworkScanner):
    network = NETWORK_GITHUB

    async def _fetch_records(
        self,
        client: httpx.AsyncClient,
        profile: IdentityProfile,
        since: datetime,
        max_posts: int,
    ) -> List[Dict[str, Any]]:
        headers = {'Accept': 'application/vnd.github+json'}
        if self.settings.github_token:
            headers['Authorization'] = f"Bearer {self.settings.github_token}"

        events = await self._get_json(
            client,
            f"{GITHUB_API_URL}/users/{profile.handle}/events/public",
            params={'per_page': min(max_posts, MAX_PAGE_SIZE)},
            headers=headers,
        )
        if not isinstance(events, list):
            raise MalformedResponseError(self.network, "events response is not a list")

        records = []
        for event in events:
            if not isinstance(event, dict):
                records.append(event)
                continue
            repo = (event.get('repo') or {}).get('name', '')
            records.append({
                'id': event.get('id'),
                'postedAt': event.get('created_at'),
                'text': format_github_event(event),
                'link': f"https://github.com/{repo}#event-{event.get('id')}",
                'language': 'en',
            })
        return records


def format_github_event(event: Dict[str, Any]) -> str:
    """
    Render a GitHub event as readable text.

    Examples:
        >>> format_github_event({"type": "WatchEvent", "repo": {"name": "acme/erp"}})
        'Starred acme/erp'
    """
    event_type = event.get('type')
    repo = (event.get('repo') or {}).get('name')
    payload = event.get('payload') or {}

    if event_type == 'PushEvent':
        return f"Pushed {len(payload.get('commits') or [])} commits to {repo}"
    elif event_type == 'PullRequestEvent':
        return f"{payload.get('action')} pull request in {repo}"
    elif event_type == 'IssuesEvent':
        return f"{payload.get('action')} issue in {repo}"
    elif event_type == 'CreateEvent':
        return f"Created {payload.get('ref_type')} in {repo}"
    elif event_type == 'WatchEvent':
        return f"Starred {repo}"
    return f"{event_type} in {repo}"
