"""
Post model - a single public post collected from a confirmed profile.

Posts are immutable once stored, except for the classification fields
(topics, intent, sentiment), which are populated exactly once.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Optional, Tuple
from uuid import UUID, NAMESPACE_URL, uuid5

from src.utils.constants import SUPPORTED_NETWORKS
from src.utils.date_parser import parse_timestamp, to_utc


@dataclass
class PostMetrics:
    """Engagement counters; each is optional because networks expose different ones."""

    likes: Optional[int] = None
    shares: Optional[int] = None
    comments: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ('likes', 'shares', 'comments'):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} cannot be negative: {value}")

    @property
    def total_engagement(self) -> int:
        return sum(v for v in (self.likes, self.shares, self.comments) if v is not None)

    def to_dict(self) -> Dict[str, Optional[int]]:
        return {'likes': self.likes, 'shares': self.shares, 'comments': self.comments}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'PostMetrics':
        data = data or {}

        def _count(key: str) -> Optional[int]:
            value = data.get(key)
            return int(value) if value is not None else None

        return cls(likes=_count('likes'), shares=_count('shares'), comments=_count('comments'))


def make_post_id(profile_id: UUID, link: str) -> UUID:
    """Deterministic post id from its natural key (profile, link)."""
    return uuid5(NAMESPACE_URL, f"{profile_id}|{link}")


@dataclass
class Post:
    """
    A public post normalized from any supported network.

    Attributes:
        profile_id: IdentityProfile the post was collected from
        network: Network identifier
        external_id: Id assigned by the network
        posted_at: When the post was published (aware UTC)
        text: Raw post text
        link: Content link; unique per profile
        language: Detected language code, if known
        metrics: Engagement counters
        topics: Classified topics (empty until classified)
        intent: Classified intent (None until classified)
        sentiment: Classified sentiment (None until classified)
        post_id: Deterministic id derived from (profile_id, link)

    Properties:
        is_classified: Whether classification fields are populated
    """

    profile_id: UUID
    network: str
    external_id: str
    posted_at: datetime
    text: str
    link: str
    language: Optional[str] = None
    metrics: PostMetrics = field(default_factory=PostMetrics)
    topics: Tuple[str, ...] = ()
    intent: Optional[str] = None
    sentiment: Optional[str] = None
    post_id: Optional[UUID] = None

    def __post_init__(self) -> None:
        """
        Validate and normalize post data.

        Raises:
            ValueError: If network is unsupported or link is empty
        """
        if self.network not in SUPPORTED_NETWORKS:
            raise ValueError(f"Unsupported network '{self.network}'")
        if not self.link:
            raise ValueError("Post link cannot be empty")

        self.posted_at = to_utc(self.posted_at)
        self.text = self.text or ""
        self.topics = tuple(self.topics)

        if self.post_id is None:
            self.post_id = make_post_id(self.profile_id, self.link)

    @property
    def is_classified(self) -> bool:
        return self.intent is not None

    def with_classification(self, classification) -> 'Post':
        """
        Return a copy with classification fields populated.

        Args:
            classification: Classification for this post

        Returns:
            New Post carrying topics, intent and sentiment

        Raises:
            ValueError: If the post is already classified
        """
        if self.is_classified:
            raise ValueError(f"Post {self.post_id} is already classified")
        return replace(
            self,
            topics=tuple(classification.topics),
            intent=classification.intent,
            sentiment=classification.sentiment,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize post to dictionary for JSON output.

        Returns:
            Dictionary representation of the post
        """
        return {
            'post_id': str(self.post_id),
            'profile_id': str(self.profile_id),
            'network': self.network,
            'external_id': self.external_id,
            'posted_at': self.posted_at.isoformat(),
            'text': self.text,
            'link': self.link,
            'language': self.language,
            'metrics': self.metrics.to_dict(),
            'topics': list(self.topics),
            'intent': self.intent,
            'sentiment': self.sentiment,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Post':
        """
        Create Post from dictionary.

        Args:
            data: Dictionary with post fields

        Returns:
            New Post instance
        """
        post_id = data.get('post_id')
        return cls(
            post_id=UUID(str(post_id)) if post_id else None,
            profile_id=UUID(str(data['profile_id'])),
            network=data['network'],
            external_id=str(data.get('external_id', '')),
            posted_at=parse_timestamp(data['posted_at']),
            text=data.get('text', ''),
            link=data['link'],
            language=data.get('language'),
            metrics=PostMetrics.from_dict(data.get('metrics')),
            topics=tuple(data.get('topics') or ()),
            intent=data.get('intent'),
            sentiment=data.get('sentiment'),
        )
