"""
Persona extractor for building behavioral persona vectors.

Distills a person's classified posts into eight dimensions: topics,
objections, tone, activity windows, channel preference, pain points,
value triggers and communication style.
"""

from collections import Counter
from datetime import datetime
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
from uuid import UUID

from src.models.classification import Classification
from src.models.persona_vector import ActivityWindow, PersonaMetadata, PersonaVector
from src.models.post import Post
from src.utils.constants import (
    MAX_PERSONA_TOPICS,
    MAX_PERSONA_KEYWORDS,
    MAX_ACTIVITY_WINDOWS,
    MAX_CHANNELS,
    SENTIMENT_POSITIVE,
    SENTIMENT_NEGATIVE,
    SENTIMENT_NEUTRAL,
    STYLE_FORMAL,
    TONE_OPTIMISTIC,
    TONE_CRITICAL,
    TONE_NEUTRAL,
    TONE_BALANCED,
    TONE_DOMINANCE_RATIO,
    WEEKDAY_NAMES,
)
from src.utils.date_parser import hour_bucket, to_utc, utc_now
from src.utils.keyword_tables import PersonaTables, DEFAULT_PERSONA_TABLES


class PersonaExtractor:
    """
    Extractor of persona vectors from posts and their classifications.

    Total function: any input, including no posts at all, yields a valid
    PersonaVector. Ties are always broken by first appearance in the
    supplied post order, so the result is deterministic.

    Example usage:
        extractor = PersonaExtractor()
        persona = extractor.extract(posts, classifications)
    """

    def __init__(self, tables: PersonaTables = DEFAULT_PERSONA_TABLES) -> None:
        self.tables = tables

    def extract(
        self,
        posts: Sequence[Post],
        classifications: Mapping[UUID, Classification],
        now: Optional[datetime] = None,
    ) -> PersonaVector:
        """
        Extract a persona vector.

        Args:
            posts: Posts of all confirmed profiles of one person
            classifications: Mapping of post_id -> Classification.
                             Posts without an entry only feed the
                             text-based and timing dimensions.
            now: Extraction timestamp. Defaults to the current time.

        Returns:
            PersonaVector with metadata.total_posts == len(posts)
        """
        extracted_at = to_utc(now) if now is not None else utc_now()
        if not posts:
            return PersonaVector.empty(extracted_at=extracted_at)

        matched = [
            classifications[post.post_id]
            for post in posts
            if post.post_id in classifications
        ]

        return PersonaVector(
            topics=self._rank_topics(matched),
            objections=self._extract_keywords(posts, self.tables.objections),
            tone=self._determine_tone(c.sentiment for c in matched),
            activity_windows=self._extract_activity_windows(posts),
            channel_preference=self._rank_channels(posts),
            pain_points=self._extract_keywords(posts, self.tables.pain_points),
            value_triggers=self._extract_keywords(posts, self.tables.value_triggers),
            style=self._dominant_style(matched),
            metadata=PersonaMetadata(
                total_posts=len(posts),
                avg_confidence=self._average_confidence(matched),
                extracted_at=extracted_at,
            ),
        )

    def _rank_topics(self, classifications: List[Classification]) -> List[str]:
        # Counter.most_common keeps insertion order among equal counts
        counts = Counter(topic for c in classifications for topic in c.topics)
        return [topic for topic, _ in counts.most_common(MAX_PERSONA_TOPICS)]

    def _extract_keywords(self, posts: Sequence[Post], keywords: Sequence[str]) -> List[str]:
        """
        Collect distinct table keywords found in post text.

        Posts are scanned in order and each post's text is tested against
        the table in table order; the first five distinct hits are kept.
        """
        found: Dict[str, None] = {}
        for post in posts:
            text = post.text.lower()
            for keyword in keywords:
                if keyword not in found and keyword.lower() in text:
                    found[keyword] = None
                    if len(found) == MAX_PERSONA_KEYWORDS:
                        return list(found)
        return list(found)

    def _determine_tone(self, sentiments) -> str:
        """
        Map sentiment counts to a tone.

        optimistic: positive > 1.5 x negative
        critical:   negative > 1.5 x positive
        neutral:    neutral > positive + negative
        balanced:   otherwise
        """
        counts = Counter(sentiments)
        positive = counts[SENTIMENT_POSITIVE]
        negative = counts[SENTIMENT_NEGATIVE]
        neutral = counts[SENTIMENT_NEUTRAL]

        if positive > negative * TONE_DOMINANCE_RATIO:
            return TONE_OPTIMISTIC
        if negative > positive * TONE_DOMINANCE_RATIO:
            return TONE_CRITICAL
        if neutral > positive + negative:
            return TONE_NEUTRAL
        return TONE_BALANCED

    def _extract_activity_windows(self, posts: Sequence[Post]) -> List[ActivityWindow]:
        """
        Weekdays with the most distinct posting hours.

        Returns:
            Up to 3 windows, most distinct hours first, hours sorted
        """
        day_hours: Dict[str, set] = {}
        for post in posts:
            posted_at = to_utc(post.posted_at)
            day = WEEKDAY_NAMES[posted_at.weekday()]
            day_hours.setdefault(day, set()).add(hour_bucket(posted_at))

        # sorted() is stable, so equal counts keep first-seen day order
        ranked: List[Tuple[str, set]] = sorted(
            day_hours.items(), key=lambda item: len(item[1]), reverse=True
        )
        return [
            ActivityWindow(day=day, hours=sorted(hours))
            for day, hours in ranked[:MAX_ACTIVITY_WINDOWS]
        ]

    def _rank_channels(self, posts: Sequence[Post]) -> List[str]:
        counts = Counter(post.network for post in posts)
        return [network for network, _ in counts.most_common(MAX_CHANNELS)]

    def _dominant_style(self, classifications: List[Classification]) -> str:
        styles = Counter(c.style for c in classifications if c.style)
        if not styles:
            return STYLE_FORMAL
        return styles.most_common(1)[0][0]

    def _average_confidence(self, classifications: List[Classification]) -> float:
        if not classifications:
            return 0.0
        return round(sum(c.confidence for c in classifications) / len(classifications), 4)


# Module-level convenience function
def extract_persona(
    posts: Sequence[Post],
    classifications: Mapping[UUID, Classification],
) -> PersonaVector:
    """
    Extract a persona vector.

    Convenience function using default extractor.

    Args:
        posts: Posts to summarize
        classifications: Mapping of post_id -> Classification

    Returns:
        PersonaVector
    """
    extractor = PersonaExtractor()
    return extractor.extract(posts, classifications)
