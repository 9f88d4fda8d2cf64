"""
Text classifier for public posts using keyword tables.

Labels each post with topics, one intent, one sentiment, a communication
style and a confidence value. Rule-based and deterministic: the same text
and tables always produce the same classification.
"""

import re
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from src.models.classification import Classification
from src.models.post import Post
from src.utils.constants import (
    INTENT_OTHER,
    SENTIMENT_POSITIVE,
    SENTIMENT_NEGATIVE,
    SENTIMENT_NEUTRAL,
    STYLE_DIRECT,
    STYLE_FORMAL,
    CLASSIFICATION_BASE_CONFIDENCE,
    SUBSTANTIAL_TEXT_LENGTH,
    SUBSTANTIAL_TEXT_BONUS,
    DETAILED_TEXT_LENGTH,
    DETAILED_TEXT_BONUS,
    KEYWORD_HIT_BONUS,
    MAX_KEYWORD_BONUS,
    DIRECT_STYLE_MAX_LENGTH,
    DIRECT_STYLE_MAX_SEGMENTS,
)
from src.utils.keyword_tables import ClassifierTables, DEFAULT_CLASSIFIER_TABLES


class TextClassifier:
    """
    Keyword-based classifier for post text.

    All keyword matching is a case-insensitive substring test.

    Rules:
    - Topics: every topic with a keyword hit, in table order; none -> "General"
    - Intent: first intent table with a hit (buying_signal, complaint,
      question, announcement); none -> "other"
    - Sentiment: positive vs negative hit counts; tie -> "neutral"
    - Style: formal, technical, humor patterns in order, then short
      single-sentence text -> "direct"; default "formal"

    Example usage:
        classifier = TextClassifier()
        result = classifier.classify("We need a quote for a new ERP")
        # topics=('ERP',), intent='buying_signal'
    """

    def __init__(self, tables: ClassifierTables = DEFAULT_CLASSIFIER_TABLES) -> None:
        """
        Initialize classifier with keyword tables and compiled style patterns.

        Args:
            tables: Keyword tables. Defaults to the built-in bilingual tables.
        """
        self.tables = tables
        self._style_patterns = [
            (style, re.compile(pattern, re.IGNORECASE))
            for style, pattern in tables.style_patterns
        ]
        # Flattened keyword list for confidence scoring
        self._all_keywords: List[str] = [
            keyword.lower()
            for keywords in list(tables.topics.values()) + list(tables.intents.values())
            for keyword in keywords
        ] + [k.lower() for k in tables.positive] + [k.lower() for k in tables.negative]

    def classify(self, text: str) -> Classification:
        """
        Classify a single text.

        Args:
            text: Raw post text (may be empty)

        Returns:
            Classification with topics, intent, sentiment, style, confidence

        Examples:
            >>> TextClassifier().classify("").topics
            ('General',)
        """
        text = (text or "").lower()
        return Classification(
            topics=tuple(self._extract_topics(text)),
            intent=self._detect_intent(text),
            sentiment=self._analyze_sentiment(text),
            style=self._detect_style(text),
            confidence=self._calculate_confidence(text),
        )

    def classify_post(self, post: Post) -> Classification:
        return self.classify(post.text)

    def classify_batch(self, posts: Iterable[Post]) -> Dict[UUID, Classification]:
        """
        Classify many posts.

        Args:
            posts: Posts to classify

        Returns:
            Mapping of post_id -> Classification, in input order
        """
        return {post.post_id: self.classify_post(post) for post in posts}

    def _extract_topics(self, text: str) -> List[str]:
        topics = [
            topic
            for topic, keywords in self.tables.topics.items()
            if any(keyword.lower() in text for keyword in keywords)
        ]
        return topics or [self.tables.default_topic]

    def _detect_intent(self, text: str) -> str:
        # Table order is the tie-break
        for intent, keywords in self.tables.intents.items():
            if any(keyword.lower() in text for keyword in keywords):
                return intent
        return INTENT_OTHER

    def _analyze_sentiment(self, text: str) -> str:
        positive = sum(1 for keyword in self.tables.positive if keyword.lower() in text)
        negative = sum(1 for keyword in self.tables.negative if keyword.lower() in text)

        if positive > negative:
            return SENTIMENT_POSITIVE
        if negative > positive:
            return SENTIMENT_NEGATIVE
        return SENTIMENT_NEUTRAL

    def _detect_style(self, text: str) -> str:
        for style, pattern in self._style_patterns:
            if pattern.search(text):
                return style

        if len(text.split('.')) <= DIRECT_STYLE_MAX_SEGMENTS and len(text) < DIRECT_STYLE_MAX_LENGTH:
            return STYLE_DIRECT

        return STYLE_FORMAL

    def _calculate_confidence(self, text: str) -> float:
        """
        Confidence from text length and keyword coverage.

        0.5 base, +0.2 above 50 characters, +0.1 above 150 characters,
        +0.05 per keyword hit across all tables (bonus capped at 0.2).
        """
        confidence = CLASSIFICATION_BASE_CONFIDENCE

        if len(text) > SUBSTANTIAL_TEXT_LENGTH:
            confidence += SUBSTANTIAL_TEXT_BONUS
        if len(text) > DETAILED_TEXT_LENGTH:
            confidence += DETAILED_TEXT_BONUS

        hits = sum(1 for keyword in self._all_keywords if keyword in text)
        confidence += min(hits * KEYWORD_HIT_BONUS, MAX_KEYWORD_BONUS)

        return round(min(confidence, 1.0), 4)

    def generate_summary(self, classifications: Iterable[Classification]) -> Dict[str, Any]:
        """
        Summarize a set of classifications.

        Args:
            classifications: Classifications to summarize

        Returns:
            Dictionary with:
            - top_topics: up to 5 {"topic", "count"} entries, most frequent first
            - dominant_intent: most common intent ("other" when empty)
            - overall_sentiment: most common sentiment ("neutral" when empty)
            - avg_confidence: mean confidence (0.0 when empty)
        """
        classifications = list(classifications)

        topic_counts = Counter(topic for c in classifications for topic in c.topics)
        intent_counts = Counter(c.intent for c in classifications)
        sentiment_counts = Counter({
            SENTIMENT_POSITIVE: 0,
            SENTIMENT_NEUTRAL: 0,
            SENTIMENT_NEGATIVE: 0,
        })
        sentiment_counts.update(c.sentiment for c in classifications)

        avg_confidence = 0.0
        if classifications:
            avg_confidence = round(
                sum(c.confidence for c in classifications) / len(classifications), 4
            )

        return {
            'top_topics': [
                {'topic': topic, 'count': count}
                for topic, count in topic_counts.most_common(5)
            ],
            'dominant_intent': intent_counts.most_common(1)[0][0] if intent_counts else INTENT_OTHER,
            'overall_sentiment': (
                sentiment_counts.most_common(1)[0][0] if classifications else SENTIMENT_NEUTRAL
            ),
            'avg_confidence': avg_confidence,
        }


# Module-level convenience function
_default_classifier: Optional[TextClassifier] = None


def classify_text(text: str) -> Classification:
    """
    Classify text using the default classifier.

    Args:
        text: Post text to classify

    Returns:
        Classification
    """
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = TextClassifier()
    return _default_classifier.classify(text)
