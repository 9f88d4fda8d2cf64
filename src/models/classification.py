"""
Classification model - transient per-post annotation.

Produced by the text classifier and keyed by post id during a pipeline
run. Only topics, intent and sentiment are written back onto the Post.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Classification:
    """
    Classifier output for one post.

    Attributes:
        topics: Topic labels (order irrelevant, never empty)
        intent: Single intent label
        sentiment: "positive", "negative" or "neutral"
        style: Communication style label, if detected
        confidence: Classification confidence, 0.0-1.0
    """

    topics: Tuple[str, ...]
    intent: str
    sentiment: str
    style: Optional[str]
    confidence: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be between 0 and 1, got: {self.confidence}")
        object.__setattr__(self, 'topics', tuple(self.topics))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'topics': list(self.topics),
            'intent': self.intent,
            'sentiment': self.sentiment,
            'style': self.style,
            'confidence': self.confidence,
        }
