"""
PersonaVector model - 8-dimension behavioral summary of one person.

Distilled from all classified posts of a person's confirmed profiles and
used as the sole input (besides vendor) of playbook generation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from src.utils.constants import (
    MAX_PERSONA_TOPICS,
    MAX_PERSONA_KEYWORDS,
    MAX_ACTIVITY_WINDOWS,
    MAX_CHANNELS,
    TONE_BALANCED,
    STYLE_FORMAL,
)
from src.utils.date_parser import parse_timestamp, utc_now


@dataclass
class ActivityWindow:
    """A weekday with the hour buckets ("HH:00") the person posted in."""

    day: str
    hours: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'day': self.day, 'hours': list(self.hours)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ActivityWindow':
        return cls(day=data['day'], hours=list(data.get('hours') or []))


@dataclass
class PersonaMetadata:
    """Extraction bookkeeping: volume, mean confidence, timestamp."""

    total_posts: int = 0
    avg_confidence: float = 0.0
    extracted_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_posts': self.total_posts,
            'avg_confidence': self.avg_confidence,
            'extracted_at': self.extracted_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PersonaMetadata':
        return cls(
            total_posts=int(data.get('total_posts', 0)),
            avg_confidence=float(data.get('avg_confidence', 0.0)),
            extracted_at=parse_timestamp(data['extracted_at']) if data.get('extracted_at') else utc_now(),
        )


@dataclass
class PersonaVector:
    """
    Behavioral persona of one person.

    Dimensions:
        topics: Up to 5 topics, most frequent first
        objections: Up to 5 objection keywords, first-occurrence order
        tone: "optimistic", "critical", "neutral" or "balanced"
        activity_windows: Up to 3 weekdays with the most spread-out activity
        channel_preference: Up to 3 networks ranked by post volume
        pain_points: Up to 5 pain-point keywords
        value_triggers: Up to 5 value-trigger keywords
        style: Dominant communication style

    Metadata:
        metadata: Post count, mean classification confidence, timestamp
    """

    topics: List[str] = field(default_factory=list)
    objections: List[str] = field(default_factory=list)
    tone: str = TONE_BALANCED
    activity_windows: List[ActivityWindow] = field(default_factory=list)
    channel_preference: List[str] = field(default_factory=list)
    pain_points: List[str] = field(default_factory=list)
    value_triggers: List[str] = field(default_factory=list)
    style: str = STYLE_FORMAL
    metadata: PersonaMetadata = field(default_factory=PersonaMetadata)

    def __post_init__(self) -> None:
        """
        Validate dimension sizes.

        Raises:
            ValueError: If any list dimension exceeds its cap
        """
        limits = [
            ('topics', self.topics, MAX_PERSONA_TOPICS),
            ('objections', self.objections, MAX_PERSONA_KEYWORDS),
            ('activity_windows', self.activity_windows, MAX_ACTIVITY_WINDOWS),
            ('channel_preference', self.channel_preference, MAX_CHANNELS),
            ('pain_points', self.pain_points, MAX_PERSONA_KEYWORDS),
            ('value_triggers', self.value_triggers, MAX_PERSONA_KEYWORDS),
        ]
        for name, values, limit in limits:
            if len(values) > limit:
                raise ValueError(f"{name} holds at most {limit} items, got: {len(values)}")

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize persona to dictionary for JSON output.

        Returns:
            Dictionary representation of the persona vector
        """
        return {
            'topics': list(self.topics),
            'objections': list(self.objections),
            'tone': self.tone,
            'activity_windows': [w.to_dict() for w in self.activity_windows],
            'channel_preference': list(self.channel_preference),
            'pain_points': list(self.pain_points),
            'value_triggers': list(self.value_triggers),
            'style': self.style,
            'metadata': self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PersonaVector':
        """
        Create PersonaVector from dictionary.

        Args:
            data: Dictionary with persona fields

        Returns:
            New PersonaVector instance
        """
        return cls(
            topics=list(data.get('topics') or []),
            objections=list(data.get('objections') or []),
            tone=data.get('tone', TONE_BALANCED),
            activity_windows=[
                ActivityWindow.from_dict(w) for w in data.get('activity_windows') or []
            ],
            channel_preference=list(data.get('channel_preference') or []),
            pain_points=list(data.get('pain_points') or []),
            value_triggers=list(data.get('value_triggers') or []),
            style=data.get('style', STYLE_FORMAL),
            metadata=PersonaMetadata.from_dict(data.get('metadata') or {}),
        )

    @classmethod
    def empty(cls, extracted_at: Optional[datetime] = None) -> 'PersonaVector':
        """
        Create an all-default PersonaVector for a person with no posts.

        Returns:
            PersonaVector with empty lists, balanced tone, formal style
        """
        return cls(metadata=PersonaMetadata(
            total_posts=0,
            avg_confidence=0.0,
            extracted_at=extracted_at or utc_now(),
        ))
