"""
Identity models - profile candidates and scored identity profiles.

A Candidate is an unconfirmed guess that a network handle belongs to a
person. Once scored it becomes an IdentityProfile, whose status decides
whether the network scanner may touch it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Tuple
from uuid import UUID, uuid4

from src.utils.constants import (
    SUPPORTED_NETWORKS,
    ORIGIN_PROVIDED,
    ORIGIN_HEURISTIC,
    VALID_STATUSES,
    STATUS_CONFIRMED,
)
from src.utils.date_parser import parse_timestamp, utc_now


@dataclass
class Candidate:
    """
    A plausible profile for a person on one network.

    Attributes:
        network: Network identifier (linkedin, twitter, ...)
        handle: Username on that network
        url: Canonical profile URL
        evidence_count: Heuristic evidence count fixed at generation time
        origin_tag: "provided" (caller supplied the URL) or "heuristic"
        metadata: Free-form evidence details
    """

    network: str
    handle: str
    url: str
    evidence_count: int
    origin_tag: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """
        Validate candidate fields.

        Raises:
            ValueError: If network or origin_tag is unknown
            ValueError: If evidence_count is negative
        """
        if self.network not in SUPPORTED_NETWORKS:
            raise ValueError(
                f"Unsupported network '{self.network}'. Must be one of: {SUPPORTED_NETWORKS}"
            )
        if self.origin_tag not in (ORIGIN_PROVIDED, ORIGIN_HEURISTIC):
            raise ValueError(f"Invalid origin tag: {self.origin_tag}")
        if self.evidence_count < 0:
            raise ValueError(f"evidence_count cannot be negative: {self.evidence_count}")

    @property
    def is_provided(self) -> bool:
        return self.origin_tag == ORIGIN_PROVIDED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'network': self.network,
            'handle': self.handle,
            'url': self.url,
            'evidence_count': self.evidence_count,
            'origin_tag': self.origin_tag,
            'metadata': dict(self.metadata),
        }


@dataclass
class IdentityProfile:
    """
    A scored profile linked to a person.

    One per (person, network, url). Re-resolution updates confidence,
    status and metadata in place and keeps profile_id.

    Attributes:
        person_id: Owning person
        network: Network identifier
        handle: Username on the network
        url: Canonical profile URL
        confidence: Identity confidence, 0.0-1.0
        status: "pending", "probable" or "confirmed"
        evidence_count: Evidence count the confidence was computed from
        metadata: Free-form evidence details (origin, company, ...)
        profile_id: Stable identifier
        updated_at: Last time the profile was (re)scored

    Properties:
        is_confirmed: Whether the profile may be scanned
        natural_key: (person_id, network, url)
    """

    person_id: UUID
    network: str
    handle: str
    url: str
    confidence: float
    status: str
    evidence_count: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)
    profile_id: UUID = field(default_factory=uuid4)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """
        Validate profile fields.

        Raises:
            ValueError: If confidence is outside 0-1
            ValueError: If status is unknown
        """
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be between 0 and 1, got: {self.confidence}")
        if self.status not in VALID_STATUSES:
            raise ValueError(
                f"Invalid status '{self.status}'. Must be one of: {VALID_STATUSES}"
            )

    @property
    def is_confirmed(self) -> bool:
        return self.status == STATUS_CONFIRMED

    @property
    def natural_key(self) -> Tuple[UUID, str, str]:
        return (self.person_id, self.network, self.url)

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize profile to dictionary for JSON output.

        Returns:
            Dictionary representation of the profile
        """
        return {
            'profile_id': str(self.profile_id),
            'person_id': str(self.person_id),
            'network': self.network,
            'handle': self.handle,
            'url': self.url,
            'confidence': self.confidence,
            'status': self.status,
            'evidence_count': self.evidence_count,
            'metadata': dict(self.metadata),
            'updated_at': self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IdentityProfile':
        """
        Create IdentityProfile from dictionary.

        Args:
            data: Dictionary with profile fields

        Returns:
            New IdentityProfile instance
        """
        return cls(
            profile_id=UUID(str(data['profile_id'])),
            person_id=UUID(str(data['person_id'])),
            network=data['network'],
            handle=data['handle'],
            url=data['url'],
            confidence=float(data['confidence']),
            status=data['status'],
            evidence_count=int(data.get('evidence_count', 0)),
            metadata=dict(data.get('metadata') or {}),
            updated_at=parse_timestamp(data['updated_at']),
        )
