"""
Identity scorer for profile candidates.

Turns a candidate's evidence into a confidence value and a discrete
status. This is the single decision point gating which profiles the
network scanner may touch.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Optional
from uuid import UUID

from src.models.identity_profile import Candidate, IdentityProfile
from src.utils.constants import (
    HIGH_TRUST_NETWORKS,
    CONFIDENCE_BASE,
    CONFIDENCE_BONUS_PROVIDED,
    CONFIDENCE_BONUS_EVIDENCE,
    CONFIDENCE_BONUS_HIGH_TRUST,
    CONFIDENCE_CAP,
    CONFIRMED_THRESHOLD,
    PROBABLE_THRESHOLD,
    MIN_EVIDENCE_FOR_CONFIRMED,
    STATUS_CONFIRMED,
    STATUS_PROBABLE,
    STATUS_PENDING,
)
from src.utils.date_parser import utc_now


@dataclass(frozen=True)
class IdentityScore:
    """Confidence and status for one candidate."""

    confidence: float
    status: str


class IdentityScorer:
    """
    Scorer for identity candidates.

    Confidence:
        0.30 base
      + 0.50 if the URL was provided by the caller
      + 0.20 if evidence count >= 2
      + 0.15 if the network is high-trust
      capped at 1.0

    Status (pure function of confidence and evidence count):
        confirmed: confidence >= 0.85 and evidence >= 2
        probable:  confidence >= 0.60
        pending:   otherwise

    Example usage:
        scorer = IdentityScorer()
        score = scorer.score(candidate)
    """

    def __init__(self, high_trust_networks: Optional[FrozenSet[str]] = None) -> None:
        self.high_trust_networks = (
            HIGH_TRUST_NETWORKS if high_trust_networks is None else frozenset(high_trust_networks)
        )

    def score(self, candidate: Candidate) -> IdentityScore:
        """
        Score a candidate.

        Args:
            candidate: Candidate to score

        Returns:
            IdentityScore with confidence and status
        """
        confidence = self.calculate_confidence(candidate)
        return IdentityScore(
            confidence=confidence,
            status=determine_status(confidence, candidate.evidence_count),
        )

    def calculate_confidence(self, candidate: Candidate) -> float:
        """
        Calculate identity confidence for a candidate.

        The evidence bonus uses the count fixed at generation time, not
        a count of fields validated later.

        Returns:
            Confidence from 0.0 to 1.0
        """
        confidence = CONFIDENCE_BASE

        if candidate.is_provided:
            confidence += CONFIDENCE_BONUS_PROVIDED

        if candidate.evidence_count >= MIN_EVIDENCE_FOR_CONFIRMED:
            confidence += CONFIDENCE_BONUS_EVIDENCE

        if candidate.network in self.high_trust_networks:
            confidence += CONFIDENCE_BONUS_HIGH_TRUST

        return round(min(confidence, CONFIDENCE_CAP), 4)

    def build_profile(
        self,
        person_id: UUID,
        candidate: Candidate,
        scored_at: Optional[datetime] = None,
    ) -> IdentityProfile:
        """
        Score a candidate and wrap it as an IdentityProfile for a person.

        Args:
            person_id: Owning person
            candidate: Candidate to score
            scored_at: Timestamp to record. Defaults to now.

        Returns:
            New IdentityProfile (not yet persisted)
        """
        score = self.score(candidate)
        return IdentityProfile(
            person_id=person_id,
            network=candidate.network,
            handle=candidate.handle,
            url=candidate.url,
            confidence=score.confidence,
            status=score.status,
            evidence_count=candidate.evidence_count,
            metadata=dict(candidate.metadata),
            updated_at=scored_at or utc_now(),
        )


def determine_status(confidence: float, evidence_count: int) -> str:
    """
    Map confidence and evidence count to a profile status.

    Monotonic in confidence: for equal evidence count, a higher
    confidence never yields a less-confirmed status.

    Examples:
        >>> determine_status(1.0, 2)
        'confirmed'
        >>> determine_status(0.9, 1)
        'probable'
        >>> determine_status(0.3, 1)
        'pending'
    """
    if confidence >= CONFIRMED_THRESHOLD and evidence_count >= MIN_EVIDENCE_FOR_CONFIRMED:
        return STATUS_CONFIRMED
    if confidence >= PROBABLE_THRESHOLD:
        return STATUS_PROBABLE
    return STATUS_PENDING


def score_candidate(candidate: Candidate) -> IdentityScore:
    """
    Score a candidate.

    Convenience function using default scorer.

    Args:
        candidate: Candidate to score

    Returns:
        IdentityScore with confidence and status
    """
    scorer = IdentityScorer()
    return scorer.score(candidate)
