"""
Pipeline result models exposed to collaborators.

Each result carries enough structure (statuses, counts, warnings) for a
caller to tell "nothing found" from "a dependency failed".
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from src.utils.constants import STATUS_CONFIRMED, STATUS_PROBABLE, STATUS_PENDING
from .person import Person
from .identity_profile import IdentityProfile
from .post import Post
from .persona_vector import PersonaVector
from .playbook import Playbook


@dataclass
class ResolutionSummary:
    total: int = 0
    confirmed: int = 0
    probable: int = 0
    pending: int = 0

    @classmethod
    def from_profiles(cls, profiles: List[IdentityProfile]) -> 'ResolutionSummary':
        return cls(
            total=len(profiles),
            confirmed=sum(1 for p in profiles if p.status == STATUS_CONFIRMED),
            probable=sum(1 for p in profiles if p.status == STATUS_PROBABLE),
            pending=sum(1 for p in profiles if p.status == STATUS_PENDING),
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            'total': self.total,
            'confirmed': self.confirmed,
            'probable': self.probable,
            'pending': self.pending,
        }


@dataclass
class ResolutionResult:
    """Identity resolution output: the person, every scored profile, and counts."""

    person: Person
    profiles: List[IdentityProfile]
    summary: ResolutionSummary

    @property
    def confirmed_profiles(self) -> List[IdentityProfile]:
        return [p for p in self.profiles if p.is_confirmed]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'person': self.person.model_dump(mode='json'),
            'profiles': [p.to_dict() for p in self.profiles],
            'summary': self.summary.to_dict(),
        }


@dataclass
class ScanReport:
    """
    Outcome of one scan call.

    Owned by the call that produced it, so concurrent scans sharing a
    scanner never see each other's failures or warnings.
    """

    posts: List[Post] = field(default_factory=list)
    failed_profiles: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def record_failure(self, profile: IdentityProfile, reason: str) -> str:
        message = f"Scan failed for {profile.network} profile {profile.url}: {reason}"
        self.warnings.append(message)
        self.failed_profiles.append(str(profile.profile_id))
        return message


@dataclass
class PersonaStats:
    """
    Persona run statistics.

    failed_profiles lists profiles whose scan failed or timed out; their
    posts count as empty, so a zero total_posts with an empty
    failed_profiles really means "nothing found".
    """

    total_posts: int = 0
    profiles_scanned: int = 0
    classifications: int = 0
    failed_profiles: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_posts': self.total_posts,
            'profiles_scanned': self.profiles_scanned,
            'classifications': self.classifications,
            'failed_profiles': list(self.failed_profiles),
            'warnings': list(self.warnings),
        }


@dataclass
class PersonaResult:
    persona: PersonaVector
    stats: PersonaStats

    def to_dict(self) -> Dict[str, Any]:
        return {'persona': self.persona.to_dict(), 'stats': self.stats.to_dict()}


@dataclass
class PlaybookResult:
    playbook: Playbook

    def to_dict(self) -> Dict[str, Any]:
        return {'playbook': self.playbook.to_dict()}
