"""Data models for the prospect persona pipeline."""

from .person import Person, PersonSeed
from .identity_profile import Candidate, IdentityProfile
from .post import Post, PostMetrics
from .classification import Classification
from .persona_vector import PersonaVector, ActivityWindow, PersonaMetadata
from .playbook import Playbook
from .results import (
    ResolutionSummary,
    ResolutionResult,
    PersonaStats,
    PersonaResult,
    PlaybookResult,
    ScanReport,
)

__all__ = [
    'Person',
    'PersonSeed',
    'Candidate',
    'IdentityProfile',
    'Post',
    'PostMetrics',
    'Classification',
    'PersonaVector',
    'ActivityWindow',
    'PersonaMetadata',
    'Playbook',
    'ResolutionSummary',
    'ResolutionResult',
    'PersonaStats',
    'PersonaResult',
    'PlaybookResult',
    'ScanReport',
]
