"""Identity resolution: candidate generation and scoring."""

from .candidate_generator import CandidateGenerator, generate_candidates, extract_handle
from .identity_scorer import IdentityScorer, IdentityScore, determine_status, score_candidate

__all__ = [
    'CandidateGenerator',
    'generate_candidates',
    'extract_handle',
    'IdentityScorer',
    'IdentityScore',
    'determine_status',
    'score_candidate',
]
