"""
Candidate generator for identity resolution.

Derives plausible network profiles for a person from their name and any
profile URLs the caller already knows. Pure string derivation: no network
call is made, and the output is deterministic for a given seed.
"""

import logging
from typing import Dict, List, Optional
from urllib.parse import urlparse

from src.models.identity_profile import Candidate
from src.models.person import PersonSeed
from src.utils.constants import (
    SUPPORTED_NETWORKS,
    NETWORK_LINKEDIN,
    HEURISTIC_NETWORKS,
    PROFILE_URL_TEMPLATES,
    ORIGIN_PROVIDED,
    ORIGIN_HEURISTIC,
    PROVIDED_EVIDENCE_COUNT,
    HEURISTIC_EVIDENCE_COUNT,
)
from src.utils.errors import InputValidationError
from src.utils.seed_validator import SeedValidator


logger = logging.getLogger(__name__)


class CandidateGenerator:
    """
    Generator of profile candidates per network.

    Rules:
    1. A network with a supplied URL gets exactly one "provided"
       candidate with evidence count 2.
    2. Every heuristic network without a supplied URL gets up to N
       handle variants derived from the name, evidence count 1:
       concatenation, underscore join, first initial + last name.

    Example usage:
        generator = CandidateGenerator()
        candidates = generator.generate(PersonSeed(name="Ana Souza"))
        # twitter: anasouza, ana_souza, asouza; instagram: anasouza; github: anasouza
    """

    def __init__(self, heuristic_networks: Optional[Dict[str, int]] = None) -> None:
        """
        Initialize generator.

        Args:
            heuristic_networks: Mapping of network -> max handle variants.
                              Defaults to HEURISTIC_NETWORKS.
        """
        self.heuristic_networks = dict(
            HEURISTIC_NETWORKS if heuristic_networks is None else heuristic_networks
        )
        self.validator = SeedValidator()

    def generate(self, seed: PersonSeed) -> List[Candidate]:
        """
        Generate candidates for a seed.

        Provided candidates come first, in SUPPORTED_NETWORKS order,
        followed by heuristic candidates in heuristic-network order.

        Args:
            seed: Person seed with name and optional company/URLs

        Returns:
            List of Candidate objects

        Raises:
            InputValidationError: If the name is blank, a network is
                                  unsupported or a URL is invalid
        """
        name = self.validator.validate_name(seed.name)
        provided_urls = self._validate_profile_urls(seed.known_profile_urls)

        candidates: List[Candidate] = []

        for network in SUPPORTED_NETWORKS:
            if network in provided_urls:
                candidates.append(
                    self._provided_candidate(network, provided_urls[network], seed.company)
                )

        variants = self.handle_variants(name)
        for network, limit in self.heuristic_networks.items():
            if network in provided_urls:
                continue
            for handle in variants[:limit]:
                candidates.append(self._heuristic_candidate(network, handle))

        logger.debug(
            "Generated %d candidates for '%s' (%d provided)",
            len(candidates), name, len(provided_urls),
        )
        return candidates

    def handle_variants(self, name: str) -> List[str]:
        """
        Derive handle variants from first/last name tokens.

        Args:
            name: Display name

        Returns:
            Ordered, de-duplicated handles; a single-token name yields one

        Examples:
            >>> CandidateGenerator().handle_variants("Ana Souza")
            ['anasouza', 'ana_souza', 'asouza']
        """
        tokens = self.validator.name_tokens(name)
        if not tokens:
            return []
        if len(tokens) == 1:
            return [tokens[0]]

        first, last = tokens[0], tokens[-1]
        variants = [
            f"{first}{last}",
            f"{first}_{last}",
            f"{first[0]}{last}",
        ]
        # dict preserves order while dropping duplicates
        return list(dict.fromkeys(variants))

    def _validate_profile_urls(self, urls: Dict[str, str]) -> Dict[str, str]:
        validated = {}
        for network, url in urls.items():
            if network not in SUPPORTED_NETWORKS:
                raise InputValidationError(
                    f"Unsupported network '{network}'. Must be one of: {SUPPORTED_NETWORKS}"
                )
            validated[network] = self.validator.validate_url(url)
        return validated

    def _provided_candidate(self, network: str, url: str, company: Optional[str]) -> Candidate:
        metadata = {'source': ORIGIN_PROVIDED}
        if company:
            metadata['company'] = self.validator.sanitize_field(company)
        return Candidate(
            network=network,
            handle=extract_handle(network, url),
            url=url,
            evidence_count=PROVIDED_EVIDENCE_COUNT,
            origin_tag=ORIGIN_PROVIDED,
            metadata=metadata,
        )

    def _heuristic_candidate(self, network: str, handle: str) -> Candidate:
        return Candidate(
            network=network,
            handle=handle,
            url=PROFILE_URL_TEMPLATES[network].format(handle=handle),
            evidence_count=HEURISTIC_EVIDENCE_COUNT,
            origin_tag=ORIGIN_HEURISTIC,
            metadata={'source': ORIGIN_HEURISTIC, 'reason': 'first and last name'},
        )


def extract_handle(network: str, url: str) -> str:
    """
    Extract the username from a profile URL.

    LinkedIn handles follow "/in/"; everywhere else the handle is the
    last path segment, without a leading "@".

    Examples:
        >>> extract_handle("linkedin", "https://linkedin.com/in/anasouza/")
        'anasouza'
        >>> extract_handle("youtube", "https://youtube.com/@anasouza")
        'anasouza'
    """
    segments = [s for s in urlparse(url).path.split('/') if s]
    if network == NETWORK_LINKEDIN and 'in' in segments:
        index = segments.index('in')
        if index + 1 < len(segments):
            return segments[index + 1]
    if not segments:
        return ""
    return segments[-1].lstrip('@')


# Module-level convenience function
_default_generator = None


def generate_candidates(seed: PersonSeed) -> List[Candidate]:
    """
    Generate candidates using the default generator.

    Args:
        seed: Person seed

    Returns:
        List of candidates
    """
    global _default_generator
    if _default_generator is None:
        _default_generator = CandidateGenerator()
    return _default_generator.generate(seed)
