"""
Prospect pipeline - identity resolution, persona analysis, playbooks.

Orchestrates the stages end to end:

    resolve_identity   seed -> person + scored identity profiles
    analyze_persona    confirmed profiles -> posts -> classifications -> persona
    generate_playbook  persona + vendor -> playbook

Each stage commits its own output through the store and requires the
previous stage's output to exist; a failure never rolls back earlier work.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union
from uuid import UUID

from pydantic import ValidationError

from src.classifiers.text_classifier import TextClassifier
from src.config import DATABASE_URL, DEFAULT_VENDOR
from src.identity.candidate_generator import CandidateGenerator
from src.identity.identity_scorer import IdentityScorer
from src.models.classification import Classification
from src.models.person import Person, PersonSeed
from src.models.post import Post
from src.models.results import (
    PersonaResult,
    PersonaStats,
    PlaybookResult,
    ResolutionResult,
    ResolutionSummary,
)
from src.scanners.network_scanner import NetworkScanner
from src.scoring.persona_extractor import PersonaExtractor
from src.scoring.playbook_generator import PlaybookGenerator
from src.storage.base_store import PersonaStore
from src.storage.memory_store import InMemoryPersonaStore
from src.utils.constants import STATUS_CONFIRMED
from src.utils.errors import (
    InputValidationError,
    NoConfirmedProfilesError,
    PersonaNotFoundError,
    PersonNotFoundError,
)


logger = logging.getLogger(__name__)


class ProspectPipeline:
    """
    End-to-end prospect persona pipeline.

    Every collaborator is injectable; defaults are the production
    components with an in-memory store.

    Example usage:
        pipeline = ProspectPipeline()
        resolution = pipeline.resolve_identity({"name": "Ana Souza",
                                                "linkedin_url": "https://linkedin.com/in/anasouza"})
        persona = await pipeline.analyze_persona(resolution.person.person_id)
        playbook = pipeline.generate_playbook(resolution.person.person_id, vendor="TOTVS")
    """

    def __init__(
        self,
        store: Optional[PersonaStore] = None,
        candidate_generator: Optional[CandidateGenerator] = None,
        scorer: Optional[IdentityScorer] = None,
        scanner: Optional[NetworkScanner] = None,
        classifier: Optional[TextClassifier] = None,
        extractor: Optional[PersonaExtractor] = None,
        playbook_generator: Optional[PlaybookGenerator] = None,
    ) -> None:
        self.store = store or InMemoryPersonaStore()
        self.candidate_generator = candidate_generator or CandidateGenerator()
        self.scorer = scorer or IdentityScorer()
        self.scanner = scanner or NetworkScanner()
        self.classifier = classifier or TextClassifier()
        self.extractor = extractor or PersonaExtractor()
        self.playbook_generator = playbook_generator or PlaybookGenerator()

    def resolve_identity(
        self,
        seed: Union[PersonSeed, Dict[str, Any]],
        person_id: Optional[Union[UUID, str]] = None,
    ) -> ResolutionResult:
        """
        Resolve a person's identity profiles from a seed.

        All candidates are generated (and therefore validated) before
        anything is written. With person_id the stored person is updated
        and re-resolved; without it a new person is created.

        Args:
            seed: PersonSeed or a dict with at least "name"
            person_id: Existing person to re-resolve

        Returns:
            ResolutionResult with every scored profile and status counts.
            Zero confirmed profiles is a valid outcome, not an error.

        Raises:
            InputValidationError: If the seed is invalid
            PersonNotFoundError: If person_id is given but unknown
        """
        seed = self._parse_seed(seed)
        candidates = self.candidate_generator.generate(seed)

        if person_id is not None:
            existing = self.store.get_person(parse_person_id(person_id))
            if existing is None:
                raise PersonNotFoundError(str(person_id))
            person = existing.merge_seed(seed)
        else:
            person = Person.from_seed(seed)

        person = self.store.upsert_person(person)

        profiles = [
            self.store.upsert_identity_profile(self.scorer.build_profile(person.person_id, candidate))
            for candidate in candidates
        ]
        summary = ResolutionSummary.from_profiles(profiles)

        logger.info(
            "Resolved %s: %d profiles (%d confirmed, %d probable, %d pending)",
            person.person_id, summary.total, summary.confirmed, summary.probable, summary.pending,
        )
        return ResolutionResult(person=person, profiles=profiles, summary=summary)

    async def analyze_persona(
        self,
        person_id: Union[UUID, str],
        window_months: Optional[int] = None,
        max_posts: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> PersonaResult:
        """
        Scan, classify and summarize a person's confirmed profiles.

        Posts already stored keep their first classification; only new
        posts get one persisted. The persona is always recomputed.

        Args:
            person_id: Person to analyze
            window_months: Look-back window. Defaults to scanner settings.
            max_posts: Maximum posts per profile. Defaults to scanner settings.
            now: Scan window end and extraction time. Defaults to now.

        Returns:
            PersonaResult with the persona and run statistics

        Raises:
            InputValidationError: If person_id or a limit is invalid
            PersonNotFoundError: If the person is unknown
            NoConfirmedProfilesError: If the person has no confirmed profile
        """
        pid = parse_person_id(person_id)
        if await asyncio.to_thread(self.store.get_person, pid) is None:
            raise PersonNotFoundError(str(pid))

        profiles = await asyncio.to_thread(
            self.store.list_identity_profiles, pid, STATUS_CONFIRMED
        )
        if not profiles:
            raise NoConfirmedProfilesError(str(pid))

        logger.info("Analyzing persona for %s (%d confirmed profiles)", pid, len(profiles))

        report = await self.scanner.scan_profiles(
            profiles, window_months=window_months, max_posts=max_posts, now=now
        )
        posts, classifications = await asyncio.to_thread(self._persist_and_classify, report.posts)

        persona = self.extractor.extract(posts, classifications, now=now)
        persona = await asyncio.to_thread(self.store.save_persona, pid, persona)

        stats = PersonaStats(
            total_posts=len(posts),
            profiles_scanned=len(profiles),
            classifications=len(classifications),
            failed_profiles=list(report.failed_profiles),
            warnings=list(report.warnings),
        )
        logger.info(
            "Persona for %s: %d posts, %d failed profiles",
            pid, stats.total_posts, len(stats.failed_profiles),
        )
        return PersonaResult(persona=persona, stats=stats)

    def generate_playbook(
        self,
        person_id: Union[UUID, str],
        vendor: Optional[str] = None,
    ) -> PlaybookResult:
        """
        Generate and store a vendor playbook from the person's persona.

        Args:
            person_id: Person to target
            vendor: Vendor identifier. Defaults to DEFAULT_VENDOR.

        Returns:
            PlaybookResult

        Raises:
            InputValidationError: If person_id or vendor is invalid
            PersonNotFoundError: If the person is unknown
            PersonaNotFoundError: If no persona was extracted yet
        """
        pid = parse_person_id(person_id)
        vendor = DEFAULT_VENDOR if vendor is None else vendor

        person = self.store.get_person(pid)
        if person is None:
            raise PersonNotFoundError(str(pid))

        persona = self.store.get_persona(pid)
        if persona is None:
            raise PersonaNotFoundError(str(pid))

        playbook = self.playbook_generator.generate(
            pid, persona, vendor=vendor, person_name=person.name
        )
        playbook = self.store.save_playbook(playbook)

        logger.info("Generated %s playbook for %s", playbook.vendor, pid)
        return PlaybookResult(playbook=playbook)

    def _persist_and_classify(self, scanned: List[Post]) -> Tuple[List[Post], Dict[UUID, Classification]]:
        """Store scanned posts, classify them, and persist first classifications."""
        posts = [self.store.upsert_post(post) for post in scanned]

        classifications = self.classifier.classify_batch(posts)
        for post in posts:
            if not post.is_classified:
                self.store.save_post_classification(post.post_id, classifications[post.post_id])
        return posts, classifications

    @staticmethod
    def _parse_seed(seed: Union[PersonSeed, Dict[str, Any]]) -> PersonSeed:
        if isinstance(seed, PersonSeed):
            return seed
        if not isinstance(seed, dict):
            raise InputValidationError("Seed must be an object with at least a name")
        if not str(seed.get('name') or '').strip():
            raise InputValidationError("Name is required")
        try:
            return PersonSeed.model_validate(seed)
        except ValidationError as e:
            raise InputValidationError(f"Invalid seed: {e.errors()[0]['msg']}") from e


def parse_person_id(value: Union[UUID, str, None]) -> UUID:
    """
    Coerce a person id to UUID.

    Raises:
        InputValidationError: If the value is missing or not a UUID
    """
    if isinstance(value, UUID):
        return value
    if value is None or not str(value).strip():
        raise InputValidationError("person_id is required")
    try:
        return UUID(str(value).strip())
    except ValueError as e:
        raise InputValidationError(f"Invalid person_id: '{value}'") from e


def create_pipeline(database_url: Optional[str] = None) -> ProspectPipeline:
    """
    Build a pipeline with the configured store.

    Uses PostgreSQL when a database URL is configured, otherwise the
    in-memory store.
    """
    database_url = database_url or DATABASE_URL
    if database_url:
        from src.storage.postgres_store import PostgresPersonaStore

        store = PostgresPersonaStore(database_url)
        store.init_schema()
        logger.info("Using PostgreSQL persona store")
        return ProspectPipeline(store=store)

    logger.info("DATABASE_URL not set, using in-memory persona store")
    return ProspectPipeline(store=InMemoryPersonaStore())
