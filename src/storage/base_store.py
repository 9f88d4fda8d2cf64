"""
PersonaStore - storage interface for the prospect persona pipeline.

Every record is keyed by its natural key so re-running a stage updates in
place instead of duplicating:

    person          person_id
    identity profile (person_id, network, url)
    post            (profile_id, link)
    persona         person_id
    playbook        (person_id, vendor)
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.models.classification import Classification
from src.models.identity_profile import IdentityProfile
from src.models.person import Person
from src.models.persona_vector import PersonaVector
from src.models.playbook import Playbook
from src.models.post import Post


class PersonaStore(ABC):
    """
    Abstract store for persons, profiles, posts, personas and playbooks.

    Each pipeline stage commits its own output; a later-stage failure
    never rolls back earlier results.
    """

    # Persons

    @abstractmethod
    def upsert_person(self, person: Person) -> Person:
        """Insert or replace a person by person_id."""

    @abstractmethod
    def get_person(self, person_id: UUID) -> Optional[Person]:
        """Return the person, or None if unknown."""

    @abstractmethod
    def upsert_identity_profile(self, profile: IdentityProfile) -> IdentityProfile:
        """
        Insert or update a profile by (person_id, network, url).

        On conflict the stored profile_id is kept and handle, confidence,
        status, evidence count, metadata and updated_at are replaced.

        Returns:
            The stored profile (with the stored profile_id)
        """

    @abstractmethod
    def list_identity_profiles(
        self, person_id: UUID, status: Optional[str] = None
    ) -> List[IdentityProfile]:
        """Return a person's profiles, optionally filtered by status."""

    # Posts

    @abstractmethod
    def upsert_post(self, post: Post) -> Post:
        """
        Insert a post unless (profile_id, link) already exists.

        Returns:
            The stored post; an existing post is returned unchanged
        """

    @abstractmethod
    def save_post_classification(
        self, post_id: UUID, classification: Classification
    ) -> Optional[Post]:
        """
        Populate topics, intent and sentiment on an unclassified post.

        Already-classified posts are left untouched.

        Returns:
            The stored post, or None if post_id is unknown
        """

    @abstractmethod
    def list_posts(self, person_id: UUID) -> List[Post]:
        """Return all posts of a person's profiles, newest first."""

    # Personas

    @abstractmethod
    def save_persona(self, person_id: UUID, persona: PersonaVector) -> PersonaVector:
        """Insert or replace the persona of a person."""

    @abstractmethod
    def get_persona(self, person_id: UUID) -> Optional[PersonaVector]:
        """Return the persona, or None if never extracted."""

    # Playbooks

    @abstractmethod
    def save_playbook(self, playbook: Playbook) -> Playbook:
        """Insert or replace a playbook by (person_id, vendor)."""

    @abstractmethod
    def get_playbook(self, person_id: UUID, vendor: str) -> Optional[Playbook]:
        """Return the playbook, or None if never generated."""

    def close(self) -> None:
        """Release any held resources."""
