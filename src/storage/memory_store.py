"""
InMemoryPersonaStore - process-local storage.

Default store when no DATABASE_URL is configured, and the store used by
the test suite. Records are copied on the way in and out so callers never
share mutable state with the store. The pipeline calls the store from
worker threads, so every access holds one lock.
"""

import copy
import threading
from dataclasses import replace
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from src.models.classification import Classification
from src.models.identity_profile import IdentityProfile
from src.models.person import Person
from src.models.persona_vector import PersonaVector
from src.models.playbook import Playbook
from src.models.post import Post
from .base_store import PersonaStore


class InMemoryPersonaStore(PersonaStore):
    """Dictionary-backed PersonaStore."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._persons: Dict[UUID, Person] = {}
        self._profiles: Dict[Tuple[UUID, str, str], IdentityProfile] = {}
        self._posts: Dict[Tuple[UUID, str], Post] = {}
        self._personas: Dict[UUID, PersonaVector] = {}
        self._playbooks: Dict[Tuple[UUID, str], Playbook] = {}

    def upsert_person(self, person: Person) -> Person:
        with self._lock:
            existing = self._persons.get(person.person_id)
            if existing is not None:
                person = person.model_copy(update={'created_at': existing.created_at})
            self._persons[person.person_id] = person.model_copy()
            return person.model_copy()

    def get_person(self, person_id: UUID) -> Optional[Person]:
        with self._lock:
            person = self._persons.get(person_id)
            return person.model_copy() if person is not None else None

    def upsert_identity_profile(self, profile: IdentityProfile) -> IdentityProfile:
        with self._lock:
            existing = self._profiles.get(profile.natural_key)
            if existing is not None:
                profile = replace(profile, profile_id=existing.profile_id)
            self._profiles[profile.natural_key] = copy.deepcopy(profile)
            return copy.deepcopy(profile)

    def list_identity_profiles(
        self, person_id: UUID, status: Optional[str] = None
    ) -> List[IdentityProfile]:
        with self._lock:
            return [
                copy.deepcopy(p)
                for key, p in self._profiles.items()
                if key[0] == person_id and (status is None or p.status == status)
            ]

    def upsert_post(self, post: Post) -> Post:
        key = (post.profile_id, post.link)
        with self._lock:
            if key not in self._posts:
                self._posts[key] = copy.deepcopy(post)
            return copy.deepcopy(self._posts[key])

    def save_post_classification(
        self, post_id: UUID, classification: Classification
    ) -> Optional[Post]:
        with self._lock:
            for key, post in self._posts.items():
                if post.post_id != post_id:
                    continue
                if not post.is_classified:
                    self._posts[key] = post.with_classification(classification)
                return copy.deepcopy(self._posts[key])
            return None

    def list_posts(self, person_id: UUID) -> List[Post]:
        with self._lock:
            profile_ids = {p.profile_id for k, p in self._profiles.items() if k[0] == person_id}
            posts = [copy.deepcopy(p) for k, p in self._posts.items() if k[0] in profile_ids]
        posts.sort(key=lambda p: p.posted_at, reverse=True)
        return posts

    def save_persona(self, person_id: UUID, persona: PersonaVector) -> PersonaVector:
        with self._lock:
            self._personas[person_id] = copy.deepcopy(persona)
        return copy.deepcopy(persona)

    def get_persona(self, person_id: UUID) -> Optional[PersonaVector]:
        with self._lock:
            persona = self._personas.get(person_id)
        return copy.deepcopy(persona) if persona is not None else None

    def save_playbook(self, playbook: Playbook) -> Playbook:
        with self._lock:
            self._playbooks[playbook.natural_key] = copy.deepcopy(playbook)
        return copy.deepcopy(playbook)

    def get_playbook(self, person_id: UUID, vendor: str) -> Optional[Playbook]:
        with self._lock:
            playbook = self._playbooks.get((person_id, vendor))
        return copy.deepcopy(playbook) if playbook is not None else None
