"""
Person models - identity root and resolution seed.

Uses Pydantic v2 for validation. PersonSeed is the caller-supplied input
of identity resolution; Person is the stored identity root.
"""

from uuid import UUID, uuid4
from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from typing import Dict, Optional

from src.utils.constants import NETWORK_LINKEDIN
from src.utils.date_parser import utc_now


class PersonSeed(BaseModel):
    """
    Identity resolution input.
    Why: one normalized shape for API, demo and pipeline callers.
    """
    name: str
    company: Optional[str] = None
    role: Optional[str] = None
    linkedin_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    # Known profile URLs keyed by network (linkedin_url is a shorthand)
    profile_urls: Dict[str, str] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = " ".join(value.split())
        if not value:
            raise ValueError("name must not be blank")
        return value

    @property
    def known_profile_urls(self) -> Dict[str, str]:
        """Profile URLs per network, with linkedin_url folded in."""
        urls = {
            network.strip().lower(): url
            for network, url in self.profile_urls.items()
            if url
        }
        if self.linkedin_url and NETWORK_LINKEDIN not in urls:
            urls[NETWORK_LINKEDIN] = self.linkedin_url
        return urls


class Person(BaseModel):
    """
    Identity root for a resolved individual.
    Why: profiles, posts, persona and playbooks all hang off person_id.
    """
    person_id: UUID = Field(default_factory=uuid4)
    name: str
    company: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    linkedin_url: Optional[str] = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": False}

    @property
    def first_name(self) -> str:
        return self.name.split()[0] if self.name.split() else ""

    @classmethod
    def from_seed(cls, seed: PersonSeed, person_id: Optional[UUID] = None) -> "Person":
        """Create a new Person from a resolution seed."""
        data = {
            "name": seed.name,
            "company": seed.company,
            "role": seed.role,
            "email": seed.email,
            "phone": seed.phone,
            "linkedin_url": seed.linkedin_url,
        }
        if person_id is not None:
            data["person_id"] = person_id
        return cls(**data)

    def merge_seed(self, seed: PersonSeed) -> "Person":
        """
        Return an updated copy with the seed's fields applied.

        Optional fields absent from the seed keep their stored values;
        person_id and created_at never change.
        """
        updates = {"name": seed.name, "updated_at": utc_now()}
        for field_name in ("company", "role", "email", "phone", "linkedin_url"):
            value = getattr(seed, field_name)
            if value is not None:
                updates[field_name] = value
        return self.model_copy(update=updates)
