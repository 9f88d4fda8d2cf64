"""
Playbook generator for vendor-specific outreach.

Maps a persona vector onto a six-part outreach script (opening, value
proposition, case reference, call to action, product fit, service
packages) using decision tables. Every table has a default branch, so
any persona, including an empty one, yields a complete playbook.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.models.persona_vector import PersonaVector
from src.models.playbook import Playbook
from src.utils.constants import (
    DEFAULT_VENDOR,
    OPENING_RULES,
    OPENING_DEFAULT,
    VALUE_PROPOSITION_RULES,
    VALUE_PROPOSITION_DEFAULT,
    CALL_TO_ACTION_RULES,
    CALL_TO_ACTION_DEFAULT,
    BASE_SERVICE_PACKAGE,
    INTEGRATION_PAIN_POINTS,
    INTEGRATION_SERVICE_PACKAGE,
    CLOUD_SERVICE_PACKAGE,
    TOPIC_CLOUD,
    VENDOR_CATALOG,
    DEFAULT_CASE_LIBRARY,
    CASE_SECTOR_SLUGS,
)
from src.utils.date_parser import utc_now
from src.utils.errors import InputValidationError


logger = logging.getLogger(__name__)

# Greeting used when the person's first name is unknown
ANONYMOUS_GREETING = "Hi"


class PlaybookGenerator:
    """
    Generator of outreach playbooks from persona vectors.

    Decision tables:
    - opening: ERP topic -> ERP interest line; Supply Chain -> supply-chain
      line; else operational-optimization line
    - value proposition: manual/repetitive pain -> automation line;
      integration/legacy pain -> integration line; else productivity line
    - case reference: vendor case library, anchored to the highest-ranked
      topic with a sector case
    - call to action: optimistic -> success cases; critical -> free
      diagnostic; else tailored demo
    - product fit: persona topics mapped through the vendor catalog
    - service packages: base diagnostic, plus integration consulting on
      integration pain, plus cloud migration on the Cloud topic

    Example usage:
        generator = PlaybookGenerator()
        playbook = generator.generate(person_id, persona, vendor="TOTVS",
                                      person_name="Ana Souza")
    """

    def __init__(self, catalog: Optional[Dict[str, Dict[str, Any]]] = None) -> None:
        """
        Initialize generator.

        Args:
            catalog: Vendor product catalog. Defaults to VENDOR_CATALOG.
        """
        self.catalog = VENDOR_CATALOG if catalog is None else catalog

    def generate(
        self,
        person_id: UUID,
        persona: PersonaVector,
        vendor: str = DEFAULT_VENDOR,
        person_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Playbook:
        """
        Generate a playbook for one person and vendor.

        Args:
            person_id: Person the playbook targets
            persona: The person's persona vector
            vendor: Vendor identifier (case-insensitive)
            person_name: Display name used to personalize the opening
            now: Refresh timestamp. Defaults to the current time.

        Returns:
            Playbook with every part populated

        Raises:
            InputValidationError: If vendor is blank
        """
        vendor = normalize_vendor(vendor)

        playbook = Playbook(
            person_id=person_id,
            vendor=vendor,
            opening=self.build_opening(persona, person_name),
            value_proposition=self.build_value_proposition(persona),
            case_reference=self.build_case_reference(persona, vendor),
            call_to_action=self.build_call_to_action(persona),
            product_fit=self.build_product_fit(persona, vendor),
            service_packages=self.build_service_packages(persona),
            last_refreshed_at=now or utc_now(),
        )

        logger.debug(
            "Generated %s playbook for %s (topics=%s, tone=%s)",
            vendor, person_id, persona.topics, persona.tone,
        )
        return playbook

    def build_opening(self, persona: PersonaVector, person_name: Optional[str] = None) -> str:
        """
        Personalized opening line.

        Examples:
            >>> PlaybookGenerator().build_opening(PersonaVector(topics=["ERP"]), "Ana Souza")
            "Ana, I saw that you're interested in ERP and digital transformation."
        """
        greeting = first_name(person_name) or ANONYMOUS_GREETING

        for topic, line in OPENING_RULES:
            if topic in persona.topics:
                return f"{greeting}, {line}"
        return f"{greeting}, {OPENING_DEFAULT}"

    def build_value_proposition(self, persona: PersonaVector) -> str:
        pain_points = {p.lower() for p in persona.pain_points}
        for keywords, line in VALUE_PROPOSITION_RULES:
            if pain_points & keywords:
                return line
        return VALUE_PROPOSITION_DEFAULT

    def build_case_reference(self, persona: PersonaVector, vendor: str) -> str:
        """
        Case library link for the vendor.

        The anchor is the sector slug of the highest-ranked topic that has
        one; without such a topic the library root is returned.
        """
        library = self.catalog.get(vendor, {}).get('case_library', DEFAULT_CASE_LIBRARY)

        for topic in persona.topics:
            slug = CASE_SECTOR_SLUGS.get(topic)
            if slug:
                return f"{library}#{slug}"
        return library

    def build_call_to_action(self, persona: PersonaVector) -> str:
        return CALL_TO_ACTION_RULES.get(persona.tone, CALL_TO_ACTION_DEFAULT)

    def build_product_fit(self, persona: PersonaVector, vendor: str) -> List[str]:
        """
        Vendor products matching the persona's topics, in topic rank order.

        Unknown vendors, and personas with no matching topic, fall back to
        the vendor's default offering.
        """
        entry = self.catalog.get(vendor)
        if entry is None:
            logger.info("Vendor %s has no product catalog, using default offering", vendor)
            return [f"{vendor} Integrated Suite"]

        products = entry.get('products', {})
        fit: List[str] = []
        for topic in persona.topics:
            product = products.get(topic)
            if product and product not in fit:
                fit.append(product)

        return fit or [entry['default_product']]

    def build_service_packages(self, persona: PersonaVector) -> List[str]:
        packages = [BASE_SERVICE_PACKAGE]

        pain_points = {p.lower() for p in persona.pain_points}
        if pain_points & INTEGRATION_PAIN_POINTS:
            packages.append(INTEGRATION_SERVICE_PACKAGE)
        if TOPIC_CLOUD in persona.topics:
            packages.append(CLOUD_SERVICE_PACKAGE)

        return packages

    def get_playbook_explanation(self, persona: PersonaVector, vendor: str = DEFAULT_VENDOR) -> str:
        """
        Get human-readable explanation of the playbook choices.

        Args:
            persona: Persona the playbook is derived from
            vendor: Vendor identifier

        Returns:
            Multi-line explanation string
        """
        vendor = normalize_vendor(vendor)
        lines = [f"{vendor} playbook:"]

        lines.append(f"  Topics: {', '.join(persona.topics) or 'none detected'}")
        lines.append(f"  Pain points: {', '.join(persona.pain_points) or 'none detected'}")
        lines.append(f"  Tone: {persona.tone}")
        lines.append("")
        lines.append(f"  Products: {', '.join(self.build_product_fit(persona, vendor))}")
        lines.append(f"  Packages: {', '.join(self.build_service_packages(persona))}")
        lines.append(f"  Case: {self.build_case_reference(persona, vendor)}")

        return "\n".join(lines)


def normalize_vendor(vendor: Optional[str]) -> str:
    """
    Normalize a vendor identifier to its uppercase form.

    Raises:
        InputValidationError: If vendor is blank
    """
    if vendor is None or not str(vendor).strip():
        raise InputValidationError("Vendor is required")
    return str(vendor).strip().upper()


def first_name(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    parts = name.split()
    return parts[0] if parts else None


def generate_playbook(
    person_id: UUID,
    persona: PersonaVector,
    vendor: str = DEFAULT_VENDOR,
    person_name: Optional[str] = None,
) -> Playbook:
    """
    Generate a playbook.

    Convenience function using default generator.

    Args:
        person_id: Person the playbook targets
        persona: The person's persona vector
        vendor: Vendor identifier
        person_name: Display name for the opening

    Returns:
        Playbook
    """
    generator = PlaybookGenerator()
    return generator.generate(person_id, persona, vendor=vendor, person_name=person_name)
