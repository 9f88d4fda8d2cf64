"""
Playbook model - vendor-specific outreach script for one person.

Derived entirely from a PersonaVector plus a vendor; regenerating
overwrites the stored playbook for the same (person, vendor).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Tuple
from uuid import UUID

from src.utils.date_parser import parse_timestamp, utc_now


@dataclass
class Playbook:
    """
    Six-part outreach script.

    Attributes:
        person_id: Person the playbook targets
        vendor: Vendor identifier (uppercase), e.g. "TOTVS"
        opening: Short personalized opening line
        value_proposition: Value statement tied to the person's pain points
        case_reference: Link to a relevant customer case
        call_to_action: Closing ask, tuned to the person's tone
        product_fit: Vendor products matching the person's topics
        service_packages: Consulting packages to offer
        last_refreshed_at: When the playbook was generated
    """

    person_id: UUID
    vendor: str
    opening: str
    value_proposition: str
    case_reference: str
    call_to_action: str
    product_fit: List[str]
    service_packages: List[str]
    last_refreshed_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """
        Validate that every part of the script is populated.

        Raises:
            ValueError: If any text field or list is empty
        """
        for name in ('vendor', 'opening', 'value_proposition', 'case_reference', 'call_to_action'):
            if not getattr(self, name):
                raise ValueError(f"Playbook {name} cannot be empty")
        for name in ('product_fit', 'service_packages'):
            if not getattr(self, name):
                raise ValueError(f"Playbook {name} cannot be empty")

    @property
    def natural_key(self) -> Tuple[UUID, str]:
        return (self.person_id, self.vendor)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'person_id': str(self.person_id),
            'vendor': self.vendor,
            'opening': self.opening,
            'value_proposition': self.value_proposition,
            'case_reference': self.case_reference,
            'call_to_action': self.call_to_action,
            'product_fit': list(self.product_fit),
            'service_packages': list(self.service_packages),
            'last_refreshed_at': self.last_refreshed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Playbook':
        return cls(
            person_id=UUID(str(data['person_id'])),
            vendor=data['vendor'],
            opening=data['opening'],
            value_proposition=data['value_proposition'],
            case_reference=data['case_reference'],
            call_to_action=data['call_to_action'],
            product_fit=list(data['product_fit']),
            service_packages=list(data['service_packages']),
            last_refreshed_at=parse_timestamp(data['last_refreshed_at']),
        )
