"""Impact sub-area domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from domain.entities.todo import ImpactArea


class IconType(StrEnum):
    DEFAULT = "default"
    USER_ADDED = "user_added"


# Appended after the seeded defaults unless the caller picks a position.
USER_SUB_AREA_SORT_ORDER = 999


@dataclass
class SubArea:
    """A grouping of todos inside one impact area of a business."""

    business_id: UUID
    impact_area: ImpactArea
    title: str
    id: UUID = field(default_factory=uuid4)
    description: str | None = None
    icon_type: IconType = IconType.DEFAULT
    sort_order: int = 0
    is_user_created: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


# Starter set seeded per business by ``ensure_defaults``.
DEFAULT_SUB_AREAS: dict[ImpactArea, tuple[tuple[str, str], ...]] = {
    ImpactArea.GOVERNANCE: (
        ("Mission & Engagement", "Mission statement, purpose and stakeholder engagement"),
        ("Legal Requirements", "Mission lock and the legal changes B Corp requires"),
        ("Accountability", "Board oversight, stakeholder governance and reporting lines"),
        ("Ethics & Transparency", "Codes of conduct, anti-corruption and disclosure"),
    ),
    ImpactArea.WORKERS: (
        ("Compensation & Benefits", "Pay, living wage and benefits"),
        ("Well-being & Safety", "Health, safety and wellbeing policies"),
        ("Career Development", "Training, progression and skills"),
        ("Engagement & Satisfaction", "Surveys, feedback and ownership"),
    ),
    ImpactArea.COMMUNITY: (
        ("Local Community", "Local involvement, giving and volunteering"),
        ("Supply Chain", "Supplier standards and local sourcing"),
        ("Diversity & Inclusion", "Equity, diversity and inclusion practices"),
        ("Civic Engagement", "Charitable giving and civic partnerships"),
    ),
    ImpactArea.ENVIRONMENT: (
        ("Environmental Policy", "Environmental management system and policy"),
        ("Energy & Carbon", "Energy use, emissions and climate targets"),
        ("Water & Waste", "Water stewardship, waste and recycling"),
        ("Land & Life", "Biodiversity, materials and product lifecycle"),
    ),
    ImpactArea.CUSTOMERS: (
        ("Customer Experience", "Satisfaction measurement and feedback"),
        ("Data Protection", "GDPR compliance and customer data handling"),
        ("Customer Stewardship", "Quality, ethical marketing and complaints"),
    ),
}
