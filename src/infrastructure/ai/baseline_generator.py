"""Deterministic starter roadmap.

Used for development resets and tests in place of the hosted model. Each task
anchors itself on the opening sentence of the business description and cites
the B Impact Assessment section it comes from.
"""

import re
from typing import Any

from domain.entities.business import Business

_FIRST_SENTENCE = re.compile(r"[^.!?\n]+[.!?]?")

BASELINE_TASKS: tuple[dict[str, str], ...] = (
    {
        "impact_area": "Governance",
        "requirement_code": "GOV-001",
        "title": "Update Articles of Association with mission lock language",
        "description": "Your Articles of Association must include specific B Corp mission "
        "lock language to meet certification requirements.",
        "priority": "P1",
        "effort": "High",
        "sub_area": "Legal Requirements",
        "kb_ref": "B Corp Legal Requirement: Mission Lock",
    },
    {
        "impact_area": "Governance",
        "requirement_code": "GOV-002",
        "title": "Establish stakeholder governance framework",
        "description": "Create formal processes for considering all stakeholders in "
        "business decisions.",
        "priority": "P1",
        "effort": "Medium",
        "sub_area": "Accountability",
        "kb_ref": "BIA Governance: Stakeholder Governance",
    },
    {
        "impact_area": "Workers",
        "requirement_code": "WOR-001",
        "title": "Implement fair compensation policy",
        "description": "Establish and document fair wage policies, including living wage "
        "considerations.",
        "priority": "P1",
        "effort": "Medium",
        "sub_area": "Compensation & Benefits",
        "kb_ref": "BIA Workers: Financial Security",
    },
    {
        "impact_area": "Workers",
        "requirement_code": "WOR-002",
        "title": "Create employee handbook with health and safety policies",
        "description": "Develop comprehensive employee handbook covering health, safety, "
        "and wellbeing policies.",
        "priority": "P2",
        "effort": "Medium",
        "sub_area": "Well-being & Safety",
        "kb_ref": "BIA Workers: Health, Wellness & Safety",
    },
    {
        "impact_area": "Environment",
        "requirement_code": "ENV-001",
        "title": "Establish environmental management system",
        "description": "Create formal environmental policies and begin tracking key "
        "environmental metrics.",
        "priority": "P2",
        "effort": "Medium",
        "sub_area": "Environmental Policy",
        "kb_ref": "BIA Environment: Environmental Management",
    },
    {
        "impact_area": "Environment",
        "requirement_code": "ENV-002",
        "title": "Implement carbon footprint tracking",
        "description": "Begin measuring and tracking your company's carbon emissions and "
        "energy usage.",
        "priority": "P2",
        "effort": "Low",
        "sub_area": "Energy & Carbon",
        "kb_ref": "BIA Environment: Air & Climate",
    },
    {
        "impact_area": "Community",
        "requirement_code": "COM-001",
        "title": "Document community impact initiatives",
        "description": "Formally document your community involvement and social impact "
        "programs.",
        "priority": "P2",
        "effort": "Low",
        "sub_area": "Local Community",
        "kb_ref": "BIA Community: Civic Engagement & Giving",
    },
    {
        "impact_area": "Community",
        "requirement_code": "COM-002",
        "title": "Develop supplier diversity program",
        "description": "Create policies and practices to work with diverse suppliers and "
        "local businesses.",
        "priority": "P2",
        "effort": "Medium",
        "sub_area": "Supply Chain",
        "kb_ref": "BIA Community: Supply Chain Management",
    },
    {
        "impact_area": "Customers",
        "requirement_code": "CUS-001",
        "title": "Implement customer feedback and data protection systems",
        "description": "Establish customer feedback collection and ensure GDPR-compliant "
        "data protection.",
        "priority": "P2",
        "effort": "Medium",
        "sub_area": "Data Protection",
        "kb_ref": "BIA Customers: Customer Stewardship",
    },
    {
        "impact_area": "Customers",
        "requirement_code": "CUS-002",
        "title": "Create customer satisfaction measurement system",
        "description": "Implement systems to regularly measure and improve customer "
        "satisfaction.",
        "priority": "P3",
        "effort": "Low",
        "sub_area": "Customer Experience",
        "kb_ref": "BIA Customers: Quality Assurance",
    },
)


def anchor_for(business: Business) -> str:
    """The opening sentence of the business description."""
    source = business.source_text.strip()
    match = _FIRST_SENTENCE.search(source)
    return match.group(0).strip() if match else source


class BaselineTaskGenerator:
    """ITaskGenerator returning the fixed ten-task baseline."""

    async def generate(self, business: Business) -> list[dict[str, Any]]:
        anchor = anchor_for(business)
        return [
            {
                "title": task["title"],
                "description": task["description"],
                "impact_area": task["impact_area"],
                "priority": task["priority"],
                "effort": task["effort"],
                "requirement_code": task["requirement_code"],
                "sub_area": task["sub_area"],
                "anchor_quote": anchor,
                "kb_refs": [task["kb_ref"]],
                "rationale": f"Baseline requirement {task['requirement_code']} for every "
                "company starting certification.",
            }
            for task in BASELINE_TASKS
        ]
