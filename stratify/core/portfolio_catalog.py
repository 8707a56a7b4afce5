"""Portfolio-analysis assessment catalog.

Static reference data: six assessment categories and the assessments offered
under each. The in-memory store is seeded from these rows; a configured
backend serves its own ``pa_categories`` / ``pa_assessments`` tables.
"""

from __future__ import annotations

from typing import Any

SEED_TIMESTAMP = "2024-01-01T00:00:00Z"

# (category_id, title, description, icon, color)
CATEGORIES: list[tuple[str, str, str, str, str]] = [
    (
        "strategy-enterprise-arch",
        "Strategy and Enterprise Architecture",
        "Enterprise architecture plays a key role in ensuring business outcomes "
        "from innovations and disruptions with risks mitigated",
        "Building",
        "bg-blue-600",
    ),
    (
        "digital-ecosystem",
        "Digital Ecosystem Readiness",
        "Every business is now evolving into social ecosystem using digital means "
        "and connectedness",
        "Globe",
        "bg-green-600",
    ),
    (
        "it-optimization",
        "IT Optimization and Consolidation",
        "Address technical debt and optimize IT operations to reduce support costs",
        "Settings",
        "bg-purple-600",
    ),
    (
        "technology-architecture",
        "Technology Architecture",
        "Modernizing with new technology and platforms adoption is key to keep OPEX in control",
        "Cpu",
        "bg-indigo-600",
    ),
    (
        "enterprise-governance",
        "Enterprise Architecture Governance",
        "Establish governance frameworks and processes for enterprise architecture",
        "Shield",
        "bg-red-600",
    ),
    (
        "specialized-assessments",
        "Specialized Assessments",
        "Domain-specific assessments for comprehensive IT portfolio evaluation",
        "Target",
        "bg-orange-600",
    ),
]

# category_id -> [(assessment_id, name, description, duration, complexity)]
ASSESSMENTS: dict[str, list[tuple[str, str, str, str, str]]] = {
    "strategy-enterprise-arch": [
        ("business-capability-modeling", "Business Capability Modeling",
         "Assess and model business capabilities to align IT investments with business strategy",
         "2-3 weeks", "Medium"),
        ("business-it-alignment", "Business and IT Strategy Alignment",
         "Evaluate alignment between business objectives and IT strategy",
         "1-2 weeks", "High"),
        ("digital-strategy", "Digital Strategy Assessment",
         "Comprehensive evaluation of digital transformation readiness and strategy",
         "3-4 weeks", "High"),
        ("fsa-gap-analysis", "FSA and Gap Analysis",
         "Future State Architecture planning with current state gap analysis",
         "2-3 weeks", "High"),
        ("ea-maturity", "EA Maturity Assessment",
         "Evaluate enterprise architecture maturity and governance capabilities",
         "1-2 weeks", "Medium"),
    ],
    "digital-ecosystem": [
        ("cloud-readiness", "Cloud Readiness Assessment",
         "Evaluate applications and infrastructure readiness for cloud migration",
         "2-3 weeks", "Medium"),
        ("api-hybrid-integration", "APIs and Hybrid Integration",
         "Assess API strategy and hybrid integration capabilities",
         "1-2 weeks", "Medium"),
        ("microservices-adoption", "Microservices Adoption",
         "Evaluate readiness for microservices architecture adoption",
         "2-3 weeks", "High"),
        ("mobile-omni-channel", "Mobile and Omni-Channel Readiness",
         "Assess mobile and omnichannel customer experience capabilities",
         "1-2 weeks", "Medium"),
        ("analytics-readiness", "Analytics and Data Readiness",
         "Evaluate data analytics and business intelligence capabilities",
         "2-3 weeks", "Medium"),
    ],
    "it-optimization": [
        ("application-portfolio-rationalization", "Applications Portfolio Rationalization",
         "Analyze and optimize application portfolio for efficiency and cost reduction",
         "3-4 weeks", "High"),
        ("solution-architecture", "Solution Architecture Assessment",
         "Evaluate solution architecture patterns and design principles",
         "2-3 weeks", "High"),
        ("enterprise-integration-soa", "Enterprise Integration and SOA",
         "Assess enterprise integration patterns and service-oriented architecture",
         "2-3 weeks", "High"),
    ],
    "technology-architecture": [
        ("infrastructure-rationalization", "Infrastructure Rationalization",
         "Optimize infrastructure components and reduce operational complexity",
         "2-3 weeks", "Medium"),
        ("legacy-modernization", "Legacy Modernization Assessment",
         "Evaluate legacy systems and create modernization roadmap",
         "3-4 weeks", "High"),
        ("platform-architecture-upgrades", "Platform Architecture Upgrades",
         "Assess platform architecture and identify upgrade opportunities",
         "2-3 weeks", "Medium"),
    ],
    "enterprise-governance": [
        ("ea-governance-framework", "EA Governance Framework",
         "Establish enterprise architecture governance processes and standards",
         "2-3 weeks", "High"),
        ("architecture-compliance", "Architecture Compliance Assessment",
         "Evaluate compliance with enterprise architecture standards",
         "1-2 weeks", "Medium"),
        ("technology-standards", "Technology Standards Assessment",
         "Review and optimize technology standards and guidelines",
         "1-2 weeks", "Medium"),
    ],
    "specialized-assessments": [
        ("ai-readiness", "AI Readiness Assessment",
         "Evaluate organizational readiness for artificial intelligence adoption",
         "2-3 weeks", "High"),
        ("application-modernity", "Application Modernity Assessment",
         "Assess application architecture and technology stack modernity",
         "2-3 weeks", "Medium"),
        ("database-architecture", "Database Architecture Assessment",
         "Comprehensive evaluation of database architecture and performance",
         "1-2 weeks", "Medium"),
        ("network-infrastructure", "Network/Infrastructure Assessment",
         "Assess network architecture and infrastructure capabilities",
         "2-3 weeks", "Medium"),
        ("devsecops", "DevSecOps Assessment",
         "Evaluate development, security, and operations integration maturity",
         "1-2 weeks", "Medium"),
        ("scaled-agile", "Scaled Agile Assessment",
         "Assess agile transformation and scaled agile framework adoption",
         "1-2 weeks", "Medium"),
        ("operational-support", "Operational Support Assessment",
         "Evaluate IT operations and support model effectiveness",
         "1-2 weeks", "Medium"),
        ("target-operating-model", "Target Operating Model Assessment",
         "Design and assess target operating model for IT organization",
         "3-4 weeks", "High"),
    ],
}


def category_rows() -> list[dict[str, Any]]:
    """``pa_categories`` rows for seeding a store."""
    return [
        {
            "id": str(index),
            "category_id": category_id,
            "title": title,
            "description": description,
            "icon": icon,
            "color": color,
            "sort_order": index,
            "is_active": True,
            "created_at": SEED_TIMESTAMP,
            "updated_at": SEED_TIMESTAMP,
        }
        for index, (category_id, title, description, icon, color) in enumerate(CATEGORIES, start=1)
    ]


def assessment_rows() -> list[dict[str, Any]]:
    """``pa_assessments`` rows for seeding a store."""
    rows: list[dict[str, Any]] = []
    for category_id, entries in ASSESSMENTS.items():
        for sort_order, (assessment_id, name, description, duration, complexity) in enumerate(
            entries, start=1
        ):
            rows.append(
                {
                    "id": str(len(rows) + 1),
                    "assessment_id": assessment_id,
                    "category_id": category_id,
                    "name": name,
                    "description": description,
                    "duration": duration,
                    "complexity": complexity,
                    "status": "available",
                    "sort_order": sort_order,
                    "is_active": True,
                    "created_at": SEED_TIMESTAMP,
                    "updated_at": SEED_TIMESTAMP,
                }
            )
    return rows
