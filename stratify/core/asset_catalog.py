"""Closed mapping from asset type to the categories allowed for it.

Static reference data, served to the asset wizard and used by every
validation path that accepts a (type, category) pair.
"""

from __future__ import annotations

from stratify.models.enums import AssetType

ASSET_CATEGORIES: dict[AssetType, tuple[str, ...]] = {
    AssetType.APPLICATION: (
        "Web Application",
        "Mobile Application",
        "Desktop Application",
        "Enterprise Application (ERP/CRM)",
        "API / Microservice",
        "Batch / Integration Job",
    ),
    AssetType.DATABASE: (
        "RDBMS (MySQL/PostgreSQL)",
        "RDBMS (Oracle/SQL Server)",
        "NoSQL Database",
        "Data Warehouse",
        "In-Memory Cache",
        "Search Engine",
    ),
    AssetType.INFRASTRUCTURE: (
        "Physical Server",
        "Virtual Machine",
        "Storage",
        "Network Device",
        "Container Platform",
        "End-User Computing",
    ),
    AssetType.MIDDLEWARE: (
        "Application Server",
        "Message Queue / Broker",
        "API Gateway",
        "Enterprise Service Bus",
        "Integration Platform",
        "Identity & Access Management",
    ),
    AssetType.CLOUD_SERVICE: (
        "IaaS",
        "PaaS",
        "SaaS",
        "Serverless Function",
        "Managed Database",
        "Cloud Storage",
    ),
    AssetType.THIRD_PARTY_SERVICE: (
        "Payment Gateway",
        "Communication Service",
        "Analytics Service",
        "Security Service",
        "Monitoring Service",
        "External API",
    ),
}

ASSET_TYPE_VALUES: tuple[str, ...] = tuple(t.value for t in AssetType)


def parse_asset_type(value: str | None) -> AssetType | None:
    """Return the AssetType for a trimmed value, or None if not in the set."""
    if value is None:
        return None
    try:
        return AssetType(value.strip())
    except ValueError:
        return None


def categories_for(asset_type: AssetType | str) -> tuple[str, ...]:
    parsed = parse_asset_type(asset_type) if isinstance(asset_type, str) else asset_type
    if parsed is None:
        return ()
    return ASSET_CATEGORIES[parsed]


def is_valid_category(asset_type: AssetType | str, category: str | None) -> bool:
    """Exact membership test after trimming surrounding whitespace."""
    if category is None:
        return False
    return category.strip() in categories_for(asset_type)


def category_owner(category: str) -> AssetType | None:
    """Type whose list contains the category (for error messages)."""
    for asset_type, categories in ASSET_CATEGORIES.items():
        if category.strip() in categories:
            return asset_type
    return None
