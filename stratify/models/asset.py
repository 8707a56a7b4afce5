"""Asset model and its wire (table row) transforms."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import Field, field_validator

from stratify.models.base import CamelModel
from stratify.models.enums import AssetStatus, AssetType, Criticality


class Asset(CamelModel):
    id: str
    name: str
    type: AssetType
    category: str
    description: str = ""
    owner: str = ""
    status: AssetStatus = AssetStatus.ACTIVE
    criticality: Criticality = Criticality.MEDIUM
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    created_by: str = ""
    last_updated: str = ""
    org_id: int | None = Field(default=None, alias="org_id")


class AssetDraft(CamelModel):
    """Fields supplied when creating an asset."""

    name: str
    type: AssetType
    category: str
    description: str = ""
    owner: str = ""
    status: AssetStatus = AssetStatus.ACTIVE
    criticality: Criticality = Criticality.MEDIUM
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    created_by: str = ""

    @field_validator("name", "category")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


class AssetPatch(CamelModel):
    """Updatable fields. Type and category are fixed after creation."""

    name: str | None = None
    description: str | None = None
    owner: str | None = None
    status: AssetStatus | None = None
    criticality: Criticality | None = None
    tags: list[str] | None = None
    metadata: dict[str, str] | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()


def today() -> str:
    """Current date as stamped into ``last_updated``."""
    return date.today().isoformat()


def _date_part(value: Any) -> str:
    if not value:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value)
    if "T" in text:
        return text.split("T", 1)[0]
    return text[:10]


def asset_from_wire(row: dict[str, Any]) -> Asset:
    """Build an Asset from an ``it_assets`` row."""
    return Asset(
        id=str(row["id"]),
        name=row["name"],
        type=AssetType(row["type"]),
        category=row["category"],
        description=row.get("description") or "",
        owner=row.get("owner") or "",
        status=AssetStatus(row.get("status") or AssetStatus.ACTIVE),
        criticality=Criticality(row.get("criticality") or Criticality.MEDIUM),
        tags=list(row.get("tags") or []),
        metadata={str(k): str(v) for k, v in (row.get("metadata") or {}).items()},
        created_by=row.get("created_by") or "",
        last_updated=_date_part(row.get("updated_at")),
        org_id=row.get("org_id"),
    )


def asset_to_wire(asset: Asset) -> dict[str, Any]:
    """Inverse of :func:`asset_from_wire`."""
    return {
        "id": asset.id,
        "name": asset.name,
        "type": asset.type.value,
        "category": asset.category,
        "description": asset.description,
        "owner": asset.owner,
        "status": asset.status.value,
        "criticality": asset.criticality.value,
        "tags": list(asset.tags),
        "metadata": dict(asset.metadata),
        "created_by": asset.created_by,
        "updated_at": asset.last_updated,
        "org_id": asset.org_id,
    }


def draft_to_wire(draft: AssetDraft, org_id: int | None) -> dict[str, Any]:
    row = {
        "name": draft.name,
        "type": draft.type.value,
        "category": draft.category,
        "description": draft.description,
        "owner": draft.owner,
        "status": draft.status.value,
        "criticality": draft.criticality.value,
        "tags": list(draft.tags),
        "metadata": dict(draft.metadata),
        "created_by": draft.created_by,
    }
    if org_id is not None:
        row["org_id"] = org_id
    return row


def patch_to_wire(patch: AssetPatch) -> dict[str, Any]:
    """Only the fields the caller actually supplied."""
    dumped = patch.model_dump(mode="json", exclude_unset=True)
    return {key: value for key, value in dumped.items() if value is not None}
