"""Principal (authenticated identity) and persisted profile shapes."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from stratify.models.enums import UserRole
from stratify.models.roles import ADMIN_ORG_CODE, AdminTier, RoleTier, parse_role

UNKNOWN_ORGANIZATION = "Unknown Organization"
UNKNOWN_ORG_CODE = "UNKNOWN"
ADMIN_ORGANIZATION = "Admin"


class Principal(BaseModel):
    """The identity driving every request.

    Frozen: the session manager replaces it wholesale, it is never edited.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    role: UserRole
    organization: str
    org_code: str
    org_id: int | None = None

    @property
    def tier(self) -> RoleTier:
        return parse_role(self.role)

    @property
    def is_admin(self) -> bool:
        return isinstance(self.tier, AdminTier)

    @property
    def is_client(self) -> bool:
        return not self.is_admin

    @property
    def is_admin_sentinel(self) -> bool:
        """Admin tier signed in under the ADMIN organization code."""
        return self.is_admin and self.org_code == ADMIN_ORG_CODE


class UserProfile(BaseModel):
    """A persisted account as shown in the user directory."""

    id: str
    name: str
    email: str
    role: UserRole
    organization: str
    org_code: str
    org_id: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
    status: Literal["active", "inactive"] = "active"

    def to_principal(self) -> Principal:
        return Principal(
            id=self.id,
            name=self.name,
            email=self.email,
            role=self.role,
            organization=self.organization,
            org_code=self.org_code,
            org_id=self.org_id,
        )


def admin_profile_from_row(row: dict[str, Any]) -> UserProfile:
    """Build a profile from an admin_users row (no organization join)."""
    return UserProfile(
        id=str(row["id"]),
        name=row.get("name") or "",
        email=row.get("email") or "",
        role=UserRole(row["role"]),
        organization=ADMIN_ORGANIZATION,
        org_code=ADMIN_ORG_CODE,
        org_id=None,
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def client_profile_from_row(
    row: dict[str, Any],
    org_row: dict[str, Any] | None,
) -> UserProfile:
    """Build a profile from a client_users row joined to its organization."""
    return UserProfile(
        id=str(row["id"]),
        name=row.get("name") or "",
        email=row.get("email") or "",
        role=UserRole(row["role"]),
        organization=(org_row or {}).get("org_name") or UNKNOWN_ORGANIZATION,
        org_code=(org_row or {}).get("org_code") or UNKNOWN_ORG_CODE,
        org_id=row.get("org_id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )
