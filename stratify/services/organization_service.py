"""Organization service for tenant management."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from stratify.core.errors import BackendError, ConflictError, NotFoundError, ValidationError
from stratify.core.structured_logging import log_json
from stratify.models.organization import ORG_CODE_LENGTH, Organization
from stratify.storage.base import CLIENT_USERS, ORGANIZATIONS, RecordQuery, RecordStore

logger = logging.getLogger(__name__)

SEARCH_COLUMNS = ("org_code", "org_name", "sector")
DEFAULT_SECTOR = "Technology"
DEFAULT_REMARKS = "Newly created organization"


class OrganizationCreate(BaseModel):
    org_code: str
    org_name: str
    description: str | None = None
    sector: str | None = None
    remarks: str | None = None


class OrganizationUpdate(BaseModel):
    org_code: str | None = None
    org_name: str | None = None
    description: str | None = None
    sector: str | None = None
    remarks: str | None = None


def validate_org_code(org_code: str | None) -> str:
    """Check an organization code's length as supplied, then uppercase it.

    Surrounding whitespace counts towards the length.

    Args:
        org_code: Code as typed by the user

    Returns:
        Uppercased code

    Raises:
        ValidationError: If the code is not exactly 5 characters
    """
    code = org_code or ""
    if len(code) != ORG_CODE_LENGTH:
        raise ValidationError(
            "org_code",
            org_code,
            f"Organization code must be exactly {ORG_CODE_LENGTH} characters",
        )
    return code.upper()


class OrganizationService:
    """Service for creating, editing and removing client organizations."""

    def __init__(self, store: RecordStore):
        """Initialize organization service.

        Args:
            store: Record store (backend or in-memory)
        """
        self.store = store

    async def list(self) -> list[Organization]:
        """All organizations, newest first."""
        return await self.search("")

    async def search(self, query: str) -> list[Organization]:
        """Organizations whose code, name or sector contains ``query``."""
        text = (query or "").strip()
        try:
            rows = await self.store.select(
                ORGANIZATIONS,
                RecordQuery(
                    search_text=text or None,
                    search_columns=SEARCH_COLUMNS,
                    order_by=("created_at",),
                    descending=True,
                ),
            )
        except BackendError as exc:
            log_json(logger, logging.ERROR, "organization_query_failed", error=exc.message)
            raise exc.wrap("fetch organizations") from exc
        return [Organization.from_row(row) for row in rows]

    async def get(self, org_id: int) -> Organization:
        row = await self.store.select_one(ORGANIZATIONS, org_id=org_id)
        if row is None:
            raise NotFoundError("Organization not found")
        return Organization.from_row(row)

    async def get_by_code(self, org_code: str) -> Organization | None:
        """Look an organization up by code (case-insensitive).

        Returns:
            The organization, or None when no row has this code
        """
        code = (org_code or "").strip().upper()
        if not code:
            return None
        try:
            row = await self.store.select_one(ORGANIZATIONS, org_code=code)
        except BackendError as exc:
            log_json(logger, logging.ERROR, "organization_lookup_failed", org_code=code, error=exc.message)
            raise exc.wrap("fetch organization") from exc
        return Organization.from_row(row) if row else None

    async def create(self, data: OrganizationCreate) -> Organization:
        """Create an organization.

        The code is validated before anything is sent to the store.

        Args:
            data: Organization fields

        Returns:
            Created organization

        Raises:
            ValidationError: If the code is not exactly 5 characters
            ConflictError: If the code is already taken
            BackendError: If the store rejects the insert
        """
        code = validate_org_code(data.org_code)
        name = data.org_name.strip()
        if not name:
            raise ValidationError("org_name", data.org_name, "Organization name is required")

        row = {
            "org_code": code,
            "org_name": name,
            "description": data.description or f"Organization for {name}",
            "sector": data.sector or DEFAULT_SECTOR,
            "remarks": data.remarks or DEFAULT_REMARKS,
        }
        try:
            created = await self.store.insert(ORGANIZATIONS, row)
        except BackendError as exc:
            if exc.is_unique_violation:
                raise ConflictError(f"Organization code '{code}' already exists") from exc
            log_json(logger, logging.ERROR, "organization_create_failed", org_code=code, error=exc.message)
            raise exc.wrap("create organization") from exc

        log_json(logger, logging.INFO, "organization_created", org_id=created.get("org_id"), org_code=code)
        return Organization.from_row(created)

    async def update(self, org_id: int, data: OrganizationUpdate) -> Organization:
        """Update the supplied fields of an organization.

        Raises:
            ValidationError: If a new code is not exactly 5 characters
            ConflictError: If the new code is already taken
            NotFoundError: If the organization does not exist
        """
        changes: dict[str, Any] = data.model_dump(exclude_unset=True, exclude_none=True)
        if "org_code" in changes:
            changes["org_code"] = validate_org_code(changes["org_code"])
        if "org_name" in changes:
            changes["org_name"] = changes["org_name"].strip()
            if not changes["org_name"]:
                raise ValidationError("org_name", data.org_name, "Organization name is required")
        if not changes:
            return await self.get(org_id)

        try:
            updated = await self.store.update(ORGANIZATIONS, {"org_id": org_id}, changes)
        except BackendError as exc:
            if exc.is_unique_violation:
                raise ConflictError(
                    f"Organization code '{changes.get('org_code')}' already exists"
                ) from exc
            log_json(logger, logging.ERROR, "organization_update_failed", org_id=org_id, error=exc.message)
            raise exc.wrap("update organization") from exc

        if updated is None:
            raise NotFoundError("Organization not found")
        log_json(logger, logging.INFO, "organization_updated", org_id=org_id, fields=sorted(changes))
        return Organization.from_row(updated)

    async def delete(self, org_id: int) -> None:
        """Delete an organization that no client user belongs to.

        Raises:
            ConflictError: If users are still bound to the organization
        """
        try:
            members = await self.store.select(
                CLIENT_USERS, RecordQuery(equals={"org_id": org_id}, limit=1)
            )
            if members:
                raise ConflictError(
                    "Cannot delete organization that has users. "
                    "Please reassign or delete users first."
                )
            await self.store.delete(ORGANIZATIONS, org_id=org_id)
        except BackendError as exc:
            log_json(logger, logging.ERROR, "organization_delete_failed", org_id=org_id, error=exc.message)
            raise exc.wrap("delete organization") from exc
        log_json(logger, logging.INFO, "organization_deleted", org_id=org_id)
