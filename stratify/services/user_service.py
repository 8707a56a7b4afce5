"""User service for the admin and client account directories."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from stratify.core.errors import BackendError, ConflictError, NotFoundError, ValidationError
from stratify.core.structured_logging import log_json
from stratify.models.enums import UserRole
from stratify.models.principal import (
    ADMIN_ORGANIZATION,
    UserProfile,
    admin_profile_from_row,
    client_profile_from_row,
)
from stratify.models.roles import ADMIN_ORG_CODE, AdminTier, ClientTier, parse_role
from stratify.services.access_policy import AccessPolicy
from stratify.storage.base import (
    ADMIN_USERS,
    CLIENT_USERS,
    ORGANIZATIONS,
    RecordQuery,
    RecordStore,
)

logger = logging.getLogger(__name__)

ALL_ROLES = "all"


class UserCreate(BaseModel):
    email: str
    password: str
    name: str
    role: UserRole
    org_id: int | None = None


class UserUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    role: UserRole | None = None
    org_id: int | None = None


class UserService:
    """Reads and writes account profiles.

    Admin-tier profiles live in ``admin_users`` and are global; client-tier
    profiles live in ``client_users`` and always reference an organization.
    """

    def __init__(self, store: RecordStore, policy: AccessPolicy):
        self.store = store
        self.policy = policy

    async def _organizations(self) -> dict[int, dict[str, Any]]:
        rows = await self.store.select(ORGANIZATIONS)
        return {row["org_id"]: row for row in rows}

    async def find_admin_profile(self, user_id: str) -> UserProfile | None:
        row = await self.store.select_one(ADMIN_USERS, id=user_id)
        return admin_profile_from_row(row) if row else None

    async def find_client_profile(
        self, user_id: str, org_id: int | None = None
    ) -> UserProfile | None:
        """Client profile joined to its organization.

        Args:
            user_id: Account id
            org_id: When given, the profile must belong to this organization
        """
        equals: dict[str, Any] = {"id": user_id}
        if org_id is not None:
            equals["org_id"] = org_id
        row = await self.store.select_one(CLIENT_USERS, **equals)
        if row is None:
            return None
        org_row = None
        if row.get("org_id") is not None:
            org_row = await self.store.select_one(ORGANIZATIONS, org_id=row["org_id"])
        return client_profile_from_row(row, org_row)

    async def list(self, scope_filter: int | None = None) -> list[UserProfile]:
        """Accounts visible to the caller, newest first.

        Admins see both tiers across all organizations; everyone else sees
        the client accounts of their scope.
        """
        try:
            is_admin = await self.policy.is_admin()
            scope = None if is_admin else scope_filter
            client_query = RecordQuery(equals={"org_id": scope} if scope is not None else {})
            client_rows = await self.store.select(CLIENT_USERS, client_query)
            admin_rows = await self.store.select(ADMIN_USERS) if is_admin else []
            organizations = await self._organizations()
        except BackendError as exc:
            log_json(logger, logging.ERROR, "user_query_failed", error=exc.message)
            raise exc.wrap("fetch users") from exc

        profiles = [admin_profile_from_row(row) for row in admin_rows]
        profiles.extend(
            client_profile_from_row(row, organizations.get(row.get("org_id")))
            for row in client_rows
        )
        profiles.sort(key=lambda p: p.created_at or "", reverse=True)
        return profiles

    async def search(
        self,
        query: str,
        role_filter: str | None = ALL_ROLES,
        scope_filter: int | None = None,
    ) -> list[UserProfile]:
        """Filter :meth:`list` by name/email/organization text and role."""
        needle = (query or "").strip().lower()
        profiles = await self.list(scope_filter)
        if role_filter and role_filter != ALL_ROLES:
            profiles = [p for p in profiles if p.role.value == role_filter]
        if needle:
            profiles = [
                p
                for p in profiles
                if needle in p.name.lower()
                or needle in p.email.lower()
                or needle in p.organization.lower()
            ]
        return profiles

    async def create(self, data: UserCreate) -> UserProfile:
        """Create an account and its profile.

        Raises:
            ValidationError: If a client role has no valid organization
            BackendError: If account creation fails
        """
        tier = parse_role(data.role)
        org_row: dict[str, Any] | None = None
        match tier:
            case ClientTier():
                if data.org_id is None:
                    raise ValidationError("org_id", None, "Client users must belong to an organization")
                org_row = await self.store.select_one(ORGANIZATIONS, org_id=data.org_id)
                if org_row is None:
                    raise ValidationError("org_id", data.org_id, "Invalid organization ID")
                organization, org_code, org_id = org_row["org_name"], org_row["org_code"], data.org_id
            case AdminTier():
                organization, org_code, org_id = ADMIN_ORGANIZATION, ADMIN_ORG_CODE, None

        metadata = {
            "name": data.name,
            "role": data.role.value,
            "organization": organization,
            "orgCode": org_code,
            "org_id": org_id,
        }
        try:
            user_id = await self.store.create_account(data.email, data.password, metadata)
        except BackendError as exc:
            if exc.code == "user_already_exists":
                raise ConflictError(f"User with email '{data.email}' already exists") from exc
            log_json(logger, logging.ERROR, "user_create_failed", role=data.role.value, error=exc.message)
            raise exc.wrap("create user") from exc

        log_json(logger, logging.INFO, "user_created", user_id=user_id, role=data.role.value, org_id=org_id)
        return UserProfile(
            id=user_id,
            name=data.name,
            email=data.email,
            role=data.role,
            organization=organization,
            org_code=org_code,
            org_id=org_id,
        )

    async def update(self, user_id: str, data: UserUpdate) -> UserProfile:
        """Update a profile; the role may change only within its tier.

        Raises:
            NotFoundError: If no profile has this id
            ValidationError: On a tier change or unknown organization
        """
        admin_row = await self.store.select_one(ADMIN_USERS, id=user_id)
        table = ADMIN_USERS if admin_row else CLIENT_USERS
        current = admin_row or await self.store.select_one(CLIENT_USERS, id=user_id)
        if current is None:
            raise NotFoundError("User not found")

        changes: dict[str, Any] = {}
        if data.name is not None:
            changes["name"] = data.name.strip()
        if data.email is not None:
            changes["email"] = data.email.strip()
        if data.role is not None:
            if type(parse_role(data.role)) is not type(parse_role(current["role"])):
                raise ValidationError("role", data.role.value, "Role cannot move between admin and client tiers")
            changes["role"] = data.role.value
        if data.org_id is not None:
            if table == ADMIN_USERS:
                raise ValidationError("org_id", data.org_id, "Admin accounts are not bound to an organization")
            if await self.store.select_one(ORGANIZATIONS, org_id=data.org_id) is None:
                raise ValidationError("org_id", data.org_id, "Invalid organization ID")
            changes["org_id"] = data.org_id

        try:
            updated = await self.store.update(table, {"id": user_id}, changes) if changes else current
        except BackendError as exc:
            log_json(logger, logging.ERROR, "user_update_failed", user_id=user_id, error=exc.message)
            raise exc.wrap("update user") from exc
        if updated is None:
            raise NotFoundError("User not found")

        if table == ADMIN_USERS:
            return admin_profile_from_row(updated)
        org_row = None
        if updated.get("org_id") is not None:
            org_row = await self.store.select_one(ORGANIZATIONS, org_id=updated["org_id"])
        return client_profile_from_row(updated, org_row)

    async def delete(self, user_id: str) -> None:
        try:
            await self.store.delete(ADMIN_USERS, id=user_id)
            await self.store.delete(CLIENT_USERS, id=user_id)
        except BackendError as exc:
            log_json(logger, logging.ERROR, "user_delete_failed", user_id=user_id, error=exc.message)
            raise exc.wrap("delete user") from exc
        log_json(logger, logging.INFO, "user_deleted", user_id=user_id)
