"""Asset service for inventory CRUD and search."""

from __future__ import annotations

import logging
from collections import Counter

from pydantic import BaseModel, Field

from stratify.core.asset_catalog import categories_for, is_valid_category
from stratify.core.errors import BackendError, NotFoundError, ValidationError
from stratify.core.structured_logging import log_json
from stratify.models.asset import (
    Asset,
    AssetDraft,
    AssetPatch,
    asset_from_wire,
    draft_to_wire,
    patch_to_wire,
    today,
)
from stratify.models.enums import AssetStatus, AssetType, Criticality
from stratify.services.access_policy import AccessPolicy
from stratify.storage.base import ASSETS, RecordQuery, RecordStore

logger = logging.getLogger(__name__)

ALL_TYPES = "all"
SEARCH_COLUMNS = ("name", "description", "owner")


class AssetSummary(BaseModel):
    """Dashboard counters over a set of assets."""

    total: int
    by_status: dict[str, int] = Field(default_factory=dict)
    by_criticality: dict[str, int] = Field(default_factory=dict)
    by_type: dict[str, int] = Field(default_factory=dict)


class AssetService:
    """Service for listing, searching and mutating IT assets."""

    def __init__(self, store: RecordStore, policy: AccessPolicy):
        """Initialize asset service.

        Args:
            store: Record store (backend or in-memory)
            policy: Visibility policy for the acting principal
        """
        self.store = store
        self.policy = policy

    async def list(self, scope_filter: int | None = None) -> list[Asset]:
        """List assets visible under the scope, newest first.

        Args:
            scope_filter: Resolved org_id; None means no org restriction

        Returns:
            Assets (every tenant's for recognized admins)
        """
        return await self.search("", ALL_TYPES, scope_filter)

    async def search(
        self,
        query: str,
        type_filter: str | None = ALL_TYPES,
        scope_filter: int | None = None,
    ) -> list[Asset]:
        """Search assets by text and type.

        The text matches name, description or owner as a case-insensitive
        substring; a type other than "all" must match exactly. Both narrowings
        apply to admins too, only the org scope is lifted for them.

        Args:
            query: Free text (blank matches everything)
            type_filter: Asset type value or "all"
            scope_filter: Resolved org_id; None means no org restriction

        Returns:
            Matching assets, newest first
        """
        equals: dict[str, object] = {}
        if type_filter and type_filter != ALL_TYPES:
            equals["type"] = type_filter

        scope = await self.policy.effective_scope(scope_filter)
        if scope is not None:
            equals["org_id"] = scope

        text = (query or "").strip()
        record_query = RecordQuery(
            equals=equals,
            search_text=text or None,
            search_columns=SEARCH_COLUMNS,
            order_by=("created_at",),
            descending=True,
        )
        try:
            rows = await self.store.select(ASSETS, record_query)
        except BackendError as exc:
            log_json(logger, logging.ERROR, "asset_query_failed", error=exc.message, code=exc.code)
            raise exc.wrap("fetch assets") from exc
        return [asset_from_wire(row) for row in rows]

    async def get(self, asset_id: str, scope_filter: int | None = None) -> Asset:
        match = await self._match(asset_id, scope_filter)
        row = await self.store.select_one(ASSETS, **match)
        if row is None:
            raise NotFoundError("Asset not found")
        return asset_from_wire(row)

    async def create(self, draft: AssetDraft, scope_filter: int | None = None) -> Asset:
        """Create an asset in the caller's scope.

        Args:
            draft: Asset fields
            scope_filter: Resolved org_id, stored on the new asset

        Returns:
            The created asset as persisted

        Raises:
            ValidationError: If the category does not belong to the type
            BackendError: If the store rejects the insert
        """
        self._check_category(draft.type, draft.category)
        row = draft_to_wire(draft, scope_filter)
        row["updated_at"] = today()
        try:
            created = await self.store.insert(ASSETS, row)
        except BackendError as exc:
            log_json(logger, logging.ERROR, "asset_create_failed", error=exc.message, code=exc.code)
            raise exc.wrap("create asset") from exc

        log_json(logger, logging.INFO, "asset_created", asset_id=created.get("id"), org_id=scope_filter)
        return asset_from_wire(created)

    async def update(
        self,
        asset_id: str,
        patch: AssetPatch,
        scope_filter: int | None = None,
    ) -> Asset:
        """Update an asset's editable fields.

        The resolved scope constrains which row may be written, so a client
        can never modify another tenant's asset.

        Raises:
            NotFoundError: If no visible asset has this id
            BackendError: If the store rejects the update
        """
        changes = patch_to_wire(patch)
        changes["updated_at"] = today()
        match = await self._match(asset_id, scope_filter)
        try:
            updated = await self.store.update(ASSETS, match, changes)
        except BackendError as exc:
            log_json(logger, logging.ERROR, "asset_update_failed", asset_id=asset_id, error=exc.message)
            raise exc.wrap("update asset") from exc

        if updated is None:
            raise NotFoundError("Asset not found")
        log_json(logger, logging.INFO, "asset_updated", asset_id=asset_id, fields=sorted(changes))
        return asset_from_wire(updated)

    async def delete(self, asset_id: str, scope_filter: int | None = None) -> None:
        match = await self._match(asset_id, scope_filter)
        try:
            await self.store.delete(ASSETS, **match)
        except BackendError as exc:
            log_json(logger, logging.ERROR, "asset_delete_failed", asset_id=asset_id, error=exc.message)
            raise exc.wrap("delete asset") from exc
        log_json(logger, logging.INFO, "asset_deleted", asset_id=asset_id)

    @staticmethod
    def summarize(assets: list[Asset]) -> AssetSummary:
        """Count assets per status, criticality and type."""
        by_status = Counter(a.status.value for a in assets)
        by_criticality = Counter(a.criticality.value for a in assets)
        by_type = Counter(a.type.value for a in assets)
        return AssetSummary(
            total=len(assets),
            by_status={s.value: by_status.get(s.value, 0) for s in AssetStatus},
            by_criticality={c.value: by_criticality.get(c.value, 0) for c in Criticality},
            by_type={t.value: by_type.get(t.value, 0) for t in AssetType},
        )

    async def _match(self, asset_id: str, scope_filter: int | None) -> dict[str, object]:
        match: dict[str, object] = {"id": asset_id}
        scope = await self.policy.effective_scope(scope_filter)
        if scope is not None:
            match["org_id"] = scope
        return match

    @staticmethod
    def _check_category(asset_type: AssetType, category: str) -> None:
        if not is_valid_category(asset_type, category):
            allowed = ", ".join(categories_for(asset_type))
            raise ValidationError(
                "category",
                category,
                f"Category '{category}' is not valid for type '{asset_type.value}'. "
                f"Expected one of: {allowed}",
            )
