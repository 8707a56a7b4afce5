"""Record store backed by the remote backend."""

from __future__ import annotations

from typing import Any

from stratify.core.gateway import BackendGateway
from stratify.storage.base import RecordQuery, RecordStore


class GatewayRecordStore(RecordStore):
    """Delegates every operation to :class:`BackendGateway`.

    Keys and timestamps are assigned server-side; account profiles are
    materialized by a server trigger from the sign-up metadata.
    """

    def __init__(self, gateway: BackendGateway):
        self.gateway = gateway

    @property
    def is_backend(self) -> bool:
        return True

    async def select(self, table: str, query: RecordQuery | None = None) -> list[dict[str, Any]]:
        query = query or RecordQuery()
        return await self.gateway.select(
            table,
            equals=query.equals,
            search_text=query.search_text,
            search_columns=query.search_columns,
            order_by=query.order_by,
            descending=query.descending,
            limit=query.limit,
        )

    async def select_one(self, table: str, **equals: Any) -> dict[str, Any] | None:
        return await self.gateway.maybe_single(table, equals=equals)

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        return await self.gateway.insert(table, row)

    async def update(
        self, table: str, match: dict[str, Any], patch: dict[str, Any]
    ) -> dict[str, Any] | None:
        rows = await self.gateway.update(table, equals=match, patch=patch)
        return rows[0] if rows else None

    async def delete(self, table: str, **equals: Any) -> None:
        await self.gateway.delete(table, equals=equals)

    async def create_account(self, email: str, password: str, profile: dict[str, Any]) -> str:
        user = await self.gateway.sign_up(email, password, profile)
        return user.id
