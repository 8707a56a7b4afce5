"""Record store interface.

Entity services talk to one of two interchangeable stores: the backend
gateway or the in-process demo store. Both speak wire rows (snake_case dicts
as persisted), so filtering, stamping and error shapes are shared.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

# Table names
ASSETS = "it_assets"
ORGANIZATIONS = "client_orgs"
ADMIN_USERS = "admin_users"
CLIENT_USERS = "client_users"
PA_CATEGORIES = "pa_categories"
PA_ASSESSMENTS = "pa_assessments"


@dataclass
class RecordQuery:
    """Filter, search and ordering for a select.

    Attributes:
        equals: Column -> value equality filters (AND-ed)
        search_text: Case-insensitive substring, OR-ed across ``search_columns``
        search_columns: Columns the text search applies to
        order_by: Columns to sort by, in priority order
        descending: Sort direction for every ``order_by`` column
        limit: Maximum rows to return
    """

    equals: dict[str, Any] = field(default_factory=dict)
    search_text: str | None = None
    search_columns: tuple[str, ...] = ()
    order_by: tuple[str, ...] = ()
    descending: bool = False
    limit: int | None = None


class RecordStore(ABC):
    """Async CRUD over named tables."""

    @property
    @abstractmethod
    def is_backend(self) -> bool:
        """True when rows live in the remote backend."""

    @abstractmethod
    async def select(self, table: str, query: RecordQuery | None = None) -> list[dict[str, Any]]:
        """Rows matching the query."""

    @abstractmethod
    async def select_one(self, table: str, **equals: Any) -> dict[str, Any] | None:
        """The single row matching ``equals``, or None."""

    @abstractmethod
    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        """Insert a row and return it as stored (with keys and timestamps)."""

    @abstractmethod
    async def update(
        self, table: str, match: dict[str, Any], patch: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Apply ``patch`` to the row matching ``match``; None if no row matched."""

    @abstractmethod
    async def delete(self, table: str, **equals: Any) -> None:
        """Delete rows matching ``equals``."""

    @abstractmethod
    async def create_account(
        self, email: str, password: str, profile: dict[str, Any]
    ) -> str:
        """Create a login account carrying ``profile`` and return its user id."""
