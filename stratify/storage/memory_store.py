"""In-process record store used when no backend is configured.

Mutations apply immediately and are lost on :meth:`MemoryRecordStore.reset`
(or process restart). Rows handed out are copies, so callers never alias
stored state.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from stratify.core.errors import UNIQUE_VIOLATION, BackendError
from stratify.core.structured_logging import log_json
from stratify.models.roles import is_admin_role
from stratify.storage.base import (
    ADMIN_USERS,
    CLIENT_USERS,
    ORGANIZATIONS,
    RecordQuery,
    RecordStore,
)
from stratify.storage.seed import seed_tables

logger = logging.getLogger(__name__)

# Tables keyed by an auto-incrementing integer instead of a uuid string.
_INTEGER_KEYS = {ORGANIZATIONS: "org_id"}
# (table, column) pairs that must be unique.
_UNIQUE = {(ORGANIZATIONS, "org_code")}


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _matches(row: dict[str, Any], equals: dict[str, Any]) -> bool:
    return all(row.get(column) == value for column, value in equals.items())


def _sort_key(value: Any) -> tuple[int, Any]:
    # None sorts last in ascending order
    return (1, "") if value is None else (0, value)


class MemoryRecordStore(RecordStore):
    """Per-table lists of rows, seeded from demo data."""

    def __init__(self, seed: Callable[[], dict[str, list[dict[str, Any]]]] = seed_tables):
        self._seed = seed
        self._tables: dict[str, list[dict[str, Any]]] = {}
        self._next_keys: dict[str, int] = {}
        self.reset()

    @property
    def is_backend(self) -> bool:
        return False

    def reset(self) -> None:
        """Discard every mutation and restore the seed data."""
        self._tables = {name: copy.deepcopy(rows) for name, rows in self._seed().items()}
        self._next_keys = {}
        for table, key in _INTEGER_KEYS.items():
            existing = [row[key] for row in self._tables.get(table, []) if row.get(key) is not None]
            self._next_keys[table] = max(existing, default=0) + 1

    def _rows(self, table: str) -> list[dict[str, Any]]:
        return self._tables.setdefault(table, [])

    def _check_unique(self, table: str, row: dict[str, Any], exclude: dict[str, Any] | None) -> None:
        for unique_table, column in _UNIQUE:
            if unique_table != table or row.get(column) is None:
                continue
            for existing in self._rows(table):
                if existing is exclude:
                    continue
                if existing.get(column) == row[column]:
                    raise BackendError(
                        f'duplicate key value violates unique constraint "{table}_{column}_key"',
                        code=UNIQUE_VIOLATION,
                        status_code=409,
                    )

    async def select(self, table: str, query: RecordQuery | None = None) -> list[dict[str, Any]]:
        query = query or RecordQuery()
        rows = [row for row in self._rows(table) if _matches(row, query.equals)]
        if query.search_text and query.search_columns:
            needle = query.search_text.lower()
            rows = [
                row
                for row in rows
                if any(needle in str(row.get(column) or "").lower() for column in query.search_columns)
            ]
        for column in reversed(query.order_by):
            rows = sorted(rows, key=lambda r: _sort_key(r.get(column)), reverse=query.descending)
        if query.limit is not None:
            rows = rows[: query.limit]
        return copy.deepcopy(rows)

    async def select_one(self, table: str, **equals: Any) -> dict[str, Any] | None:
        for row in self._rows(table):
            if _matches(row, equals):
                return copy.deepcopy(row)
        return None

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(row)
        self._check_unique(table, stored, exclude=None)

        key = _INTEGER_KEYS.get(table)
        if key is not None:
            if stored.get(key) is None:
                stored[key] = self._next_keys.get(table, 1)
            self._next_keys[table] = max(self._next_keys.get(table, 1), stored[key] + 1)
        elif stored.get("id") is None:
            stored["id"] = str(uuid4())

        timestamp = _now()
        stored.setdefault("created_at", timestamp)
        stored.setdefault("updated_at", timestamp)
        self._rows(table).append(stored)
        return copy.deepcopy(stored)

    async def update(
        self, table: str, match: dict[str, Any], patch: dict[str, Any]
    ) -> dict[str, Any] | None:
        for row in self._rows(table):
            if not _matches(row, match):
                continue
            candidate = {**row, **copy.deepcopy(patch)}
            self._check_unique(table, candidate, exclude=row)
            row.update(copy.deepcopy(patch))
            if "updated_at" not in patch:
                row["updated_at"] = _now()
            return copy.deepcopy(row)
        return None

    async def delete(self, table: str, **equals: Any) -> None:
        self._tables[table] = [row for row in self._rows(table) if not _matches(row, equals)]

    async def create_account(self, email: str, password: str, profile: dict[str, Any]) -> str:
        """Materialize the profile row the backend's sign-up trigger would create.

        Demo accounts authenticate against the fixed roster only, so the
        password is not kept.
        """
        normalized = email.strip().lower()
        for table in (ADMIN_USERS, CLIENT_USERS):
            if any((row.get("email") or "").lower() == normalized for row in self._rows(table)):
                raise BackendError("User already registered", code="user_already_exists", status_code=422)

        user_id = str(uuid4())
        row: dict[str, Any] = {
            "id": user_id,
            "name": profile.get("name") or "",
            "email": email.strip(),
            "role": profile["role"],
        }
        if is_admin_role(profile["role"]):
            await self.insert(ADMIN_USERS, row)
        else:
            row["org_id"] = profile.get("org_id")
            await self.insert(CLIENT_USERS, row)
        log_json(logger, logging.INFO, "demo_account_created", user_id=user_id, role=profile["role"])
        return user_id


_memory_store: MemoryRecordStore | None = None


def get_memory_store() -> MemoryRecordStore:
    """Process-wide demo store shared by every dashboard session."""
    global _memory_store
    if _memory_store is None:
        _memory_store = MemoryRecordStore()
    return _memory_store
