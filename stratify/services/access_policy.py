"""Cross-tenant visibility policy."""

from __future__ import annotations

import logging
from collections.abc import Callable

from stratify.core.structured_logging import log_json
from stratify.models.principal import Principal
from stratify.storage.base import ADMIN_USERS, RecordStore

logger = logging.getLogger(__name__)


def visible_scope(is_admin: bool, scope_filter: int | None) -> int | None:
    """Scope filter to apply for a caller.

    Recognized admins see every tenant, so their filter is dropped; everyone
    else gets the filter they were resolved to.
    """
    if is_admin:
        return None
    return scope_filter


class AccessPolicy:
    """Applies :func:`visible_scope` for the acting principal.

    Admin status is the presence of the principal's id in the admin-tier
    collection, checked on each call rather than trusted from the role.
    """

    def __init__(self, store: RecordStore, principal_provider: Callable[[], Principal | None]):
        self.store = store
        self._principal_provider = principal_provider

    @property
    def principal(self) -> Principal | None:
        return self._principal_provider()

    async def is_admin(self) -> bool:
        principal = self.principal
        if principal is None:
            return False
        row = await self.store.select_one(ADMIN_USERS, id=principal.id)
        return row is not None

    async def effective_scope(self, scope_filter: int | None) -> int | None:
        admin = await self.is_admin()
        scope = visible_scope(admin, scope_filter)
        if admin and scope_filter is not None:
            log_json(logger, logging.DEBUG, "scope_filter_lifted", requested_org_id=scope_filter)
        return scope
