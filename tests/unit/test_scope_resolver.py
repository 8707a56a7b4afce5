"""Unit tests for organization scope resolution and visibility."""

from unittest.mock import AsyncMock

import pytest

from stratify.models.enums import UserRole
from stratify.models.organization import Organization
from stratify.models.principal import Principal
from stratify.services.access_policy import AccessPolicy, visible_scope
from stratify.services.scope_resolver import resolve_org_scope
from stratify.services.selected_organization import SelectedOrganization


def _org(org_id: int, code: str) -> Organization:
    return Organization(org_id=org_id, org_code=code, org_name=f"Org {code}")


ADMIN = Principal(
    id="5",
    name="Dana Whitfield",
    email="dana@stratifyit.ai",
    role=UserRole.ADMIN_SUPER,
    organization="Admin",
    org_code="ADMIN",
)
CLIENT = Principal(
    id="1",
    name="John Smith",
    email="john@company.com",
    role=UserRole.CLIENT_MANAGER,
    organization="TechCorp Inc.",
    org_code="TECH1",
    org_id=1,
)


class TestResolveOrgScope:
    def test_admin_selection_wins_then_clears(self):
        selection = SelectedOrganization()
        selection.select(_org(2, "FFITS"))
        assert resolve_org_scope(ADMIN, selection.organization) == 2

        selection.clear()
        assert resolve_org_scope(ADMIN, selection.organization) is None

    def test_client_ignores_selection(self):
        assert resolve_org_scope(CLIENT, _org(2, "FFITS")) == 1
        assert resolve_org_scope(CLIENT, None) == 1

    def test_admin_tier_under_client_code_keeps_own_scope(self):
        principal = ADMIN.model_copy(update={"org_code": "TECH1", "org_id": 1})
        assert resolve_org_scope(principal, _org(2, "FFITS")) == 1

    def test_no_principal_means_no_filter(self):
        assert resolve_org_scope(None, _org(2, "FFITS")) is None


class TestSelectedOrganization:
    def test_empty_by_default(self):
        selection = SelectedOrganization()
        assert not selection
        assert selection.org_id is None

    def test_select_replaces_previous(self):
        selection = SelectedOrganization()
        selection.select(_org(1, "TECH1"))
        selection.select(_org(3, "FIN01"))
        assert selection
        assert selection.org_id == 3


class TestVisibleScope:
    def test_admin_filter_is_dropped(self):
        assert visible_scope(True, 7) is None

    def test_non_admin_filter_is_kept(self):
        assert visible_scope(False, 7) == 7
        assert visible_scope(False, None) is None


@pytest.mark.asyncio
class TestAccessPolicy:
    async def test_admin_row_lifts_scope(self):
        store = AsyncMock()
        store.select_one.return_value = {"id": "5"}
        policy = AccessPolicy(store, lambda: ADMIN)

        assert await policy.effective_scope(2) is None
        store.select_one.assert_awaited_once_with("admin_users", id="5")

    async def test_missing_admin_row_keeps_scope(self):
        store = AsyncMock()
        store.select_one.return_value = None
        policy = AccessPolicy(store, lambda: CLIENT)

        assert await policy.effective_scope(1) == 1

    async def test_anonymous_is_not_admin(self):
        store = AsyncMock()
        policy = AccessPolicy(store, lambda: None)

        assert await policy.is_admin() is False
        store.select_one.assert_not_awaited()
