"""Integration tests for asset scoping, CRUD and the inventory view."""

import asyncio
from datetime import date
from unittest.mock import patch

import pytest
from pydantic import ValidationError as SchemaError

from stratify.core.errors import NotFoundError, ValidationError
from stratify.models.asset import AssetDraft, AssetPatch
from stratify.models.enums import AssetStatus, AssetType
from stratify.services.dashboard import DashboardSession


def _draft(**overrides) -> AssetDraft:
    fields = {
        "name": "Billing Service",
        "type": AssetType.APPLICATION,
        "category": "API / Microservice",
        "owner": "Payments Team",
        "tags": ["billing"],
        "created_by": "john@company.com",
    }
    fields.update(overrides)
    return AssetDraft(**fields)


@pytest.mark.asyncio
class TestScoping:
    async def test_client_sees_only_own_organization(self, client_dashboard: DashboardSession):
        assets = await client_dashboard.inventory.refresh()

        assert {asset.id for asset in assets} == {"1", "2", "3"}
        assert all(asset.org_id == 1 for asset in assets)

    async def test_newest_first(self, client_dashboard: DashboardSession):
        assets = await client_dashboard.assets.list(1)
        assert [asset.id for asset in assets] == ["1", "2", "3"]

    async def test_scope_of_another_org_returns_nothing(self, client_dashboard: DashboardSession):
        assert await client_dashboard.assets.list(7) == []

    async def test_admin_without_selection_sees_every_tenant(self, admin_dashboard: DashboardSession):
        assets = await admin_dashboard.inventory.refresh()

        assert len(assets) == 7
        assert {asset.org_id for asset in assets} == {1, 2, 3}

    async def test_admin_scope_filter_is_lifted(self, admin_dashboard: DashboardSession):
        assets = await admin_dashboard.assets.list(1)
        assert len(assets) == 7

    async def test_admin_selection_narrows_the_view(self, admin_dashboard: DashboardSession):
        await admin_dashboard.select_organization(2)

        assert admin_dashboard.current_scope() == 2
        assets = await admin_dashboard.inventory.refresh()
        assert {asset.id for asset in assets} == {"4", "5"}

        admin_dashboard.clear_selection()
        assert admin_dashboard.current_scope() is None
        assert len(await admin_dashboard.inventory.refresh()) == 7

    async def test_listing_is_repeatable(self, client_dashboard: DashboardSession):
        first = await client_dashboard.assets.list(1)
        second = await client_dashboard.assets.list(1)
        assert first == second


@pytest.mark.asyncio
class TestSearch:
    async def test_text_matches_name_description_or_owner(self, client_dashboard: DashboardSession):
        by_name = await client_dashboard.inventory.search("database")
        by_owner = await client_dashboard.inventory.search("devops")

        assert [asset.id for asset in by_name] == ["2"]
        assert [asset.id for asset in by_owner] == ["3"]

    async def test_type_filter(self, client_dashboard: DashboardSession):
        assets = await client_dashboard.inventory.search("", "infrastructure")
        assert [asset.id for asset in assets] == ["3"]

    async def test_admin_search_still_applies_type(self, admin_dashboard: DashboardSession):
        assets = await admin_dashboard.inventory.search("", "database")
        assert {asset.id for asset in assets} == {"2", "6"}

    async def test_blank_query_and_all_is_a_plain_list(self, client_dashboard: DashboardSession):
        assets = await client_dashboard.inventory.search("   ", "all")
        assert len(assets) == 3


@pytest.mark.asyncio
class TestMutations:
    async def test_create_stamps_scope_and_date(self, client_dashboard: DashboardSession):
        await client_dashboard.inventory.refresh()
        asset = await client_dashboard.inventory.add(_draft())

        assert asset.org_id == 1
        assert asset.last_updated == date.today().isoformat()
        assert asset.created_by == "john@company.com"
        assert client_dashboard.inventory.items[0].id == asset.id
        assert len(await client_dashboard.assets.list(1)) == 4

    async def test_create_rejects_category_of_other_type(self, client_dashboard: DashboardSession):
        with pytest.raises(ValidationError) as exc_info:
            await client_dashboard.inventory.add(_draft(category="RDBMS (MySQL/PostgreSQL)"))

        assert exc_info.value.field == "category"
        assert len(await client_dashboard.assets.list(1)) == 3

    async def test_update_own_asset(self, client_dashboard: DashboardSession):
        asset = await client_dashboard.inventory.edit(
            "1", AssetPatch(status=AssetStatus.DEPRECATED, tags=["legacy"])
        )

        assert asset.status is AssetStatus.DEPRECATED
        assert asset.tags == ["legacy"]
        assert asset.category == "Web Application"

    async def test_update_cannot_blank_the_name(self, client_dashboard: DashboardSession):
        with pytest.raises(SchemaError):
            AssetPatch(name="   ")

        renamed = await client_dashboard.inventory.edit("1", AssetPatch(name="  Customer Hub "))
        assert renamed.name == "Customer Hub"

    async def test_update_foreign_asset_is_not_found(self, client_dashboard: DashboardSession):
        with pytest.raises(NotFoundError):
            await client_dashboard.inventory.edit("4", AssetPatch(name="Hijacked"))

        untouched = await client_dashboard.store.select_one("it_assets", id="4")
        assert untouched["name"] == "Partner API Gateway"

    async def test_admin_may_update_any_tenant(self, admin_dashboard: DashboardSession):
        asset = await admin_dashboard.inventory.edit("6", AssetPatch(owner="Core Platform"))
        assert asset.owner == "Core Platform"

    async def test_delete_foreign_asset_is_a_no_op(self, client_dashboard: DashboardSession):
        await client_dashboard.inventory.remove("4")
        assert await client_dashboard.store.select_one("it_assets", id="4") is not None

    async def test_delete_own_asset(self, client_dashboard: DashboardSession):
        await client_dashboard.inventory.refresh()
        await client_dashboard.inventory.remove("2")

        assert "2" not in {asset.id for asset in client_dashboard.inventory.items}
        with pytest.raises(NotFoundError):
            await client_dashboard.assets.get("2", 1)

    async def test_summary_counts(self, client_dashboard: DashboardSession):
        summary = client_dashboard.assets.summarize(await client_dashboard.inventory.refresh())

        assert summary.total == 3
        assert summary.by_criticality["high"] == 3
        assert summary.by_type["database"] == 1
        assert summary.by_status["planned"] == 0


@pytest.mark.asyncio
class TestInventorySequencing:
    async def test_slow_older_search_does_not_overwrite_newer(self, client_dashboard: DashboardSession):
        inventory = client_dashboard.inventory
        service = client_dashboard.assets
        original_search = service.search
        release_first = asyncio.Event()

        async def search(query, type_filter="all", scope_filter=None):
            if query == "portal":
                await release_first.wait()
            return await original_search(query, type_filter, scope_filter)

        with patch.object(service, "search", side_effect=search):
            slow = asyncio.create_task(inventory.search("portal"))
            await asyncio.sleep(0)
            newer = await inventory.search("database")
            release_first.set()
            await slow

        assert [asset.id for asset in newer] == ["2"]
        assert [asset.id for asset in inventory.items] == ["2"]

    async def test_mutation_invalidates_in_flight_load(self, client_dashboard: DashboardSession):
        inventory = client_dashboard.inventory
        service = client_dashboard.assets
        original_list = service.list
        release = asyncio.Event()

        async def slow_list(scope_filter=None):
            result = await original_list(scope_filter)
            await release.wait()
            return result

        with patch.object(service, "list", side_effect=slow_list):
            load = asyncio.create_task(inventory.refresh())
            await asyncio.sleep(0)
            created = await inventory.add(_draft())
            release.set()
            await load

        assert inventory.items[0].id == created.id
