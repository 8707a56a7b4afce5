"""Dashboard session context.

One :class:`DashboardSession` per signed-in browser: it owns the identity
manager, the selected organization, the entity services and the list views
the presentation layer reads from. Nothing here is a module-level singleton.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable

from stratify.core.config import Settings
from stratify.core.errors import OnboardingError
from stratify.core.gateway import BackendGateway
from stratify.core.sequencing import RequestSequencer
from stratify.core.structured_logging import log_json
from stratify.models.asset import Asset, AssetDraft, AssetPatch
from stratify.models.organization import Organization
from stratify.models.principal import Principal, UserProfile
from stratify.services.access_policy import AccessPolicy
from stratify.services.asset_service import ALL_TYPES, AssetService
from stratify.services.onboarding_service import (
    OnboardedCallback,
    OnboardingRequest,
    OnboardingResult,
    OnboardingService,
)
from stratify.services.organization_service import OrganizationService, OrganizationUpdate
from stratify.services.portfolio_service import PortfolioAnalysisService
from stratify.services.scope_resolver import resolve_org_scope
from stratify.services.selected_organization import SelectedOrganization
from stratify.services.session_manager import IdentityManager
from stratify.services.upload_service import AssetUploadService
from stratify.services.user_service import UserService
from stratify.storage.base import RecordStore
from stratify.storage.gateway_store import GatewayRecordStore
from stratify.storage.memory_store import get_memory_store

logger = logging.getLogger(__name__)


class InventoryView:
    """Asset list state for the inventory screen.

    Loads are sequenced: each takes a ticket and its result is applied only
    if no newer load (or mutation) happened meanwhile. Mutations touch the
    list only after the service confirmed them.
    """

    def __init__(
        self,
        assets: AssetService,
        scope: Callable[[], int | None],
        display_org: Callable[[], int | None],
    ):
        self.service = assets
        self._scope = scope
        self._display_org = display_org
        self._sequencer = RequestSequencer("inventory")
        self.items: list[Asset] = []
        self.query = ""
        self.asset_type = ALL_TYPES

    def reset(self) -> None:
        self._sequencer.invalidate()
        self.items = []
        self.query = ""
        self.asset_type = ALL_TYPES

    def _narrow(self, assets: list[Asset]) -> list[Asset]:
        org_id = self._display_org()
        if org_id is None:
            return assets
        return [asset for asset in assets if asset.org_id == org_id]

    async def _load(self) -> list[Asset]:
        ticket = self._sequencer.issue()
        scope = self._scope()
        if self.query.strip() or self.asset_type != ALL_TYPES:
            result = await self.service.search(self.query, self.asset_type, scope)
        else:
            result = await self.service.list(scope)
        if self._sequencer.accept(ticket):
            self.items = self._narrow(result)
        return self.items

    async def refresh(self) -> list[Asset]:
        return await self._load()

    async def search(self, query: str, asset_type: str = ALL_TYPES) -> list[Asset]:
        self.query = query or ""
        self.asset_type = asset_type or ALL_TYPES
        return await self._load()

    async def add(self, draft: AssetDraft) -> Asset:
        asset = await self.service.create(draft, self._scope())
        self._sequencer.invalidate()
        self.items = [asset, *self.items]
        return asset

    async def edit(self, asset_id: str, patch: AssetPatch) -> Asset:
        asset = await self.service.update(asset_id, patch, self._scope())
        self._sequencer.invalidate()
        self.items = [asset if item.id == asset_id else item for item in self.items]
        return asset

    async def remove(self, asset_id: str) -> None:
        await self.service.delete(asset_id, self._scope())
        self._sequencer.invalidate()
        self.items = [item for item in self.items if item.id != asset_id]


class ClientDirectory:
    """Organization list and user roster for client management."""

    def __init__(
        self,
        organizations: OrganizationService,
        users: UserService,
        onboarding: OnboardingService,
        scope: Callable[[], int | None],
    ):
        self.organization_service = organizations
        self.user_service = users
        self.onboarding = onboarding
        self._scope = scope
        self._sequencer = RequestSequencer("organizations")
        self.organizations: list[Organization] = []
        self.roster: list[UserProfile] = []

    def reset(self) -> None:
        self._sequencer.invalidate()
        self.organizations = []
        self.roster = []

    async def reload_organizations(self) -> list[Organization]:
        ticket = self._sequencer.issue()
        result = await self.organization_service.list()
        if self._sequencer.accept(ticket):
            self.organizations = result
        return self.organizations

    async def reload(self) -> None:
        await self.reload_organizations()
        self.roster = await self.user_service.list(self._scope())

    async def onboard(
        self,
        request: OnboardingRequest,
        on_created: OnboardedCallback | None = None,
    ) -> OnboardingResult:
        """Onboard a client and refresh the organization list.

        The list is reloaded even when onboarding stops half-way, so a
        half-created organization is visible.
        """
        try:
            result = await self.onboarding.onboard(request)
        except OnboardingError:
            await self.reload_organizations()
            raise

        self.roster = [result.cxo, *self.roster]
        if on_created is not None:
            outcome = on_created(result.organization, result.cxo)
            if inspect.isawaitable(outcome):
                await outcome
        await self.reload_organizations()
        return result

    async def edit_organization(self, org_id: int, changes: OrganizationUpdate) -> Organization:
        organization = await self.organization_service.update(org_id, changes)
        await self.reload_organizations()
        return organization

    async def remove_organization(self, org_id: int) -> None:
        await self.organization_service.delete(org_id)
        await self.reload_organizations()

    async def remove_user(self, user_id: str) -> None:
        await self.user_service.delete(user_id)
        self.roster = [profile for profile in self.roster if profile.id != user_id]


class DashboardSession:
    """Everything one browser session needs, wired together.

    Args:
        settings: Application settings
        store: Record store override (tests); defaults to the backend when
            configured, otherwise the shared demo store
        gateway: Backend gateway override (tests)
    """

    def __init__(
        self,
        settings: Settings,
        store: RecordStore | None = None,
        gateway: BackendGateway | None = None,
    ):
        self.settings = settings
        if gateway is None and store is None and settings.backend_configured:
            gateway = BackendGateway.from_settings(settings)
        self.gateway = gateway
        if store is None:
            store = GatewayRecordStore(gateway) if gateway is not None else get_memory_store()
        self.store = store

        self.selection = SelectedOrganization()
        self.policy = AccessPolicy(self.store, lambda: self.identity.principal)
        self.organizations = OrganizationService(self.store)
        self.users = UserService(self.store, self.policy)
        self.identity = IdentityManager(
            self.users,
            self.organizations,
            gateway=gateway,
            demo_password=settings.demo_password,
        )
        self.assets = AssetService(self.store, self.policy)
        self.portfolio = PortfolioAnalysisService(self.store)
        self.onboarding = OnboardingService(self.organizations, self.users)
        self.uploads = AssetUploadService(self.assets, settings.max_upload_bytes)
        self.inventory = InventoryView(self.assets, self.current_scope, self.display_org_id)
        self.directory = ClientDirectory(
            self.organizations, self.users, self.onboarding, self.current_scope
        )

    @property
    def mode(self) -> str:
        return "backend" if self.gateway is not None else "mock"

    @property
    def principal(self) -> Principal | None:
        return self.identity.principal

    def current_scope(self) -> int | None:
        """Scope for the next call; recomputed every time."""
        return resolve_org_scope(self.identity.principal, self.selection.organization)

    def display_org_id(self) -> int | None:
        """Organization an impersonating admin's lists are narrowed to."""
        principal = self.identity.principal
        if principal is not None and principal.is_admin_sentinel and self.selection:
            return self.selection.org_id
        return None

    async def start(self) -> Principal | None:
        self.identity.subscribe()
        return await self.identity.restore_session_within(
            self.settings.session_restore_timeout_seconds
        )

    def _reset_views(self) -> None:
        self.selection.clear()
        self.inventory.reset()
        self.directory.reset()
        self.uploads.jobs.clear()

    async def login(self, org_code: str, email: str, password: str) -> Principal:
        self._reset_views()
        return await self.identity.login(org_code, email, password)

    async def logout(self) -> None:
        try:
            await self.identity.logout()
        finally:
            self._reset_views()

    async def select_organization(self, org_id: int) -> Organization:
        organization = await self.organizations.get(org_id)
        self.selection.select(organization)
        self.inventory.reset()
        log_json(logger, logging.INFO, "organization_selected", org_id=org_id)
        return organization

    def clear_selection(self) -> None:
        self.selection.clear()
        self.inventory.reset()

    async def close(self) -> None:
        """Stop following session changes and release the backend client."""
        self.identity.unsubscribe()
        self.identity.discard()
        self._reset_views()
        if self.gateway is not None:
            await self.gateway.aclose()
