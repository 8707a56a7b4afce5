"""Session and identity management.

Owns the current principal for one dashboard session: restoring it at
startup, following backend session changes, and the login/logout/signup
flows. Without a configured backend, login checks a fixed demo roster.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from stratify.core.errors import (
    BackendError,
    BackendNotConfiguredError,
    LoginError,
    LoginFailure,
    ValidationError,
)
from stratify.core.gateway import AuthEvent, AuthSession, BackendGateway, Subscription
from stratify.core.structured_logging import log_json
from stratify.models.enums import SessionState, UserRole
from stratify.models.principal import ADMIN_ORGANIZATION, Principal, UserProfile
from stratify.models.roles import ADMIN_ORG_CODE, ClientTier, parse_role
from stratify.services.organization_service import OrganizationService
from stratify.services.user_service import UserService
from stratify.storage.base import ADMIN_USERS
from stratify.storage.seed import DEMO_ROSTER

logger = logging.getLogger(__name__)

_UNREACHABLE_CODES = {"timeout", "network_error"}


class IdentityManager:
    """Current-user lifecycle for one dashboard session.

    State moves ``uninitialized -> loading -> authenticated | anonymous``.
    ``initialized`` becomes true the first time a restore settles and never
    goes back.

    Login and logout bump a generation counter; a profile load that started
    under an older generation is discarded when it completes, so a logout
    can never be undone by a slow in-flight load.
    """

    def __init__(
        self,
        users: UserService,
        organizations: OrganizationService,
        gateway: BackendGateway | None = None,
        demo_password: str = "demo123",
    ):
        self.users = users
        self.organizations = organizations
        self.gateway = gateway
        self.demo_password = demo_password
        self.state = SessionState.UNINITIALIZED
        self.initialized = False
        self._principal: Principal | None = None
        self._generation = 0
        self._subscription: Subscription | None = None

    @property
    def principal(self) -> Principal | None:
        return self._principal

    @property
    def backend_configured(self) -> bool:
        return self.gateway is not None

    @property
    def generation(self) -> int:
        return self._generation

    def _settle(self) -> None:
        self.state = SessionState.AUTHENTICATED if self._principal else SessionState.ANONYMOUS
        self.initialized = True

    def _clear(self) -> None:
        self._principal = None
        self.state = SessionState.ANONYMOUS

    # -- startup -------------------------------------------------------------

    async def restore_session(self) -> Principal | None:
        """Adopt any existing backend session and load its profile.

        Profile or session fetch failures leave the session anonymous.
        """
        self.state = SessionState.LOADING
        session: AuthSession | None = None
        if self.gateway is not None:
            try:
                session = await self.gateway.get_session()
            except BackendError as exc:
                log_json(logger, logging.WARNING, "session_restore_failed", error=exc.message)
        if session is not None:
            await self.load_profile(session.user.id, session.user.user_metadata.get("orgCode"))
        self._settle()
        return self._principal

    async def restore_session_within(self, timeout: float) -> Principal | None:
        """Restore, but give up after ``timeout`` seconds and go anonymous."""
        try:
            return await asyncio.wait_for(self.restore_session(), timeout)
        except asyncio.TimeoutError:
            self._generation += 1
            self._clear()
            self.initialized = True
            log_json(logger, logging.WARNING, "session_restore_timeout", timeout_seconds=timeout)
            return None

    # -- change notifications -----------------------------------------------

    def subscribe(self) -> None:
        if self.gateway is not None and self._subscription is None:
            self._subscription = self.gateway.on_auth_state_change(self._on_auth_event)

    def unsubscribe(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    @asynccontextmanager
    async def listening(self) -> AsyncIterator[IdentityManager]:
        """Follow session changes for the duration of the block."""
        self.subscribe()
        try:
            yield self
        finally:
            self.unsubscribe()

    async def _on_auth_event(self, event: AuthEvent, session: AuthSession | None) -> None:
        if event == AuthEvent.SIGNED_OUT or session is None:
            self._clear()
            return
        await self.load_profile(session.user.id, session.user.user_metadata.get("orgCode"))
        self._settle()

    # -- profile -------------------------------------------------------------

    async def _fetch_profile(self, user_id: str, org_code_hint: str | None) -> UserProfile | None:
        hint = (org_code_hint or "").strip().upper() or None
        if hint == ADMIN_ORG_CODE:
            return await self.users.find_admin_profile(user_id)
        if hint is not None:
            return await self.users.find_client_profile(user_id)
        return await self.users.find_admin_profile(user_id) or await self.users.find_client_profile(
            user_id
        )

    async def load_profile(self, user_id: str, org_code_hint: str | None = None) -> Principal | None:
        """Load and install the principal for ``user_id``.

        A no-op when that user is already loaded. Failures are logged and
        leave no principal loaded.

        Args:
            user_id: Account id
            org_code_hint: "ADMIN" selects the admin collection, any other
                code the client collection; None tries admin then client
        """
        if self._principal is not None and self._principal.id == user_id:
            return self._principal

        generation = self._generation
        try:
            profile = await self._fetch_profile(user_id, org_code_hint)
        except BackendError as exc:
            log_json(logger, logging.ERROR, "profile_load_failed", user_id=user_id, error=exc.message)
            profile = None

        if generation != self._generation:
            log_json(
                logger,
                logging.INFO,
                "stale_result_discarded",
                view="profile",
                user_id=user_id,
            )
            return None
        if profile is None:
            log_json(logger, logging.WARNING, "profile_not_found", user_id=user_id)
            return None

        self._principal = profile.to_principal()
        return self._principal

    # -- login / logout ------------------------------------------------------

    async def login(self, org_code: str, email: str, password: str) -> Principal:
        """Authenticate and install the principal.

        Raises:
            LoginError: With the reason (invalid org code, bad credentials,
                tier/organization mismatch, backend unavailable)
        """
        self._generation += 1
        self._principal = None
        code = (org_code or "").strip().upper()
        try:
            if self.gateway is None:
                principal = await self._demo_login(code, email.strip(), password)
            else:
                principal = await self._backend_login(code, email.strip(), password)
        except LoginError as exc:
            self._clear()
            log_json(logger, logging.WARNING, "login_failed", reason=exc.reason.value, org_code=code)
            raise

        self._principal = principal
        self._settle()
        log_json(
            logger,
            logging.INFO,
            "login_succeeded",
            user_id=principal.id,
            role=principal.role.value,
            org_code=principal.org_code,
        )
        return principal

    async def _demo_login(self, code: str, email: str, password: str) -> Principal:
        entry = DEMO_ROSTER.get((email, code))
        if entry is None or password != self.demo_password:
            raise LoginError(
                LoginFailure.INVALID_CREDENTIALS,
                f"Invalid credentials. Use {self.demo_password} as password for demo accounts.",
            )
        table, user_id = entry
        if table == ADMIN_USERS:
            profile = await self.users.find_admin_profile(user_id)
        else:
            profile = await self.users.find_client_profile(user_id)
        if profile is None:
            raise LoginError(LoginFailure.INVALID_CREDENTIALS, "Demo account is no longer available")
        return profile.to_principal()

    async def _backend_login(self, code: str, email: str, password: str) -> Principal:
        org_id: int | None = None
        if code != ADMIN_ORG_CODE:
            try:
                organization = await self.organizations.get_by_code(code)
            except BackendError as exc:
                raise LoginError(LoginFailure.BACKEND_UNAVAILABLE, exc.message) from exc
            if organization is None:
                raise LoginError(LoginFailure.INVALID_ORG_CODE, "Invalid organization code")
            org_id = organization.org_id

        try:
            session = await self.gateway.sign_in_with_password(email, password)
        except BackendError as exc:
            if exc.code in _UNREACHABLE_CODES:
                raise LoginError(LoginFailure.BACKEND_UNAVAILABLE, exc.message) from exc
            raise LoginError(LoginFailure.INVALID_CREDENTIALS, "Invalid email or password") from exc

        try:
            if code == ADMIN_ORG_CODE:
                profile = await self.users.find_admin_profile(session.user.id)
            else:
                profile = await self.users.find_client_profile(session.user.id, org_id)
        except BackendError as exc:
            await self._discard_backend_session()
            raise LoginError(LoginFailure.BACKEND_UNAVAILABLE, exc.message) from exc

        if profile is None:
            await self._discard_backend_session()
            if code == ADMIN_ORG_CODE:
                message = "This account is not an administrator account"
            else:
                message = f"This account is not registered with organization {code}"
            raise LoginError(LoginFailure.TIER_MISMATCH, message)
        return profile.to_principal()

    async def _discard_backend_session(self) -> None:
        try:
            await self.gateway.sign_out()
        except BackendError as exc:
            log_json(logger, logging.WARNING, "sign_out_failed", error=exc.message)

    async def logout(self) -> None:
        """Drop the principal; also ends the backend session when configured."""
        self._generation += 1
        user_id = self._principal.id if self._principal else None
        try:
            if self.gateway is not None:
                await self._discard_backend_session()
        finally:
            self._clear()
            log_json(logger, logging.INFO, "logout", user_id=user_id)

    def discard(self) -> None:
        """Forget the principal locally without touching the backend session."""
        self._generation += 1
        self._clear()

    async def adopt_session(self, access_token: str, refresh_token: str) -> Principal | None:
        """Take over a backend session the browser already holds."""
        if self.gateway is None:
            raise BackendNotConfiguredError("Sessions can only be adopted when a backend is configured")
        self._generation += 1
        self._principal = None
        session = await self.gateway.set_session(access_token, refresh_token)
        if self._principal is None:
            await self.load_profile(session.user.id, session.user.user_metadata.get("orgCode"))
        self._settle()
        return self._principal

    async def signup(
        self,
        email: str,
        password: str,
        name: str,
        role: UserRole,
        organization: str,
        org_code: str | None = None,
    ) -> str:
        """Create a backend account; a server trigger materializes the profile.

        Returns:
            The new account's id

        Raises:
            BackendNotConfiguredError: In demo mode
            ValidationError: If a client role names an unknown organization
        """
        if self.gateway is None:
            raise BackendNotConfiguredError("Sign-up requires a configured backend")

        metadata: dict[str, object] = {"name": name, "role": role.value, "organization": organization}
        if isinstance(parse_role(role), ClientTier):
            if org_code:
                org = await self.organizations.get_by_code(org_code)
                if org is None:
                    raise ValidationError("org_code", org_code, "Invalid organization code")
                metadata.update(organization=org.org_name, orgCode=org.org_code, org_id=org.org_id)
        else:
            metadata.update(organization=ADMIN_ORGANIZATION, orgCode=ADMIN_ORG_CODE)

        try:
            user = await self.gateway.sign_up(email, password, metadata)
        except BackendError as exc:
            log_json(logger, logging.ERROR, "signup_failed", role=role.value, error=exc.message)
            raise exc.wrap("sign up") from exc
        log_json(logger, logging.INFO, "signup_succeeded", user_id=user.id, role=role.value)
        return user.id
