"""Backend client gateway.

Thin async client for a Supabase-compatible backend: PostgREST under
``/rest/v1`` for table access and GoTrue under ``/auth/v1`` for accounts and
sessions. The gateway holds the current auth session and notifies listeners
when it changes.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from stratify.core.config import Settings
from stratify.core.errors import NO_ROWS, BackendError, BackendNotConfiguredError
from stratify.core.metrics import observe_backend_call
from stratify.core.security import is_expired, token_expiry
from stratify.core.structured_logging import log_json

logger = logging.getLogger(__name__)

_SINGLE_OBJECT = "application/vnd.pgrst.object+json"


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


@dataclass
class AuthUser:
    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> AuthUser:
        return cls(
            id=str(payload["id"]),
            email=payload.get("email"),
            user_metadata=dict(payload.get("user_metadata") or {}),
        )


@dataclass
class AuthSession:
    access_token: str
    refresh_token: str
    user: AuthUser
    expires_at: int | None = None

    @property
    def expired(self) -> bool:
        return is_expired(self.expires_at)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> AuthSession:
        access_token = payload["access_token"]
        expires_at = payload.get("expires_at")
        if expires_at is None and payload.get("expires_in") is not None:
            expires_at = int(time.time()) + int(payload["expires_in"])
        if expires_at is None:
            expires_at = token_expiry(access_token)
        return cls(
            access_token=access_token,
            refresh_token=payload.get("refresh_token") or "",
            user=AuthUser.from_payload(payload["user"]),
            expires_at=int(expires_at) if expires_at is not None else None,
        )


AuthListener = Callable[[AuthEvent, AuthSession | None], Awaitable[None]]


class Subscription:
    """Handle returned by :meth:`BackendGateway.on_auth_state_change`."""

    def __init__(self, listeners: list[AuthListener], listener: AuthListener):
        self._listeners = listeners
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active and self._listener in self._listeners:
            self._listeners.remove(self._listener)
        self.active = False


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def build_filters(
    equals: Mapping[str, Any] | None = None,
    search_text: str | None = None,
    search_columns: tuple[str, ...] = (),
) -> dict[str, str]:
    """Translate equality filters and a text search into PostgREST params.

    Equality values of ``None`` become ``is.null``; the text search is a
    case-insensitive substring match OR-ed across ``search_columns``, with
    ``%`` and ``_`` matched literally.
    """
    params: dict[str, str] = {}
    for column, value in (equals or {}).items():
        if value is None:
            params[column] = "is.null"
        else:
            params[column] = f"eq.{_format_value(value)}"
    if search_text and search_columns:
        pattern = _quote(f"*{_escape_like(search_text)}*")
        clauses = ",".join(f"{column}.ilike.{pattern}" for column in search_columns)
        params["or"] = f"({clauses})"
    return params


class BackendGateway:
    """Async client for the remote data/auth service.

    Args:
        url: Backend base URL
        api_key: Public (anon) API key
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests use ``httpx.MockTransport``)
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            base_url=url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"apikey": api_key},
        )
        self._session: AuthSession | None = None
        self._listeners: list[AuthListener] = []

    @classmethod
    def from_settings(cls, settings: Settings) -> BackendGateway:
        if not settings.backend_configured:
            raise BackendNotConfiguredError("Backend URL and API key are not configured")
        return cls(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.backend_timeout_seconds,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    # -- transport -----------------------------------------------------------

    def _auth_headers(self, access_token: str | None = None) -> dict[str, str]:
        token = access_token or (self._session.access_token if self._session else self._api_key)
        return {"Authorization": f"Bearer {token}"}

    async def _send(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        table: str = "-",
        params: Mapping[str, str] | None = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
        access_token: str | None = None,
    ) -> httpx.Response:
        merged = self._auth_headers(access_token)
        merged.update(headers or {})
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=merged
            )
        except httpx.TimeoutException as exc:
            observe_backend_call(operation=operation, table=table, ok=False)
            log_json(logger, logging.ERROR, "backend_error", operation=operation, table=table, error="timeout")
            raise BackendError("Backend request timed out", code="timeout") from exc
        except httpx.HTTPError as exc:
            observe_backend_call(operation=operation, table=table, ok=False)
            log_json(logger, logging.ERROR, "backend_error", operation=operation, table=table, error=str(exc))
            raise BackendError(f"Backend unreachable: {exc}", code="network_error") from exc

        if response.is_error:
            observe_backend_call(operation=operation, table=table, ok=False)
            error = self._parse_error(response)
            log_json(
                logger,
                logging.WARNING if error.is_no_rows else logging.ERROR,
                "backend_error",
                operation=operation,
                table=table,
                status_code=response.status_code,
                code=error.code,
                error=error.message,
            )
            raise error

        observe_backend_call(operation=operation, table=table, ok=True)
        return response

    @staticmethod
    def _parse_error(response: httpx.Response) -> BackendError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = (
            body.get("message")
            or body.get("error_description")
            or body.get("msg")
            or body.get("error")
            or response.reason_phrase
            or "Backend request failed"
        )
        code = body.get("code") or body.get("error_code")
        if code is not None:
            code = str(code)
        return BackendError(str(message), code=code, status_code=response.status_code)

    # -- tables --------------------------------------------------------------

    async def select(
        self,
        table: str,
        *,
        equals: Mapping[str, Any] | None = None,
        search_text: str | None = None,
        search_columns: tuple[str, ...] = (),
        order_by: tuple[str, ...] = (),
        descending: bool = False,
        limit: int | None = None,
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        params = {"select": columns, **build_filters(equals, search_text, search_columns)}
        if order_by:
            direction = "desc" if descending else "asc"
            params["order"] = ",".join(f"{column}.{direction}" for column in order_by)
        if limit is not None:
            params["limit"] = str(limit)
        response = await self._send(
            "GET", f"/rest/v1/{table}", operation="select", table=table, params=params
        )
        return list(response.json())

    async def select_single(
        self,
        table: str,
        *,
        equals: Mapping[str, Any],
        columns: str = "*",
    ) -> dict[str, Any]:
        """Fetch exactly one row.

        Raises:
            BackendError: with code ``PGRST116`` when no row matches
        """
        params = {"select": columns, **build_filters(equals)}
        response = await self._send(
            "GET",
            f"/rest/v1/{table}",
            operation="select",
            table=table,
            params=params,
            headers={"Accept": _SINGLE_OBJECT},
        )
        return dict(response.json())

    async def maybe_single(
        self,
        table: str,
        *,
        equals: Mapping[str, Any],
        columns: str = "*",
    ) -> dict[str, Any] | None:
        try:
            return await self.select_single(table, equals=equals, columns=columns)
        except BackendError as exc:
            if exc.code == NO_ROWS:
                return None
            raise

    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        response = await self._send(
            "POST",
            f"/rest/v1/{table}",
            operation="insert",
            table=table,
            params={"select": "*"},
            json=dict(row),
            headers={"Prefer": "return=representation", "Accept": _SINGLE_OBJECT},
        )
        return dict(response.json())

    async def update(
        self,
        table: str,
        *,
        equals: Mapping[str, Any],
        patch: Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        response = await self._send(
            "PATCH",
            f"/rest/v1/{table}",
            operation="update",
            table=table,
            params={"select": "*", **build_filters(equals)},
            json=dict(patch),
            headers={"Prefer": "return=representation"},
        )
        return list(response.json())

    async def delete(self, table: str, *, equals: Mapping[str, Any]) -> None:
        if not equals:
            raise ValueError("Refusing to delete without a filter")
        await self._send(
            "DELETE",
            f"/rest/v1/{table}",
            operation="delete",
            table=table,
            params=build_filters(equals),
        )

    # -- auth ----------------------------------------------------------------

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        """Register a listener for session changes; keep the handle to unsubscribe."""
        self._listeners.append(listener)
        return Subscription(self._listeners, listener)

    async def _notify(self, event: AuthEvent) -> None:
        for listener in list(self._listeners):
            try:
                await listener(event, self._session)
            except Exception as exc:
                log_json(
                    logger,
                    logging.ERROR,
                    "auth_listener_failed",
                    auth_event=event.value,
                    error=str(exc),
                    exception=exc.__class__.__name__,
                )

    async def _set_session(self, session: AuthSession | None, event: AuthEvent) -> None:
        self._session = session
        await self._notify(event)

    async def get_session(self) -> AuthSession | None:
        """Current session, refreshed first if its access token has expired."""
        if self._session is None:
            return None
        if self._session.expired:
            try:
                await self.refresh_session()
            except BackendError:
                await self._set_session(None, AuthEvent.SIGNED_OUT)
                return None
        return self._session

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        response = await self._send(
            "POST",
            "/auth/v1/token",
            operation="sign_in",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            access_token=self._api_key,
        )
        session = AuthSession.from_payload(response.json())
        await self._set_session(session, AuthEvent.SIGNED_IN)
        return session

    async def refresh_session(self) -> AuthSession:
        if self._session is None or not self._session.refresh_token:
            raise BackendError("No session to refresh", code="session_missing")
        response = await self._send(
            "POST",
            "/auth/v1/token",
            operation="refresh",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": self._session.refresh_token},
            access_token=self._api_key,
        )
        session = AuthSession.from_payload(response.json())
        await self._set_session(session, AuthEvent.TOKEN_REFRESHED)
        return session

    async def set_session(self, access_token: str, refresh_token: str) -> AuthSession:
        """Adopt a session obtained elsewhere (e.g. by the browser)."""
        response = await self._send(
            "GET", "/auth/v1/user", operation="get_user", access_token=access_token
        )
        session = AuthSession(
            access_token=access_token,
            refresh_token=refresh_token,
            user=AuthUser.from_payload(response.json()),
            expires_at=token_expiry(access_token),
        )
        await self._set_session(session, AuthEvent.SIGNED_IN)
        return session

    async def sign_up(
        self,
        email: str,
        password: str,
        metadata: Mapping[str, Any],
    ) -> AuthUser:
        """Create an account; profile fields travel as user metadata."""
        response = await self._send(
            "POST",
            "/auth/v1/signup",
            operation="sign_up",
            json={"email": email, "password": password, "data": dict(metadata)},
            access_token=self._api_key,
        )
        payload = response.json()
        user_payload = payload.get("user") if isinstance(payload.get("user"), dict) else payload
        if not user_payload or "id" not in user_payload:
            raise BackendError("Failed to create user - no user returned")
        return AuthUser.from_payload(user_payload)

    async def sign_out(self) -> None:
        """Invalidate the remote session; the local session is always dropped."""
        session = self._session
        try:
            if session is not None:
                await self._send(
                    "POST",
                    "/auth/v1/logout",
                    operation="sign_out",
                    access_token=session.access_token,
                )
        finally:
            if session is not None:
                await self._set_session(None, AuthEvent.SIGNED_OUT)
