"""Request correlation context.

Carries the request ID and the dashboard session ID of the request being
served so log lines emitted deep inside services can be tied back to it.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
_session_id_var: ContextVar[str | None] = ContextVar("dashboard_session_id", default=None)


def get_request_id() -> str | None:
    return _request_id_var.get()


def get_session_id() -> str | None:
    return _session_id_var.get()


def new_request_id() -> str:
    return str(uuid4())


def bind_session_id(session_id: str | None) -> None:
    """Attach the dashboard session to the current request context."""
    _session_id_var.set(session_id)


@contextmanager
def request_id_context(request_id: str | None):
    """Set the request ID (and a fresh session slot) for the duration."""
    request_token = _request_id_var.set(request_id)
    session_token = _session_id_var.set(None)
    try:
        yield
    finally:
        _session_id_var.reset(session_token)
        _request_id_var.reset(request_token)
