"""Structured JSON logging helpers.

Every service logs one JSON object per line so any collector can ingest it.
Credential-looking fields are masked before serialization.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any

from stratify.core.request_context import get_request_id, get_session_id

_MASKED_FIELDS = frozenset(
    {"password", "access_token", "refresh_token", "apikey", "api_key", "authorization"}
)


def configure_logging(level: str = "INFO") -> None:
    """Install a plain message formatter on the root logger (idempotent)."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    if not any(getattr(h, "_stratify", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._stratify = True  # type: ignore[attr-defined]
        root.addHandler(handler)


def log_json(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """Emit a single JSON log line with request and session correlation IDs."""

    payload: dict[str, Any] = {
        "timestamp": datetime.now(UTC).isoformat(),
        "event": event,
    }
    request_id = get_request_id()
    if request_id:
        payload["request_id"] = request_id
    session_id = get_session_id()
    if session_id:
        payload["session_id"] = session_id

    for key, value in fields.items():
        payload[key] = "***" if key.lower() in _MASKED_FIELDS else value
    logger.log(level, json.dumps(payload, default=str))
