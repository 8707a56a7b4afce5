"""Access-token helpers and session identifiers."""

from __future__ import annotations

import secrets
import time

import jwt
from jwt import exceptions as jwt_exceptions


def read_token_claims(token: str) -> dict | None:
    """Read the claims of a backend-issued access token.

    The backend signs tokens with a secret this service never sees, so the
    signature is not verified here; the claims are only used to schedule a
    refresh, never to authorize anything.

    Args:
        token: JWT access token

    Returns:
        Claims dict, or None if the token is malformed
    """
    try:
        return jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": False},
            algorithms=["HS256", "RS256", "ES256"],
        )
    except jwt_exceptions.PyJWTError:
        return None


def token_expiry(token: str) -> int | None:
    """Unix ``exp`` claim of a token, if it has one."""
    claims = read_token_claims(token)
    if not claims or "exp" not in claims:
        return None
    try:
        return int(claims["exp"])
    except (TypeError, ValueError):
        return None


def is_expired(expires_at: int | None, leeway_seconds: int = 30) -> bool:
    if expires_at is None:
        return False
    return time.time() >= expires_at - leeway_seconds


def new_session_id() -> str:
    """Opaque dashboard session identifier (128-bit)."""
    return secrets.token_hex(16)
