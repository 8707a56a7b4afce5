"""Domain exceptions raised by services and mapped to HTTP by the API layer."""

from __future__ import annotations

from enum import Enum
from typing import Any

# Backend machine codes the services branch on.
NO_ROWS = "PGRST116"
UNIQUE_VIOLATION = "23505"


class ServiceError(Exception):
    """Base class for all errors raised by the inventory core."""

    error_code = "service_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, Any] | None:
        return None


class ValidationError(ServiceError):
    """Input rejected before any backend call was made."""

    error_code = "validation_error"

    def __init__(self, field: str, value: Any, message: str):
        super().__init__(message)
        self.field = field
        self.value = value

    def details(self) -> dict[str, Any]:
        return {"field": self.field, "value": self.value}


class NotFoundError(ServiceError):
    error_code = "not_found"


class ConflictError(ServiceError):
    error_code = "conflict"


class PermissionDeniedError(ServiceError):
    error_code = "permission_denied"


class BackendError(ServiceError):
    """Failure reported by (or while talking to) the data/auth backend.

    Attributes:
        code: Machine code from the backend, e.g. ``PGRST116`` for "no rows"
        status_code: HTTP status returned by the backend, if any
    """

    error_code = "backend_error"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.status_code = status_code

    @property
    def is_no_rows(self) -> bool:
        return self.code == NO_ROWS

    @property
    def is_unique_violation(self) -> bool:
        return self.code == UNIQUE_VIOLATION

    def wrap(self, action: str) -> BackendError:
        """Return a copy whose message is prefixed with the failed action."""
        return BackendError(
            f"Failed to {action}: {self.message}",
            code=self.code,
            status_code=self.status_code,
        )

    def details(self) -> dict[str, Any] | None:
        return {"code": self.code} if self.code else None


class BackendNotConfiguredError(ServiceError):
    error_code = "backend_not_configured"


class LoginFailure(str, Enum):
    """Why a login attempt was refused."""

    INVALID_ORG_CODE = "invalid_org_code"
    INVALID_CREDENTIALS = "invalid_credentials"
    TIER_MISMATCH = "tier_mismatch"
    BACKEND_UNAVAILABLE = "backend_unavailable"


class LoginError(ServiceError):
    error_code = "login_failed"

    def __init__(self, reason: LoginFailure, message: str):
        super().__init__(message)
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {"reason": self.reason.value}


class OnboardingError(ServiceError):
    """Organization was created but its initial CXO account was not."""

    error_code = "onboarding_incomplete"

    def __init__(self, message: str, organization: Any):
        super().__init__(message)
        self.organization = organization

    def details(self) -> dict[str, Any]:
        return {
            "org_id": self.organization.org_id,
            "org_code": self.organization.org_code,
        }
