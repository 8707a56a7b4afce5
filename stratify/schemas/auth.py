"""Pydantic schemas for authentication endpoints."""

from pydantic import EmailStr, Field

from stratify.models.base import CamelModel
from stratify.models.enums import SessionState, UserRole
from stratify.models.principal import Principal


class LoginRequest(CamelModel):
    """Request schema for POST /auth/login.

    ``orgCode`` is the client's 5-character code, or ADMIN for staff.
    """

    org_code: str = Field(..., min_length=1, max_length=16, description="Organization code or ADMIN")
    email: str = Field(..., min_length=3, description="Account email")
    password: str = Field(..., min_length=1, description="Account password")


class SignupRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=255)
    role: UserRole
    organization: str = ""
    org_code: str | None = None


class AdoptSessionRequest(CamelModel):
    """Tokens of a backend session the browser already holds."""

    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)


class PrincipalResponse(CamelModel):
    id: str
    name: str
    email: str
    role: UserRole
    organization: str
    org_code: str
    org_id: int | None = Field(default=None, alias="org_id")

    @classmethod
    def from_principal(cls, principal: Principal) -> "PrincipalResponse":
        return cls(**principal.model_dump())


class SessionStatusResponse(CamelModel):
    state: SessionState
    initialized: bool
    mode: str = Field(..., description="backend or mock")
    user: PrincipalResponse | None = None


class SignupResponse(CamelModel):
    user_id: str
