"""Pydantic schemas for organization endpoints.

Organizations keep their persisted snake_case field names on the wire.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from stratify.schemas.user import UserResponse


class OrganizationResponse(BaseModel):
    org_id: int
    org_code: str
    org_name: str
    description: str | None = None
    sector: str | None = None
    remarks: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    model_config = ConfigDict(from_attributes=True)


class OnboardOrganizationRequest(BaseModel):
    """Request schema for POST /organizations.

    Creates the organization and its first CXO account. The code length is
    checked by the service so the error carries the offending value.
    """

    org_code: str = Field(..., description="5-character organization code")
    org_name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    sector: str | None = None
    remarks: str | None = None
    cxo_name: str = Field(..., min_length=1, max_length=255)
    cxo_email: EmailStr
    cxo_password: str = Field(..., min_length=6)


class OrganizationUpdateRequest(BaseModel):
    """Request schema for PATCH /organizations/{org_id}; all fields optional."""

    org_code: str | None = None
    org_name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    sector: str | None = None
    remarks: str | None = None


class OnboardingResponse(BaseModel):
    organization: OrganizationResponse
    cxo: UserResponse
