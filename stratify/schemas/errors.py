"""Error response schema shared by every endpoint."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response schema.

    Used for all error responses (4xx, 5xx) across the API.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "error": "login_failed",
                    "message": "Invalid organization code",
                    "details": {"reason": "invalid_org_code"},
                },
                {
                    "error": "validation_error",
                    "message": "Organization code must be exactly 5 characters",
                    "details": {"field": "org_code", "value": "AB1"},
                },
            ]
        }
    )

    error: str = Field(
        ...,
        description="Error type identifier",
        examples=["login_failed", "validation_error", "conflict"],
    )
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(
        None,
        description="Additional error context (field/value, login failure reason, ...)",
    )
