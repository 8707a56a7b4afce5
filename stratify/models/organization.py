"""Organization (tenant) model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

ORG_CODE_LENGTH = 5


class Organization(BaseModel):
    org_id: int
    org_code: str
    org_name: str
    description: str | None = None
    sector: str | None = None
    remarks: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Organization:
        return cls.model_validate(row)
