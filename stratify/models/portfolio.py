"""Portfolio-analysis assessment catalog models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from stratify.models.enums import AssessmentStatus, Complexity


class PACategory(BaseModel):
    id: str
    category_id: str
    title: str
    description: str = ""
    icon: str = ""
    color: str = ""
    sort_order: int = 0
    is_active: bool = True

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> PACategory:
        return cls.model_validate({**row, "id": str(row["id"])})


class PAAssessment(BaseModel):
    id: str
    assessment_id: str
    category_id: str
    name: str
    description: str = ""
    duration: str = ""
    complexity: Complexity = Complexity.MEDIUM
    status: AssessmentStatus = AssessmentStatus.AVAILABLE
    sort_order: int = 0
    is_active: bool = True

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> PAAssessment:
        return cls.model_validate({**row, "id": str(row["id"])})


class PACategoryWithAssessments(PACategory):
    assessments: list[PAAssessment] = Field(default_factory=list)
