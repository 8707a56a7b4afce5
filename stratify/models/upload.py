"""Bulk-import job and validation result shapes."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from stratify.models.asset import AssetDraft
from stratify.models.enums import UploadStatus


class RowIssue(BaseModel):
    """One problem found in one spreadsheet row (row 1 is the header)."""

    row: int
    field: str
    value: str | None = None
    message: str

    def __str__(self) -> str:
        return f"Row {self.row}: {self.message}"


class ImportValidationResult(BaseModel):
    is_valid: bool
    total_rows: int
    valid_rows: int
    errors: list[RowIssue] = Field(default_factory=list)
    warnings: list[RowIssue] = Field(default_factory=list)
    drafts: list[AssetDraft] = Field(default_factory=list, exclude=True)


class UploadResults(BaseModel):
    total: int
    processed: int
    errors: list[str] = Field(default_factory=list)


class AssetUploadJob(BaseModel):
    """In-memory record of one uploaded file.

    ``progress`` only ever moves forward; use :meth:`advance`.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    file_name: str
    file_size: int
    status: UploadStatus = UploadStatus.PENDING
    progress: int = 0
    results: UploadResults | None = None
    validation: ImportValidationResult | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def advance(self, progress: int) -> None:
        self.progress = max(self.progress, min(100, progress))

    def start(self) -> None:
        self.status = UploadStatus.PROCESSING

    def complete(self, results: UploadResults) -> None:
        self.results = results
        self.status = UploadStatus.COMPLETED
        self.advance(100)

    def fail(self, results: UploadResults) -> None:
        self.results = results
        self.status = UploadStatus.FAILED
