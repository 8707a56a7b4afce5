"""Pydantic schemas for asset endpoints."""

from pydantic import Field, model_validator

from stratify.core.asset_catalog import categories_for, is_valid_category
from stratify.models.asset import Asset, AssetDraft, AssetPatch
from stratify.models.base import CamelModel
from stratify.models.enums import AssetType, UploadStatus
from stratify.models.upload import RowIssue


class AssetCreateRequest(AssetDraft):
    """Request schema for POST /assets (the guided wizard).

    Category must be one of the categories of the chosen type.
    """

    @model_validator(mode="after")
    def _category_belongs_to_type(self) -> "AssetCreateRequest":
        if not is_valid_category(self.type, self.category):
            allowed = ", ".join(categories_for(self.type))
            raise ValueError(
                f"Category '{self.category}' is not valid for type '{self.type.value}'. "
                f"Expected one of: {allowed}"
            )
        return self


class AssetUpdateRequest(AssetPatch):
    """Request schema for PATCH /assets/{id}. Type and category are immutable."""


AssetResponse = Asset


class AssetListResponse(CamelModel):
    items: list[Asset]
    total: int
    query: str = ""
    type: str = "all"


class AssetTypeCategories(CamelModel):
    type: AssetType
    categories: list[str]


class AssetCatalogResponse(CamelModel):
    types: list[AssetTypeCategories]


class AssetSummaryResponse(CamelModel):
    total: int
    by_status: dict[str, int]
    by_criticality: dict[str, int]
    by_type: dict[str, int]


class ValidationResultResponse(CamelModel):
    is_valid: bool
    total_rows: int
    valid_rows: int
    errors: list[RowIssue] = Field(default_factory=list)
    warnings: list[RowIssue] = Field(default_factory=list)


class UploadResultsResponse(CamelModel):
    total: int
    processed: int
    errors: list[str] = Field(default_factory=list)


class UploadJobResponse(CamelModel):
    id: str
    file_name: str
    file_size: int
    status: UploadStatus
    progress: int
    results: UploadResultsResponse | None = None
    validation_result: ValidationResultResponse | None = None
