"""IT asset inventory API endpoints."""

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status

from stratify.api.deps import get_current_principal, get_dashboard
from stratify.core.asset_catalog import ASSET_CATEGORIES
from stratify.core.errors import NotFoundError
from stratify.models.principal import Principal
from stratify.models.upload import AssetUploadJob
from stratify.schemas.asset import (
    AssetCatalogResponse,
    AssetCreateRequest,
    AssetListResponse,
    AssetResponse,
    AssetSummaryResponse,
    AssetTypeCategories,
    AssetUpdateRequest,
    UploadJobResponse,
    UploadResultsResponse,
    ValidationResultResponse,
)
from stratify.services.asset_import import upload_template_csv
from stratify.services.asset_service import ALL_TYPES, AssetService
from stratify.services.dashboard import DashboardSession

router = APIRouter()


def _job_to_response(job: AssetUploadJob) -> UploadJobResponse:
    validation = None
    if job.validation is not None:
        validation = ValidationResultResponse.model_validate(job.validation.model_dump())
    return UploadJobResponse(
        id=job.id,
        file_name=job.file_name,
        file_size=job.file_size,
        status=job.status,
        progress=job.progress,
        results=UploadResultsResponse(**job.results.model_dump()) if job.results else None,
        validation_result=validation,
    )


@router.get(
    "",
    response_model=AssetListResponse,
    summary="List and search assets",
    description="Assets visible in the caller's scope, newest first.",
)
async def list_assets(
    q: str = Query("", description="Matches name, description or owner"),
    type: str = Query(ALL_TYPES, description="Asset type or 'all'"),
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> AssetListResponse:
    """List assets for the inventory screen.

    Args:
        q: Free-text search
        type: Asset type filter
        dashboard: Browser session context
        principal: Signed-in principal

    Returns:
        Assets with the applied filters echoed back
    """
    items = await dashboard.inventory.search(q, type)
    return AssetListResponse(
        items=items,
        total=len(items),
        query=dashboard.inventory.query,
        type=dashboard.inventory.asset_type,
    )


@router.get("/summary", response_model=AssetSummaryResponse, summary="Inventory counters")
async def asset_summary(
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> AssetSummaryResponse:
    items = await dashboard.inventory.refresh()
    summary = AssetService.summarize(items)
    return AssetSummaryResponse(**summary.model_dump())


@router.get("/catalog", response_model=AssetCatalogResponse, summary="Asset types and categories")
async def asset_catalog() -> AssetCatalogResponse:
    return AssetCatalogResponse(
        types=[
            AssetTypeCategories(type=asset_type, categories=list(categories))
            for asset_type, categories in ASSET_CATEGORIES.items()
        ]
    )


@router.get("/template", summary="Bulk upload CSV template")
async def upload_template() -> Response:
    return Response(
        content=upload_template_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="asset_upload_template.csv"'},
    )


@router.get(
    "/uploads/latest",
    response_model=UploadJobResponse,
    summary="Most recent upload job",
)
async def latest_upload(
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> UploadJobResponse:
    job = dashboard.uploads.latest
    if job is None:
        raise NotFoundError("No uploads in this session")
    return _job_to_response(job)


@router.post(
    "/import",
    response_model=UploadJobResponse,
    summary="Bulk import assets from CSV or Excel",
    description=(
        "Validates every row first; assets are created only if the whole file is valid."
    ),
)
async def import_assets(
    file: UploadFile = File(...),
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> UploadJobResponse:
    """Upload a spreadsheet of assets.

    Returns:
        The finished job: completed with per-row results, or failed with the
        validation report

    Raises:
        ValidationError: 422 for unsupported or oversized files
    """
    limit = dashboard.uploads.max_upload_bytes
    if file.size is not None and file.size > limit:
        dashboard.uploads.accept(file.filename or "", file.size)
    # At most one byte past the limit.
    content = await file.read(limit + 1)
    job = await dashboard.uploads.upload(
        file.filename or "",
        content,
        dashboard.current_scope(),
        created_by=principal.email,
    )
    if job.results is not None and job.results.processed:
        await dashboard.inventory.refresh()
    return _job_to_response(job)


@router.get("/{asset_id}", response_model=AssetResponse, summary="Get an asset")
async def get_asset(
    asset_id: str,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> AssetResponse:
    return await dashboard.assets.get(asset_id, dashboard.current_scope())


@router.post(
    "",
    response_model=AssetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an asset",
)
async def create_asset(
    request: AssetCreateRequest,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> AssetResponse:
    """Create an asset in the caller's scope.

    The creator is always the signed-in principal.

    Raises:
        HTTPException: 422 if the category does not belong to the type
    """
    request.created_by = principal.email
    return await dashboard.inventory.add(request)


@router.patch("/{asset_id}", response_model=AssetResponse, summary="Update an asset")
async def update_asset(
    asset_id: str,
    request: AssetUpdateRequest,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> AssetResponse:
    """Apply a partial update.

    Raises:
        NotFoundError: 404 if the asset is not visible in the caller's scope
    """
    return await dashboard.inventory.edit(asset_id, request)


@router.delete(
    "/{asset_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an asset",
)
async def delete_asset(
    asset_id: str,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> None:
    await dashboard.inventory.remove(asset_id)
