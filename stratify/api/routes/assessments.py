"""Portfolio-analysis assessment catalog endpoints."""

from fastapi import APIRouter, Depends, Query, status

from stratify.api.deps import get_current_principal, get_dashboard, require_super_admin
from stratify.core.errors import NotFoundError
from stratify.models.enums import Complexity
from stratify.models.portfolio import PAAssessment, PACategory, PACategoryWithAssessments
from stratify.models.principal import Principal
from stratify.services.dashboard import DashboardSession
from stratify.services.portfolio_service import AssessmentCreate, CategoryCreate

router = APIRouter()


@router.get(
    "/categories",
    response_model=list[PACategoryWithAssessments],
    summary="Assessment categories with their assessments",
)
async def list_categories(
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> list[PACategoryWithAssessments]:
    return await dashboard.portfolio.get_categories_with_assessments()


@router.get(
    "/categories/{category_id}",
    response_model=list[PAAssessment],
    summary="Assessments of one category",
)
async def list_category_assessments(
    category_id: str,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> list[PAAssessment]:
    return await dashboard.portfolio.get_assessments_by_category(category_id)


@router.get("", response_model=list[PAAssessment], summary="Search assessments")
async def search_assessments(
    q: str = Query("", description="Matches name or description"),
    complexity: Complexity | None = Query(None),
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> list[PAAssessment]:
    if not q.strip() and complexity is None:
        return await dashboard.portfolio.get_all_assessments()
    return await dashboard.portfolio.search(q, complexity)


@router.get("/{assessment_id}", response_model=PAAssessment, summary="Get an assessment")
async def get_assessment(
    assessment_id: str,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(get_current_principal),
) -> PAAssessment:
    assessment = await dashboard.portfolio.get_assessment(assessment_id)
    if assessment is None:
        raise NotFoundError(f"Assessment '{assessment_id}' not found")
    return assessment


@router.post(
    "/categories",
    response_model=PACategory,
    status_code=status.HTTP_201_CREATED,
    summary="Add an assessment category",
)
async def create_category(
    request: CategoryCreate,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_super_admin()),
) -> PACategory:
    return await dashboard.portfolio.create_category(request)


@router.post(
    "",
    response_model=PAAssessment,
    status_code=status.HTTP_201_CREATED,
    summary="Add an assessment",
)
async def create_assessment(
    request: AssessmentCreate,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_super_admin()),
) -> PAAssessment:
    """Add an assessment to an existing category.

    Raises:
        NotFoundError: 404 if the category does not exist
        ConflictError: 409 if the assessment id is taken
    """
    return await dashboard.portfolio.create_assessment(request)
