"""Client organization API endpoints (admin tier)."""

from fastapi import APIRouter, Depends, Query, status

from stratify.api.deps import get_dashboard, require_admin, require_super_admin
from stratify.core.errors import NotFoundError
from stratify.models.principal import Principal
from stratify.schemas.organization import (
    OnboardingResponse,
    OnboardOrganizationRequest,
    OrganizationResponse,
    OrganizationUpdateRequest,
)
from stratify.schemas.user import UserResponse
from stratify.services.dashboard import DashboardSession
from stratify.services.onboarding_service import OnboardingRequest
from stratify.services.organization_service import OrganizationUpdate

router = APIRouter()


@router.get(
    "",
    response_model=list[OrganizationResponse],
    summary="List client organizations",
    description="Newest first; q matches code, name or sector.",
)
async def list_organizations(
    q: str = Query(""),
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_admin()),
) -> list[OrganizationResponse]:
    if q.strip():
        organizations = await dashboard.organizations.search(q)
    else:
        organizations = await dashboard.directory.reload_organizations()
    return [OrganizationResponse.model_validate(org) for org in organizations]


@router.get(
    "/by-code/{org_code}",
    response_model=OrganizationResponse,
    summary="Look up an organization by its code",
)
async def get_organization_by_code(
    org_code: str,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_admin()),
) -> OrganizationResponse:
    organization = await dashboard.organizations.get_by_code(org_code)
    if organization is None:
        raise NotFoundError(f"Organization with code '{org_code.upper()}' not found")
    return OrganizationResponse.model_validate(organization)


@router.get(
    "/{org_id}",
    response_model=OrganizationResponse,
    summary="Get organization details",
)
async def get_organization(
    org_id: int,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_admin()),
) -> OrganizationResponse:
    organization = await dashboard.organizations.get(org_id)
    return OrganizationResponse.model_validate(organization)


@router.post(
    "",
    response_model=OnboardingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Onboard a client",
    description="Creates the organization and its first CXO account.",
)
async def onboard_organization(
    request: OnboardOrganizationRequest,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_super_admin()),
) -> OnboardingResponse:
    """Onboard a new client organization.

    Args:
        request: Organization fields plus CXO name, email and password
        dashboard: Browser session context
        principal: Signed-in super administrator

    Returns:
        The organization and its CXO

    Raises:
        ValidationError: 422 if the code is not exactly 5 characters
        ConflictError: 409 if the code is already taken
        OnboardingError: 502 if the organization was created without its CXO
    """
    result = await dashboard.directory.onboard(OnboardingRequest(**request.model_dump()))
    return OnboardingResponse(
        organization=OrganizationResponse.model_validate(result.organization),
        cxo=UserResponse.from_profile(result.cxo),
    )


@router.patch(
    "/{org_id}",
    response_model=OrganizationResponse,
    summary="Update organization",
)
async def update_organization(
    org_id: int,
    request: OrganizationUpdateRequest,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_super_admin()),
) -> OrganizationResponse:
    changes = OrganizationUpdate(**request.model_dump(exclude_unset=True))
    organization = await dashboard.directory.edit_organization(org_id, changes)
    return OrganizationResponse.model_validate(organization)


@router.delete(
    "/{org_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete organization",
    description="Refused while client users still belong to the organization.",
)
async def delete_organization(
    org_id: int,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_super_admin()),
) -> None:
    await dashboard.directory.remove_organization(org_id)
