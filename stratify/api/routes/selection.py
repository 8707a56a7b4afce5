"""Selected-organization endpoints (admin impersonation of a tenant)."""

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from stratify.api.deps import get_dashboard, require_admin
from stratify.models.principal import Principal
from stratify.schemas.organization import OrganizationResponse
from stratify.services.dashboard import DashboardSession

router = APIRouter()


class SelectOrganizationRequest(BaseModel):
    org_id: int


class SelectionResponse(BaseModel):
    organization: OrganizationResponse | None = None
    scope_org_id: int | None = None


def _selection(dashboard: DashboardSession) -> SelectionResponse:
    selected = dashboard.selection.organization
    return SelectionResponse(
        organization=OrganizationResponse.model_validate(selected) if selected else None,
        scope_org_id=dashboard.current_scope(),
    )


@router.get("", response_model=SelectionResponse, summary="Currently selected organization")
async def get_selection(
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_admin()),
) -> SelectionResponse:
    return _selection(dashboard)


@router.put("", response_model=SelectionResponse, summary="Operate against an organization")
async def select_organization(
    request: SelectOrganizationRequest,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_admin()),
) -> SelectionResponse:
    """Select the organization whose data the admin wants to work on.

    Raises:
        NotFoundError: 404 if the organization does not exist
    """
    await dashboard.select_organization(request.org_id)
    return _selection(dashboard)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, summary="Clear the selection")
async def clear_selection(
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_admin()),
) -> None:
    dashboard.clear_selection()
