"""User directory API endpoints (admin-super only)."""

from fastapi import APIRouter, Depends, Query, status

from stratify.api.deps import get_dashboard, require_super_admin
from stratify.models.principal import Principal
from stratify.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest
from stratify.services.dashboard import DashboardSession
from stratify.services.user_service import ALL_ROLES, UserCreate, UserUpdate

router = APIRouter()


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List users",
    description="Admin and client accounts, newest first.",
)
async def list_users(
    q: str = Query("", description="Matches name, email or organization"),
    role: str = Query(ALL_ROLES, description="Role value or 'all'"),
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_super_admin()),
) -> list[UserResponse]:
    profiles = await dashboard.users.search(q, role, dashboard.current_scope())
    return [UserResponse.from_profile(profile) for profile in profiles]


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user(
    request: UserCreateRequest,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_super_admin()),
) -> UserResponse:
    """Create an account.

    Raises:
        ValidationError: 422 if a client role has no valid organization
        ConflictError: 409 if the email is already registered
    """
    profile = await dashboard.users.create(UserCreate(**request.model_dump()))
    return UserResponse.from_profile(profile)


@router.patch("/{user_id}", response_model=UserResponse, summary="Update user")
async def update_user(
    user_id: str,
    request: UserUpdateRequest,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_super_admin()),
) -> UserResponse:
    profile = await dashboard.users.update(user_id, UserUpdate(**request.model_dump()))
    return UserResponse.from_profile(profile)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete user")
async def delete_user(
    user_id: str,
    dashboard: DashboardSession = Depends(get_dashboard),
    principal: Principal = Depends(require_super_admin()),
) -> None:
    await dashboard.directory.remove_user(user_id)
