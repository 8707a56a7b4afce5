"""Authentication API endpoints."""

from fastapi import APIRouter, Depends, status

from stratify.api.deps import get_current_principal, get_dashboard
from stratify.models.principal import Principal
from stratify.schemas.auth import (
    AdoptSessionRequest,
    LoginRequest,
    PrincipalResponse,
    SessionStatusResponse,
    SignupRequest,
    SignupResponse,
)
from stratify.services.dashboard import DashboardSession

router = APIRouter()


def _status(dashboard: DashboardSession) -> SessionStatusResponse:
    principal = dashboard.principal
    return SessionStatusResponse(
        state=dashboard.identity.state,
        initialized=dashboard.identity.initialized,
        mode=dashboard.mode,
        user=PrincipalResponse.from_principal(principal) if principal else None,
    )


@router.get(
    "/session",
    response_model=SessionStatusResponse,
    summary="Current session state",
)
async def get_session(
    dashboard: DashboardSession = Depends(get_dashboard),
) -> SessionStatusResponse:
    """Report whether the browser session is signed in, and as whom."""
    return _status(dashboard)


@router.post(
    "/login",
    response_model=PrincipalResponse,
    summary="Sign in with organization code, email and password",
    responses={401: {"description": "Invalid org code, credentials, or tier mismatch"}},
)
async def login(
    request: LoginRequest,
    dashboard: DashboardSession = Depends(get_dashboard),
) -> PrincipalResponse:
    """Sign in.

    Client staff use their organization's 5-character code, internal staff
    use ADMIN. Without a backend only the demo accounts are accepted.

    Args:
        request: Organization code and credentials
        dashboard: Browser session context

    Returns:
        The signed-in principal

    Raises:
        LoginError: 401 with the failure reason in ``details.reason``
    """
    principal = await dashboard.login(request.org_code, request.email, request.password)
    return PrincipalResponse.from_principal(principal)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Sign out",
)
async def logout(dashboard: DashboardSession = Depends(get_dashboard)) -> None:
    await dashboard.logout()


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account (backend mode only)",
)
async def signup(
    request: SignupRequest,
    dashboard: DashboardSession = Depends(get_dashboard),
) -> SignupResponse:
    """Register a new account; the backend materializes its profile.

    Raises:
        BackendNotConfiguredError: 503 when running on demo data
    """
    user_id = await dashboard.identity.signup(
        email=request.email,
        password=request.password,
        name=request.name,
        role=request.role,
        organization=request.organization,
        org_code=request.org_code,
    )
    return SignupResponse(user_id=user_id)


@router.post(
    "/session",
    response_model=SessionStatusResponse,
    summary="Adopt an existing backend session",
)
async def adopt_session(
    request: AdoptSessionRequest,
    dashboard: DashboardSession = Depends(get_dashboard),
) -> SessionStatusResponse:
    await dashboard.identity.adopt_session(request.access_token, request.refresh_token)
    return _status(dashboard)


@router.get(
    "/me",
    response_model=PrincipalResponse,
    summary="Signed-in principal",
)
async def me(principal: Principal = Depends(get_current_principal)) -> PrincipalResponse:
    return PrincipalResponse.from_principal(principal)
