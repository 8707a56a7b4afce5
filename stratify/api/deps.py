"""FastAPI dependencies for dashboard sessions and authorization."""

from collections.abc import Callable

from fastapi import Depends, HTTPException, Request, Response, status

from stratify.core.config import get_settings
from stratify.core.request_context import bind_session_id
from stratify.models.principal import Principal
from stratify.models.roles import AdminRole, AdminTier
from stratify.services.dashboard import DashboardSession
from stratify.services.session_registry import DashboardRegistry, SessionNotFoundError


def get_registry(request: Request) -> DashboardRegistry:
    return request.app.state.registry


async def get_dashboard(
    request: Request,
    response: Response,
    registry: DashboardRegistry = Depends(get_registry),
) -> DashboardSession:
    """Dashboard session for the browser, created on first contact.

    The session is identified by an HTTP-only cookie; an unknown or expired
    cookie starts a fresh (anonymous) session. A fresh session is closed
    again if the request fails.

    Yields:
        DashboardSession: The browser's session
    """
    settings = get_settings()
    session_id = request.cookies.get(settings.session_cookie_name)
    if session_id:
        try:
            dashboard = await registry.get(session_id)
        except SessionNotFoundError:
            pass
        else:
            bind_session_id(session_id)
            yield dashboard
            return

    session_id, dashboard = await registry.create()
    secure = settings.session_cookie_secure
    if secure is None:
        secure = settings.environment == "production"
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_id,
        max_age=settings.session_ttl_seconds,
        httponly=True,
        secure=secure,
        samesite="lax",
        path="/",
    )
    bind_session_id(session_id)
    try:
        yield dashboard
    except Exception:
        await registry.close(session_id)
        raise


async def get_current_principal(
    dashboard: DashboardSession = Depends(get_dashboard),
) -> Principal:
    """Signed-in principal of the session.

    Raises:
        HTTPException: 401 if nobody is signed in
    """
    principal = dashboard.principal
    if principal is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not signed in",
        )
    return principal


def require_admin() -> Callable:
    """Dependency for endpoints restricted to the admin tier."""

    async def check_admin(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        if not principal.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Administrator access required",
            )
        return principal

    return check_admin


def require_super_admin() -> Callable:
    """Dependency for endpoints restricted to admin-super (client management)."""

    async def check_super_admin(
        principal: Principal = Depends(get_current_principal),
    ) -> Principal:
        match principal.tier:
            case AdminTier(sub_role=AdminRole.SUPER):
                return principal
            case _:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Super administrator access required",
                )

    return check_super_admin
