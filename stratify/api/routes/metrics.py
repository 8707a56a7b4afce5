"""Prometheus scrape endpoint."""

from __future__ import annotations

import hmac

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from stratify.api.deps import get_registry
from stratify.core.config import Settings, get_settings
from stratify.core.metrics import DASHBOARD_SESSIONS_ACTIVE
from stratify.services.session_registry import DashboardRegistry

router = APIRouter()


def _presented_token(authorization: str | None, metrics_token: str | None) -> str | None:
    if authorization:
        scheme, _, value = authorization.partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            return value.strip()
    return metrics_token


def _check_scrape_access(settings: Settings, token: str | None) -> None:
    if settings.environment != "production":
        return
    if not settings.metrics_token:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    if not token or not hmac.compare_digest(token, settings.metrics_token):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


@router.get(
    "/metrics",
    include_in_schema=False,
    summary="Prometheus metrics",
)
async def metrics_endpoint(
    authorization: str | None = Header(default=None),
    x_metrics_token: str | None = Header(default=None, alias="X-Metrics-Token"),
    registry: DashboardRegistry = Depends(get_registry),
) -> Response:
    """Request, backend, stale-result and dashboard-session metrics.

    In production the endpoint is hidden unless METRICS_TOKEN is set, and
    then requires it as a bearer token or X-Metrics-Token header.
    """
    _check_scrape_access(get_settings(), _presented_token(authorization, x_metrics_token))

    DASHBOARD_SESSIONS_ACTIVE.set(registry.active_count)
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
