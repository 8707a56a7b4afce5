"""Tests for the Prometheus endpoint and request correlation headers."""

from unittest.mock import patch

import pytest
from httpx import AsyncClient

from stratify.core.config import Settings


def _production_settings() -> Settings:
    return Settings(_env_file=None, environment="production", supabase_url=None, supabase_anon_key=None)


@pytest.mark.asyncio
async def test_metrics_exposes_request_counters(client: AsyncClient):
    await client.get("/api/health")

    response = await client.get("/api/metrics")

    assert response.status_code == 200
    assert "stratify_http_requests_total" in response.text
    assert 'route="/api/health"' in response.text


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/api/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.asyncio
async def test_request_id_generated_when_missing(client: AsyncClient):
    response = await client.get("/api/health")

    assert response.headers["X-Request-ID"]


class TestProductionMetrics:
    @pytest.mark.asyncio
    async def test_hidden_without_token(self, client: AsyncClient, monkeypatch):
        monkeypatch.delenv("METRICS_TOKEN", raising=False)

        with patch("stratify.api.routes.metrics.get_settings", _production_settings):
            response = await client.get("/api/metrics")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_wrong_token_is_forbidden(self, client: AsyncClient, monkeypatch):
        monkeypatch.setenv("METRICS_TOKEN", "s3cret")

        with patch("stratify.api.routes.metrics.get_settings", _production_settings):
            response = await client.get("/api/metrics", headers={"X-Metrics-Token": "nope"})

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_bearer_token_is_accepted(self, client: AsyncClient, monkeypatch):
        monkeypatch.setenv("METRICS_TOKEN", "s3cret")

        with patch("stratify.api.routes.metrics.get_settings", _production_settings):
            response = await client.get(
                "/api/metrics", headers={"Authorization": "Bearer s3cret"}
            )

        assert response.status_code == 200
        assert "stratify_http_requests_total" in response.text


@pytest.mark.asyncio
async def test_active_dashboard_sessions_gauge(client_user_client: AsyncClient):
    response = await client_user_client.get("/api/metrics")

    assert "stratify_dashboard_sessions_active 1.0" in response.text
