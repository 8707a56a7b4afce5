"""API tests for sign-in, the asset inventory, imports and selection."""

import pytest
from httpx import AsyncClient

from stratify.core.config import Settings
from stratify.main import app, build_registry
from stratify.services.asset_import import TEMPLATE_HEADERS

DEMO_PASSWORD = "demo123"


async def login(ac: AsyncClient, org_code: str, email: str, password: str = DEMO_PASSWORD):
    return await ac.post(
        "/api/auth/login",
        json={"orgCode": org_code, "email": email, "password": password},
    )


@pytest.mark.asyncio
async def test_health_reports_mock_mode(client: AsyncClient):
    response = await client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "mode": "mock"}


class TestAuthFlow:
    @pytest.mark.asyncio
    async def test_anonymous_session_status(self, client: AsyncClient):
        response = await client.get("/api/auth/session")

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "anonymous"
        assert data["initialized"] is True
        assert data["mode"] == "mock"
        assert data["user"] is None
        assert "stratify_session" in response.cookies

    @pytest.mark.asyncio
    async def test_login_then_me(self, client: AsyncClient):
        response = await login(client, "tech1", "john@company.com")

        assert response.status_code == 200
        assert response.json()["orgCode"] == "TECH1"
        assert response.json()["role"] == "client-manager"

        me = await client.get("/api/auth/me")
        assert me.status_code == 200
        assert me.json()["email"] == "john@company.com"
        assert me.json()["org_id"] == 1

    @pytest.mark.asyncio
    async def test_wrong_password_is_401_with_reason(self, client: AsyncClient):
        response = await login(client, "TECH1", "john@company.com", "nope")

        assert response.status_code == 401
        data = response.json()
        assert data["error"] == "login_failed"
        assert data["details"] == {"reason": "invalid_credentials"}
        assert "demo123" in data["message"]

    @pytest.mark.asyncio
    async def test_failed_first_request_leaves_no_session(self, client: AsyncClient):
        registry = app.state.registry

        response = await login(client, "TECH1", "john@company.com", "nope")

        assert response.status_code == 401
        assert "stratify_session" not in response.cookies
        assert registry.active_count == 0

        await client.get("/api/auth/session")
        assert registry.active_count == 1

    @pytest.mark.asyncio
    async def test_demo_account_under_wrong_code_is_rejected(self, client: AsyncClient):
        response = await login(client, "FFITS", "john@company.com")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_logout_ends_the_session(self, client_user_client: AsyncClient):
        response = await client_user_client.post("/api/auth/logout")
        assert response.status_code == 204

        me = await client_user_client.get("/api/auth/me")
        assert me.status_code == 401

        status = await client_user_client.get("/api/auth/session")
        assert status.json()["state"] == "anonymous"

    @pytest.mark.asyncio
    async def test_signup_needs_a_backend(self, client: AsyncClient):
        response = await client.post(
            "/api/auth/signup",
            json={
                "email": "new@company.com",
                "password": "secret123",
                "name": "New Person",
                "role": "client-manager",
                "orgCode": "TECH1",
            },
        )

        assert response.status_code == 503
        assert response.json()["error"] == "backend_not_configured"

    @pytest.mark.asyncio
    async def test_separate_clients_do_not_share_a_session(
        self, client_user_client: AsyncClient
    ):
        client_user_client.cookies.clear()

        response = await client_user_client.get("/api/auth/me")

        assert response.status_code == 401


class TestAssetEndpoints:
    @pytest.mark.asyncio
    async def test_anonymous_is_rejected(self, client: AsyncClient):
        response = await client.get("/api/assets")

        assert response.status_code == 401
        assert response.json()["detail"] == "Not signed in"

    @pytest.mark.asyncio
    async def test_client_sees_only_own_organization(self, client_user_client: AsyncClient):
        response = await client_user_client.get("/api/assets")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == len(data["items"]) > 0
        assert {item["org_id"] for item in data["items"]} == {1}

    @pytest.mark.asyncio
    async def test_search_and_type_filter(self, client_user_client: AsyncClient):
        response = await client_user_client.get(
            "/api/assets", params={"q": "portal", "type": "application"}
        )

        data = response.json()
        assert data["query"] == "portal"
        assert data["type"] == "application"
        assert [item["name"] for item in data["items"]] == ["Customer Portal"]

    @pytest.mark.asyncio
    async def test_create_update_delete(self, client_user_client: AsyncClient):
        created = await client_user_client.post(
            "/api/assets",
            json={
                "name": "Billing API",
                "type": "application",
                "category": "API / Microservice",
                "owner": "Payments",
                "criticality": "high",
                "tags": ["billing"],
                "createdBy": "someone@else.com",
            },
        )
        assert created.status_code == 201
        asset = created.json()
        assert asset["createdBy"] == "john@company.com"
        assert asset["org_id"] == 1
        assert asset["lastUpdated"]

        updated = await client_user_client.patch(
            f"/api/assets/{asset['id']}", json={"status": "deprecated"}
        )
        assert updated.status_code == 200
        assert updated.json()["status"] == "deprecated"
        assert updated.json()["name"] == "Billing API"

        deleted = await client_user_client.delete(f"/api/assets/{asset['id']}")
        assert deleted.status_code == 204

        missing = await client_user_client.get(f"/api/assets/{asset['id']}")
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_category_must_belong_to_type(self, client_user_client: AsyncClient):
        response = await client_user_client.post(
            "/api/assets",
            json={"name": "Odd", "type": "database", "category": "Web Application"},
        )

        assert response.status_code == 422
        assert "detail" in response.json()

    @pytest.mark.asyncio
    async def test_other_organizations_asset_is_not_found(self, client: AsyncClient):
        await login(client, "FFITS", "manasvee@futurefocus.io")
        foreign = await client.get("/api/assets")
        foreign_id = foreign.json()["items"][0]["id"]

        await client.post("/api/auth/logout")
        await login(client, "TECH1", "john@company.com")

        response = await client.patch(f"/api/assets/{foreign_id}", json={"name": "Hijacked"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_summary_and_catalog(self, client_user_client: AsyncClient):
        summary = await client_user_client.get("/api/assets/summary")
        listing = await client_user_client.get("/api/assets")

        assert summary.status_code == 200
        assert summary.json()["total"] == listing.json()["total"]
        assert sum(summary.json()["byType"].values()) == summary.json()["total"]

        catalog = await client_user_client.get("/api/assets/catalog")
        types = {entry["type"]: entry["categories"] for entry in catalog.json()["types"]}
        assert "Web Application" in types["application"]
        assert len(types) == 6

    @pytest.mark.asyncio
    async def test_template_download(self, client: AsyncClient):
        response = await client.get("/api/assets/template")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        assert response.text.splitlines()[0] == ",".join(TEMPLATE_HEADERS)


class TestBulkImport:
    @staticmethod
    def _csv(*rows: str) -> bytes:
        return "\n".join([",".join(TEMPLATE_HEADERS), *rows]).encode()

    @pytest.mark.asyncio
    async def test_valid_file_creates_assets(self, client_user_client: AsyncClient):
        content = self._csv(
            "Ledger,database,Data Warehouse,Finance DWH,Finance,active,high,finance",
            'Edge Router,infrastructure,Network Device,Core router,NetOps,active,medium,"net,core"',
        )
        before = (await client_user_client.get("/api/assets")).json()["total"]

        response = await client_user_client.post(
            "/api/assets/import",
            files={"file": ("assets.csv", content, "text/csv")},
        )

        assert response.status_code == 200
        job = response.json()
        assert job["status"] == "completed"
        assert job["progress"] == 100
        assert job["fileName"] == "assets.csv"
        assert job["results"] == {"total": 2, "processed": 2, "errors": []}
        assert job["validationResult"]["isValid"] is True

        after = await client_user_client.get("/api/assets")
        assert after.json()["total"] == before + 2
        created = [item for item in after.json()["items"] if item["name"] == "Ledger"]
        assert created[0]["createdBy"] == "john@company.com"
        assert created[0]["org_id"] == 1

        latest = await client_user_client.get("/api/assets/uploads/latest")
        assert latest.json()["id"] == job["id"]

    @pytest.mark.asyncio
    async def test_invalid_row_rejects_the_whole_file(self, client_user_client: AsyncClient):
        content = self._csv(
            "Ledger,database,Data Warehouse,Finance DWH,Finance,active,high,finance",
            "Broken,not-a-type,Whatever,,,active,high,",
        )
        before = (await client_user_client.get("/api/assets")).json()["total"]

        response = await client_user_client.post(
            "/api/assets/import",
            files={"file": ("assets.csv", content, "text/csv")},
        )

        job = response.json()
        assert job["status"] == "failed"
        assert job["validationResult"]["isValid"] is False
        assert job["validationResult"]["errors"][0]["row"] == 3
        assert job["results"]["processed"] == 0

        after = await client_user_client.get("/api/assets")
        assert after.json()["total"] == before

    @pytest.mark.asyncio
    async def test_unsupported_extension(self, client_user_client: AsyncClient):
        response = await client_user_client.post(
            "/api/assets/import",
            files={"file": ("assets.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        assert response.json()["details"]["field"] == "file"

    @pytest.mark.asyncio
    async def test_oversized_file_is_rejected(self, client: AsyncClient):
        registry = build_registry(
            Settings(_env_file=None, supabase_url=None, supabase_anon_key=None, max_upload_bytes=64)
        )
        app.state.registry = registry
        await login(client, "TECH1", "john@company.com")
        content = self._csv(
            *["Ledger,database,Data Warehouse,Finance DWH,Finance,active,high,finance"] * 50
        )

        response = await client.post(
            "/api/assets/import",
            files={"file": ("assets.csv", content, "text/csv")},
        )

        assert response.status_code == 422
        assert response.json()["message"] == "File is too large"
        latest = await client.get("/api/assets/uploads/latest")
        assert latest.status_code == 404
        await registry.close_all()

    @pytest.mark.asyncio
    async def test_no_upload_yet(self, client_user_client: AsyncClient):
        response = await client_user_client.get("/api/assets/uploads/latest")

        assert response.status_code == 404


class TestSelectedOrganization:
    @pytest.mark.asyncio
    async def test_admin_impersonates_an_organization(self, admin_client: AsyncClient):
        everything = await admin_client.get("/api/assets")
        assert len({item["org_id"] for item in everything.json()["items"]}) > 1

        selected = await admin_client.put("/api/selected-organization", json={"org_id": 2})
        assert selected.status_code == 200
        assert selected.json()["organization"]["org_code"] == "FFITS"
        assert selected.json()["scope_org_id"] == 2

        scoped = await admin_client.get("/api/assets")
        assert scoped.json()["total"] > 0
        assert {item["org_id"] for item in scoped.json()["items"]} == {2}

        cleared = await admin_client.delete("/api/selected-organization")
        assert cleared.status_code == 204

        current = await admin_client.get("/api/selected-organization")
        assert current.json() == {"organization": None, "scope_org_id": None}

    @pytest.mark.asyncio
    async def test_unknown_organization(self, admin_client: AsyncClient):
        response = await admin_client.put("/api/selected-organization", json={"org_id": 999})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_clients_cannot_select(self, client_user_client: AsyncClient):
        response = await client_user_client.put("/api/selected-organization", json={"org_id": 2})

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_logout_clears_the_selection(self, admin_client: AsyncClient):
        await admin_client.put("/api/selected-organization", json={"org_id": 2})
        await admin_client.post("/api/auth/logout")
        await login(admin_client, "ADMIN", "dana@stratifyit.ai")

        current = await admin_client.get("/api/selected-organization")

        assert current.json()["organization"] is None
