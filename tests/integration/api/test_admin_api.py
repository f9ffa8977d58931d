"""Integration tests for Admin API endpoints"""

import pytest
from httpx import AsyncClient

from src.domain import User
from src.domain.tenant_config import PayScale


class TestProvisionTenantAPI:

    @pytest.mark.asyncio
    async def test_console_manager_provisions_tenant(self, client: AsyncClient, seed, two_tenants, auth):
        # Arrange
        payload = {"name": "Coastal Living", "admin_username": "coastal.admin", "admin_full_name": "Kim Vo"}

        # Act
        response = await client.post("/admin/tenants", json=payload, headers=auth(two_tenants["console_id"]))

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert data["tenant_name"] == "Coastal Living"
        assert "pay_scales" in data["categories"]
        admin = await seed.get(User, data["admin_user_id"])
        assert admin.tenant_id == data["tenant_id"]
        assert len(await seed.all(PayScale, PayScale.tenant_id == data["tenant_id"])) == 48

    @pytest.mark.asyncio
    async def test_admin_cannot_provision(self, client: AsyncClient, two_tenants, auth):
        payload = {"name": "Coastal Living", "admin_username": "coastal.admin", "admin_full_name": "Kim Vo"}

        response = await client.post("/admin/tenants", json=payload, headers=auth(two_tenants["a"]["admin_id"]))

        assert response.status_code == 403


class TestReconciliationAPI:

    @pytest.mark.asyncio
    async def test_sweep_then_rerun_is_consistent(self, client: AsyncClient, two_tenants, auth):
        headers = auth(two_tenants["console_id"])

        first = await client.post("/admin/reconciliation", headers=headers)
        second = await client.post("/admin/reconciliation", headers=headers)

        assert first.status_code == 200
        assert first.json()["repaired"] == 2
        assert second.json()["consistent"] == 2
        assert second.json()["repaired"] == 0

    @pytest.mark.asyncio
    async def test_single_tenant(self, client: AsyncClient, two_tenants, auth):
        response = await client.post(
            f"/admin/reconciliation/{two_tenants['b']['tenant_id']}", headers=auth(two_tenants["console_id"])
        )

        assert response.status_code == 200
        assert response.json()["state"] == "REPAIRED"

    @pytest.mark.asyncio
    async def test_unknown_tenant_is_404(self, client: AsyncClient, two_tenants, auth):
        response = await client.post("/admin/reconciliation/999999", headers=auth(two_tenants["console_id"]))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "TENANT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_scoped_role_forbidden(self, client: AsyncClient, two_tenants, auth):
        response = await client.post("/admin/reconciliation", headers=auth(two_tenants["a"]["admin_id"]))

        assert response.status_code == 403


class TestBillingSummaryAPI:

    @pytest.mark.asyncio
    async def test_console_manager_sees_all_tenants(self, client: AsyncClient, two_tenants, auth):
        response = await client.get("/admin/billing-summary", headers=auth(two_tenants["console_id"]))

        assert response.status_code == 200
        assert {row["tenant_id"] for row in response.json()} == {
            two_tenants["a"]["tenant_id"],
            two_tenants["b"]["tenant_id"],
        }

    @pytest.mark.asyncio
    async def test_scoped_role_forbidden(self, client: AsyncClient, two_tenants, auth):
        response = await client.get("/admin/billing-summary", headers=auth(two_tenants["a"]["admin_id"]))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"
