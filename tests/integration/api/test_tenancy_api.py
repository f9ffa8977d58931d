"""Integration tests for authentication and tenant context resolution"""

import pytest
from httpx import AsyncClient

from src.app.services.session_tokens import issue_token
from src.domain import Role


class TestTenancyAPI:

    @pytest.mark.asyncio
    async def test_context_of_support_worker(self, client: AsyncClient, two_tenants, auth):
        # Act
        response = await client.get("/tenancy/context", headers=auth(two_tenants["a"]["worker_id"]))

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["tenant_id"] == two_tenants["a"]["tenant_id"]
        assert data["role"] == "SupportWorker"
        assert data["capability"] == "tenant_scoped_only"

    @pytest.mark.asyncio
    async def test_context_of_console_manager(self, client: AsyncClient, two_tenants, auth):
        response = await client.get("/tenancy/context", headers=auth(two_tenants["console_id"]))

        assert response.status_code == 200
        assert response.json()["capability"] == "cross_tenant_read"

    @pytest.mark.asyncio
    async def test_missing_token_is_unauthenticated(self, client: AsyncClient):
        response = await client.get("/tenancy/context")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_expired_token(self, client: AsyncClient, two_tenants):
        token = issue_token(two_tenants["a"]["worker_id"], ttl_seconds=-1)

        response = await client.get("/tenancy/context", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_inactive_user(self, client: AsyncClient, seed, two_tenants, auth):
        user_id = await seed.user(two_tenants["a"]["tenant_id"], Role.COORDINATOR, is_active=False)

        response = await client.get("/tenancy/context", headers=auth(user_id))

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_health_needs_no_token(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}
