"""Integration tests for Budget API endpoints"""

import pytest
from decimal import Decimal
from httpx import AsyncClient

from config import ApplicationConfig
from src.domain import Budget


def deduction(two_tenants, source_event_id="shift-1", **overrides):
    payload = {
        "client_id": two_tenants["a"]["client_id"],
        "category": "SIL",
        "source_event_id": source_event_id,
        "hours": "2.00",
        "rate": "37.75",
    }
    payload.update(overrides)
    return payload


class TestDeductionsAPI:

    @pytest.mark.asyncio
    async def test_record_deduction(self, client: AsyncClient, seed, two_tenants, auth):
        """POST /budgets/deductions charges 2h x 37.75 = 75.50"""
        # Act
        response = await client.post(
            "/budgets/deductions", json=deduction(two_tenants), headers=auth(two_tenants["a"]["worker_id"])
        )

        # Assert
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["amount"]) == Decimal("75.50")
        assert Decimal(data["current_spent"]) == Decimal("75.50")
        assert data["transaction_type"] == "deduction"
        assert data["tenant_id"] == two_tenants["a"]["tenant_id"]
        budget = await seed.get(Budget, two_tenants["a"]["budget_id"])
        assert budget.current_spent == Decimal("75.50")

    @pytest.mark.asyncio
    async def test_two_shifts_sum_exactly(self, client: AsyncClient, seed, two_tenants, auth):
        headers = auth(two_tenants["a"]["worker_id"])

        first = await client.post("/budgets/deductions", json=deduction(two_tenants, "shift-1"), headers=headers)
        second = await client.post("/budgets/deductions", json=deduction(two_tenants, "shift-2"), headers=headers)

        assert first.status_code == second.status_code == 201
        assert Decimal(second.json()["current_spent"]) == Decimal("151.00")

    @pytest.mark.asyncio
    async def test_replay_is_409(self, client: AsyncClient, seed, two_tenants, auth):
        headers = auth(two_tenants["a"]["worker_id"])

        await client.post("/budgets/deductions", json=deduction(two_tenants), headers=headers)
        replay = await client.post("/budgets/deductions", json=deduction(two_tenants), headers=headers)

        assert replay.status_code == 409
        assert replay.json()["error"]["code"] == "ALREADY_RECORDED"
        budget = await seed.get(Budget, two_tenants["a"]["budget_id"])
        assert budget.current_spent == Decimal("75.50")

    @pytest.mark.asyncio
    async def test_block_policy_overspend_is_422(self, client: AsyncClient, seed, two_tenants, auth, monkeypatch):
        """
        Given: OVERSPEND_POLICY is block and the SIL budget holds 1000.00
        When: 24h at 100.00 is deducted
        Then: 422 OVER_ALLOCATION and nothing is spent
        """
        monkeypatch.setattr(ApplicationConfig, "OVERSPEND_POLICY", "block")

        response = await client.post(
            "/budgets/deductions",
            json=deduction(two_tenants, hours="24", rate="100.00"),
            headers=auth(two_tenants["a"]["worker_id"]),
        )

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "OVER_ALLOCATION"
        assert "total_allocation=1000.00" in error["reason"]
        budget = await seed.get(Budget, two_tenants["a"]["budget_id"])
        assert budget.current_spent == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_foreign_tenant_in_body_is_403(self, client: AsyncClient, seed, two_tenants, auth):
        payload = deduction(two_tenants, tenant_id=two_tenants["b"]["tenant_id"])

        response = await client.post("/budgets/deductions", json=payload, headers=auth(two_tenants["a"]["worker_id"]))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "TENANT_BOUNDARY_VIOLATION"

    @pytest.mark.asyncio
    async def test_foreign_client_budget_is_404(self, client: AsyncClient, two_tenants, auth):
        payload = deduction(two_tenants, client_id=two_tenants["b"]["client_id"])

        response = await client.post("/budgets/deductions", json=payload, headers=auth(two_tenants["a"]["worker_id"]))

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "BUDGET_NOT_FOUND"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("hours", ["0", "-1", "24.5"])
    async def test_hours_out_of_range_is_400(self, client: AsyncClient, two_tenants, auth, hours):
        response = await client.post(
            "/budgets/deductions",
            json=deduction(two_tenants, hours=hours),
            headers=auth(two_tenants["a"]["worker_id"]),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_missing_rate_and_shift_type_is_400(self, client: AsyncClient, two_tenants, auth):
        payload = deduction(two_tenants)
        del payload["rate"]

        response = await client.post("/budgets/deductions", json=payload, headers=auth(two_tenants["a"]["worker_id"]))

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unauthenticated(self, client: AsyncClient, two_tenants):
        response = await client.post("/budgets/deductions", json=deduction(two_tenants))

        assert response.status_code == 401


class TestAdjustmentsAPI:

    @pytest.mark.asyncio
    async def test_admin_refund(self, client: AsyncClient, two_tenants, auth):
        await client.post(
            "/budgets/deductions", json=deduction(two_tenants), headers=auth(two_tenants["a"]["worker_id"])
        )

        response = await client.post(
            f"/budgets/{two_tenants['a']['budget_id']}/adjustments",
            json={"source_event_id": "refund-1", "amount": "-25.50", "description": "Shift cancelled"},
            headers=auth(two_tenants["a"]["admin_id"]),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["transaction_type"] == "refund"
        assert Decimal(data["current_spent"]) == Decimal("50.00")

    @pytest.mark.asyncio
    async def test_refund_below_zero_is_400(self, client: AsyncClient, seed, two_tenants, auth):
        response = await client.post(
            f"/budgets/{two_tenants['a']['budget_id']}/adjustments",
            json={"source_event_id": "refund-1", "amount": "-5.00"},
            headers=auth(two_tenants["a"]["admin_id"]),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
        budget = await seed.get(Budget, two_tenants["a"]["budget_id"])
        assert budget.current_spent == Decimal("0.00")

    @pytest.mark.asyncio
    async def test_replayed_adjustment_is_409(self, client: AsyncClient, two_tenants, auth):
        headers = auth(two_tenants["a"]["admin_id"])
        payload = {"source_event_id": "adj-1", "amount": "10.00"}
        url = f"/budgets/{two_tenants['a']['budget_id']}/adjustments"

        first = await client.post(url, json=payload, headers=headers)
        replay = await client.post(url, json=payload, headers=headers)

        assert first.status_code == 201
        assert replay.status_code == 409
        assert replay.json()["error"]["code"] == "ALREADY_RECORDED"

    @pytest.mark.asyncio
    async def test_support_worker_cannot_adjust(self, client: AsyncClient, two_tenants, auth):
        response = await client.post(
            f"/budgets/{two_tenants['a']['budget_id']}/adjustments",
            json={"source_event_id": "adj-1", "amount": "10.00"},
            headers=auth(two_tenants["a"]["worker_id"]),
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_foreign_budget_is_404(self, client: AsyncClient, two_tenants, auth):
        response = await client.post(
            f"/budgets/{two_tenants['b']['budget_id']}/adjustments",
            json={"source_event_id": "adj-1", "amount": "10.00"},
            headers=auth(two_tenants["a"]["admin_id"]),
        )

        assert response.status_code == 404


class TestTransactionHistoryAPI:

    @pytest.mark.asyncio
    async def test_list_transactions(self, client: AsyncClient, two_tenants, auth):
        headers = auth(two_tenants["a"]["worker_id"])
        for source_event_id in ("shift-1", "shift-2", "shift-3"):
            await client.post("/budgets/deductions", json=deduction(two_tenants, source_event_id), headers=headers)

        response = await client.get(
            f"/budgets/{two_tenants['a']['budget_id']}/transactions?limit=2", headers=headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert len(data["transactions"]) == 2

    @pytest.mark.asyncio
    async def test_foreign_budget_history_is_404(self, client: AsyncClient, two_tenants, auth):
        response = await client.get(
            f"/budgets/{two_tenants['b']['budget_id']}/transactions", headers=auth(two_tenants["a"]["worker_id"])
        )

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND_OR_FORBIDDEN"
