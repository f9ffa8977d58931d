"""Integration tests for the consistency reconciliation sweep"""

import pytest
from decimal import Decimal

from src.app.use_cases.provisioning import ReconciliationState
from src.domain import ActivityLog, Budget, Role
from src.domain.pricing import ShiftType, StaffRatio
from src.domain.tenant_config import HourAllocation, PayScale, ServiceRate, TaxBracket
from src.worker.tenant_reconciler import TenantReconcilerWorker


@pytest.fixture
def worker(session_factory):
    return TenantReconcilerWorker(session_factory=session_factory)


async def seed_tenant_with_people(seed):
    tenant_id = await seed.tenant("Harbour Care")
    await seed.user(tenant_id, Role.SUPPORT_WORKER)
    await seed.user(tenant_id, Role.TEAM_LEADER)
    await seed.user(tenant_id, Role.ADMIN)
    client_id = await seed.client(tenant_id)
    return tenant_id, client_id


@pytest.mark.asyncio
class TestReconciliationSweep:

    async def test_first_sweep_repairs_every_category(self, worker, seed):
        """
        Given: A tenant with two staff, an admin, one client and no configuration
        When: The sweep runs
        Then: The tenant is REPAIRED with the full baseline and one activity row per category
        """
        tenant_id, client_id = await seed_tenant_with_people(seed)

        result = await worker.run_once(force=True)

        assert result.tenants_checked == 1
        assert result.repaired == 1
        outcome = result.results[0]
        assert outcome.state == ReconciliationState.REPAIRED
        assert outcome.categories == ["pay_scales", "tax_brackets", "hour_allocations", "service_rates", "budgets"]

        assert len(await seed.all(PayScale, PayScale.tenant_id == tenant_id)) == 48
        assert len(await seed.all(TaxBracket, TaxBracket.tenant_id == tenant_id)) == 5
        assert len(await seed.all(ServiceRate, ServiceRate.tenant_id == tenant_id)) == 8
        allocations = await seed.all(HourAllocation, HourAllocation.tenant_id == tenant_id)
        assert sorted(a.max_hours for a in allocations) == [35, 38]
        budgets = await seed.all(Budget, Budget.client_id == client_id)
        assert sorted(b.total_allocation for b in budgets) == [
            Decimal("15000.00"), Decimal("25000.00"), Decimal("50000.00")
        ]
        logs = await seed.all(ActivityLog, ActivityLog.action == "provisioning.repair")
        assert len(logs) == 5
        assert all(log.user_id is None for log in logs)

    async def test_second_sweep_is_consistent_and_writes_nothing(self, worker, seed):
        tenant_id, _ = await seed_tenant_with_people(seed)
        await worker.run_once(force=True)
        logs_before = len(await seed.all(ActivityLog))

        result = await worker.run_once(force=True)

        assert result.consistent == 1
        assert result.results[0].state == ReconciliationState.CONSISTENT
        assert len(await seed.all(ActivityLog)) == logs_before
        assert len(await seed.all(PayScale, PayScale.tenant_id == tenant_id)) == 48

    async def test_existing_rows_are_kept(self, worker, seed):
        """
        Given: A tenant already holding a custom AM 1:1 service rate
        When: The sweep runs
        Then: The custom rate is untouched and only the other seven are added
        """
        tenant_id = await seed.tenant("Ridge Support")
        await seed.add(
            ServiceRate(
                tenant_id=tenant_id,
                shift_type=ShiftType.AM,
                staff_ratio=StaffRatio.ONE_TO_ONE,
                rate=Decimal("42.50"),
            )
        )

        await worker.run_once(force=True)

        rates = await seed.all(ServiceRate, ServiceRate.tenant_id == tenant_id)
        assert len(rates) == 8
        custom = [r for r in rates if r.shift_type == ShiftType.AM and r.staff_ratio == StaffRatio.ONE_TO_ONE]
        assert custom[0].rate == Decimal("42.50")

    async def test_tenants_are_reconciled_independently(self, worker, seed):
        first = await seed.tenant("Harbour Care")
        second = await seed.tenant("Ridge Support")

        result = await worker.run_once(force=True)

        assert [item.tenant_id for item in result.results] == [first, second]
        assert len(await seed.all(PayScale, PayScale.tenant_id == first)) == 48
        assert len(await seed.all(PayScale, PayScale.tenant_id == second)) == 48
