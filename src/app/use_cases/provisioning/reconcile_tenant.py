"""Consistency reconciliation

ReconcileTenant walks one tenant through
UNCHECKED -> CHECKING -> CONSISTENT | REPAIRED | FAILED.
ReconcileAllTenants runs it for every active tenant, one after another, each
in its own transaction, and never lets one tenant's failure stop the sweep.
"""

import logging
import time
from typing import Awaitable, Callable
from libs.result import Result, Return, Error
from src.app.repositories.tenant_repository import TenantRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.errors import ErrorCode
from .dtos import ReconciliationState, SweepResultDTO, TenantReconciliationDTO
from .provisioning_engine import ProvisioningEngine

logger = logging.getLogger(__name__)


class ReconcileTenant:
    """
    Use Case: Reconcile one tenant's baseline configuration

    Business Rules:
    1. CHECKING is read-only
    2. Repairs go through the ProvisioningEngine in one transaction
    3. Any exception rolls the whole repair back and yields FAILED(reason)
    4. Running twice is safe: the second run finds nothing missing
    """

    def __init__(self, uow: UnitOfWork, tenant_repo: TenantRepository, engine: ProvisioningEngine):
        self.uow = uow
        self.tenant_repo = tenant_repo
        self.engine = engine

    async def execute(self, tenant_id: int) -> Result[TenantReconciliationDTO]:
        """
        Returns:
            Result with the tenant's final state; FAILED is a normal outcome,
            only an unknown tenant is an error
        """
        state = ReconciliationState.UNCHECKED
        try:
            tenant = await self.tenant_repo.get_by_id(tenant_id)
            if tenant is None:
                await self.uow.rollback()
                return Return.err(
                    Error(code=ErrorCode.TENANT_NOT_FOUND, message=f"Tenant {tenant_id} not found")
                )

            state = ReconciliationState.CHECKING
            logger.info(f"Tenant {tenant_id}: {state.value}")
            plan = await self.engine.plan(tenant_id)

            if plan.is_empty:
                await self.uow.rollback()
                logger.info(f"Tenant {tenant_id}: {ReconciliationState.CONSISTENT.value}")
                return Return.ok(
                    TenantReconciliationDTO(tenant_id=tenant_id, state=ReconciliationState.CONSISTENT)
                )

            categories = await self.engine.apply(plan)
            await self.uow.commit()

            logger.info(
                f"Tenant {tenant_id}: {ReconciliationState.REPAIRED.value} "
                f"({', '.join(categories)}; {plan.row_count} rows)"
            )
            return Return.ok(
                TenantReconciliationDTO(
                    tenant_id=tenant_id,
                    state=ReconciliationState.REPAIRED,
                    categories=categories,
                    rows_created=plan.row_count,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Tenant {tenant_id}: {ReconciliationState.FAILED.value} during {state.value}: {e}")
            return Return.ok(
                TenantReconciliationDTO(
                    tenant_id=tenant_id,
                    state=ReconciliationState.FAILED,
                    reason=str(e),
                )
            )


class ReconcileAllTenants:
    """
    Use Case: Sweep every active tenant

    Args:
        uow: Unit of work of the session the tenant list is read in
        tenant_repo: Source of the tenant list
        reconcile_one: Reconciles one tenant in a fresh session/transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        tenant_repo: TenantRepository,
        reconcile_one: Callable[[int], Awaitable[Result[TenantReconciliationDTO]]],
    ):
        self.uow = uow
        self.tenant_repo = tenant_repo
        self.reconcile_one = reconcile_one

    async def execute(self) -> Result[SweepResultDTO]:
        start_time = time.time()
        sweep_time = utcnow()

        try:
            tenant_ids = [tenant.id for tenant in await self.tenant_repo.list_active()]
            # The listing transaction must not stay open across per-tenant writes
            await self.uow.rollback()
        except Exception as e:
            logger.error(f"Reconciliation sweep could not list tenants: {e}")
            return Return.err(
                Error(code="RECONCILIATION_FAILED", message="Failed to list tenants", reason=str(e))
            )

        logger.info(f"Starting reconciliation sweep over {len(tenant_ids)} tenants")

        results = []
        for tenant_id in tenant_ids:
            try:
                result = await self.reconcile_one(tenant_id)
            except Exception as e:
                result = Return.ok(
                    TenantReconciliationDTO(
                        tenant_id=tenant_id, state=ReconciliationState.FAILED, reason=str(e)
                    )
                )
            if result.is_err():
                results.append(
                    TenantReconciliationDTO(
                        tenant_id=tenant_id,
                        state=ReconciliationState.FAILED,
                        reason=result.error.message,
                    )
                )
            else:
                results.append(result.value)

        counts = {state: 0 for state in ReconciliationState}
        for item in results:
            counts[item.state] += 1

        execution_time_ms = int((time.time() - start_time) * 1000)
        summary = SweepResultDTO(
            tenants_checked=len(results),
            consistent=counts[ReconciliationState.CONSISTENT],
            repaired=counts[ReconciliationState.REPAIRED],
            failed=counts[ReconciliationState.FAILED],
            results=results,
            sweep_time=sweep_time,
            execution_time_ms=execution_time_ms,
        )

        log = logger.warning if summary.failed else logger.info
        log(
            f"Reconciliation sweep complete: {summary.consistent} consistent, "
            f"{summary.repaired} repaired, {summary.failed} failed in {execution_time_ms}ms"
        )
        return Return.ok(summary)
