"""Tenant Consistency Reconciliation Worker

Sweeps every active tenant, provisions whatever baseline configuration is
missing, then audits budget spend against the ledger. Runs at API startup,
from the admin endpoint, or standalone on an interval.
"""

import asyncio
import logging
from typing import Optional
from sqlalchemy.orm import sessionmaker

from config import ApplicationConfig
from src.adapter.repositories.activity_log_repository import SqlAlchemyActivityLogRepository
from src.adapter.repositories.budget_repository import SqlAlchemyBudgetRepository
from src.adapter.repositories.budget_transaction_repository import SqlAlchemyBudgetTransactionRepository
from src.adapter.repositories.tenant_config_repository import SqlAlchemyTenantConfigRepository
from src.adapter.repositories.tenant_repository import SqlAlchemyTenantRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.use_cases.budget import AuditLedger
from src.app.use_cases.provisioning import (
    ProvisioningEngine,
    ReconcileAllTenants,
    ReconcileTenant,
    SweepResultDTO,
)
from src.domain.base import utcnow
from src.depends import build_engine, build_session_factory

logger = logging.getLogger(__name__)


class TenantReconcilerWorker:
    """
    Background worker for tenant consistency reconciliation

    Features:
    - Detects and repairs missing per-tenant configuration
    - One session and transaction per tenant; a failing tenant is rolled back
      and reported while the sweep continues
    - Audits budget spend against transaction sums after each sweep
    - Can run once or continuously

    Usage:
        # Run once
        worker = TenantReconcilerWorker()
        result = await worker.run_once()

        # Run continuously
        worker = TenantReconcilerWorker()
        await worker.run_forever(interval_seconds=86400)  # Daily
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        session_factory: Optional[sessionmaker] = None,
    ):
        """
        Initialize the worker

        Args:
            db_uri: Database URI (defaults to ApplicationConfig.DB_URI)
            session_factory: Existing session factory to share; when given,
                the worker creates no engine of its own
        """
        if session_factory is not None:
            self.engine = None
            self.async_session_factory = session_factory
        else:
            self.engine = build_engine(db_uri or ApplicationConfig.DB_URI)
            self.async_session_factory = build_session_factory(self.engine)

        logger.info("TenantReconcilerWorker initialized")

    async def run_once(self, force: bool = False) -> SweepResultDTO:
        """
        Run one sweep

        Args:
            force: Run even when RECONCILIATION_ENABLED is off

        Returns:
            SweepResultDTO with per-tenant outcomes
        """
        if not force and not ApplicationConfig.RECONCILIATION_ENABLED:
            logger.info("Tenant reconciliation is disabled, skipping")
            return SweepResultDTO(
                tenants_checked=0,
                consistent=0,
                repaired=0,
                failed=0,
                results=[],
                sweep_time=utcnow(),
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            use_case = ReconcileAllTenants(
                uow=SqlAlchemyUnitOfWork(session),
                tenant_repo=SqlAlchemyTenantRepository(session),
                reconcile_one=self._reconcile_tenant,
            )
            result = await use_case.execute()

        if result.is_err():
            logger.error(f"Reconciliation sweep failed: {result.error.message}")
            raise RuntimeError(f"Reconciliation sweep failed: {result.error.message}")

        response = result.value
        for item in response.results:
            if item.reason:
                logger.error(f"  - Tenant {item.tenant_id} FAILED: {item.reason}")

        await self._audit_ledger()
        return response

    async def _reconcile_tenant(self, tenant_id: int):
        # A fresh session per tenant isolates each tenant's transaction
        async with self.async_session_factory() as session:
            engine = ProvisioningEngine(
                config_repo=SqlAlchemyTenantConfigRepository(session),
                user_repo=SqlAlchemyUserRepository(session),
                activity_repo=SqlAlchemyActivityLogRepository(session),
                default_budget_allocations=ApplicationConfig.DEFAULT_BUDGET_ALLOCATIONS,
            )
            use_case = ReconcileTenant(
                uow=SqlAlchemyUnitOfWork(session),
                tenant_repo=SqlAlchemyTenantRepository(session),
                engine=engine,
            )
            return await use_case.execute(tenant_id)

    async def _audit_ledger(self) -> None:
        async with self.async_session_factory() as session:
            result = await AuditLedger(
                budget_repo=SqlAlchemyBudgetRepository(session),
                transaction_repo=SqlAlchemyBudgetTransactionRepository(session),
            ).execute()
            await session.rollback()

        if result.is_err():
            logger.error(f"Ledger audit failed: {result.error.message}")
            return

        audit = result.value
        if audit.discrepancies_found > 0:
            logger.error(f"ALERT: {audit.discrepancies_found} budget ledger discrepancies found!")
            for d in audit.discrepancies:
                logger.error(
                    f"  - Tenant {d.tenant_id} (budget_id={d.budget_id}): "
                    f"expected={d.calculated_spent}, actual={d.current_spent}, "
                    f"diff={d.discrepancy}"
                )

    async def run_forever(self, interval_seconds: int = 86400):
        """
        Run reconciliation continuously at specified interval

        Args:
            interval_seconds: Seconds between sweeps (default: 24 hours)
        """
        logger.info(f"Starting continuous tenant reconciliation with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Reconciliation cycle complete. "
                    f"Checked {result.tenants_checked} tenants: "
                    f"{result.repaired} repaired, {result.failed} failed "
                    f"in {result.execution_time_ms}ms"
                )
            except Exception as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        """Cleanup resources"""
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("TenantReconcilerWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.tenant_reconciler --once

        # Run continuously (default: RECONCILIATION_INTERVAL_SECONDS)
        python -m src.worker.tenant_reconciler

        # Run continuously with custom interval (in seconds)
        python -m src.worker.tenant_reconciler --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Tenant Reconciliation Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Interval between runs in seconds"
    )
    args = parser.parse_args()

    worker = TenantReconcilerWorker()

    try:
        if args.once:
            result = await worker.run_once(force=True)
            print("Reconciliation complete:")
            print(f"  Tenants checked: {result.tenants_checked}")
            print(f"  Consistent: {result.consistent}")
            print(f"  Repaired: {result.repaired}")
            print(f"  Failed: {result.failed}")
            for item in result.results:
                if item.categories:
                    print(f"  - Tenant {item.tenant_id}: repaired {', '.join(item.categories)}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
