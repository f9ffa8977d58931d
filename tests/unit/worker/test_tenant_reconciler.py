"""Unit tests for TenantReconcilerWorker

Tests cover:
- Worker initialization with and without a shared session factory
- run_once delegating to the sweep and the ledger audit
- Reconciliation disabled scenario
- Shutdown and cleanup
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from libs.result import Return, Error
from src.app.use_cases.provisioning.dtos import (
    ReconciliationState,
    SweepResultDTO,
    TenantReconciliationDTO,
)
from src.domain.base import utcnow
from src.worker.tenant_reconciler import TenantReconcilerWorker


@pytest.fixture
def mock_config():
    """Mock ApplicationConfig"""
    config = MagicMock()
    config.DB_URI = "sqlite+aiosqlite:///:memory:"
    config.RECONCILIATION_ENABLED = True
    config.DEFAULT_BUDGET_ALLOCATIONS = {}
    return config


@pytest.fixture
def mock_session():
    """Mock async session"""
    session = MagicMock()
    session.__aenter__ = AsyncMock(return_value=session)
    session.__aexit__ = AsyncMock()
    session.rollback = AsyncMock()
    return session


@pytest.fixture
def session_factory(mock_session):
    return MagicMock(return_value=mock_session)


@pytest.fixture
def sample_sweep():
    return SweepResultDTO(
        tenants_checked=2,
        consistent=1,
        repaired=0,
        failed=1,
        results=[
            TenantReconciliationDTO(tenant_id=1, state=ReconciliationState.CONSISTENT),
            TenantReconciliationDTO(tenant_id=2, state=ReconciliationState.FAILED, reason="boom"),
        ],
        sweep_time=utcnow(),
        execution_time_ms=12,
    )


class TestWorkerInitialization:

    def test_shared_session_factory_creates_no_engine(self, session_factory):
        worker = TenantReconcilerWorker(session_factory=session_factory)

        assert worker.engine is None
        assert worker.async_session_factory is session_factory

    def test_builds_engine_from_config(self, mock_config):
        with patch("src.worker.tenant_reconciler.ApplicationConfig", mock_config), \
             patch("src.worker.tenant_reconciler.build_engine") as mock_build_engine, \
             patch("src.worker.tenant_reconciler.build_session_factory") as mock_build_factory:
            worker = TenantReconcilerWorker()

        mock_build_engine.assert_called_once_with(mock_config.DB_URI)
        assert worker.engine is mock_build_engine.return_value
        assert worker.async_session_factory is mock_build_factory.return_value


@pytest.mark.asyncio
class TestRunOnce:

    async def test_run_once_returns_sweep_and_audits(self, mock_config, session_factory, sample_sweep):
        """
        Given: A sweep that finds one consistent and one failed tenant
        When: run_once is called
        Then: The sweep summary is returned and the ledger is audited afterwards
        """
        with patch("src.worker.tenant_reconciler.ApplicationConfig", mock_config), \
             patch("src.worker.tenant_reconciler.ReconcileAllTenants") as mock_sweep_cls:
            mock_sweep_cls.return_value.execute = AsyncMock(return_value=Return.ok(sample_sweep))
            worker = TenantReconcilerWorker(session_factory=session_factory)
            worker._audit_ledger = AsyncMock()

            result = await worker.run_once()

        assert result.tenants_checked == 2
        assert result.failed == 1
        assert mock_sweep_cls.call_args.kwargs["reconcile_one"] == worker._reconcile_tenant
        worker._audit_ledger.assert_called_once()

    async def test_disabled_reconciliation_skips(self, mock_config, session_factory):
        mock_config.RECONCILIATION_ENABLED = False

        with patch("src.worker.tenant_reconciler.ApplicationConfig", mock_config), \
             patch("src.worker.tenant_reconciler.ReconcileAllTenants") as mock_sweep_cls:
            worker = TenantReconcilerWorker(session_factory=session_factory)

            result = await worker.run_once()

        assert result.tenants_checked == 0
        mock_sweep_cls.assert_not_called()

    async def test_force_overrides_disabled(self, mock_config, session_factory, sample_sweep):
        mock_config.RECONCILIATION_ENABLED = False

        with patch("src.worker.tenant_reconciler.ApplicationConfig", mock_config), \
             patch("src.worker.tenant_reconciler.ReconcileAllTenants") as mock_sweep_cls:
            mock_sweep_cls.return_value.execute = AsyncMock(return_value=Return.ok(sample_sweep))
            worker = TenantReconcilerWorker(session_factory=session_factory)
            worker._audit_ledger = AsyncMock()

            result = await worker.run_once(force=True)

        assert result.tenants_checked == 2

    async def test_sweep_error_raises(self, mock_config, session_factory):
        with patch("src.worker.tenant_reconciler.ApplicationConfig", mock_config), \
             patch("src.worker.tenant_reconciler.ReconcileAllTenants") as mock_sweep_cls:
            mock_sweep_cls.return_value.execute = AsyncMock(
                return_value=Return.err(Error(code="RECONCILIATION_FAILED", message="db down"))
            )
            worker = TenantReconcilerWorker(session_factory=session_factory)

            with pytest.raises(RuntimeError, match="db down"):
                await worker.run_once()


@pytest.mark.asyncio
class TestShutdown:

    async def test_shutdown_disposes_own_engine(self, mock_config):
        with patch("src.worker.tenant_reconciler.ApplicationConfig", mock_config), \
             patch("src.worker.tenant_reconciler.build_engine") as mock_build_engine, \
             patch("src.worker.tenant_reconciler.build_session_factory"):
            mock_build_engine.return_value.dispose = AsyncMock()
            worker = TenantReconcilerWorker()

            await worker.shutdown()

        mock_build_engine.return_value.dispose.assert_called_once()

    async def test_shutdown_with_shared_factory(self, session_factory):
        worker = TenantReconcilerWorker(session_factory=session_factory)

        await worker.shutdown()
