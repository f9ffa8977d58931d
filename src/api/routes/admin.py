"""Admin API Routes

Console-manager operations: tenant onboarding, reconciliation and the
cross-tenant billing summary.
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error
from src.adapter.repositories.activity_log_repository import SqlAlchemyActivityLogRepository
from src.adapter.repositories.tenant_config_repository import SqlAlchemyTenantConfigRepository
from src.adapter.repositories.tenant_repository import SqlAlchemyTenantRepository
from src.adapter.repositories.tenant_scoped_repository import SqlAlchemyTenantScopedRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.dependencies import get_tenant_context, require_cross_tenant
from src.api.error import ClientError, client_error_for
from src.api.schemas.admin_request import ProvisionTenantRequestSchema
from src.app.use_cases.provisioning import (
    ProvisioningEngine,
    ProvisionTenant,
    ProvisionTenantCommandDTO,
    ProvisionTenantResponseDTO,
    ReconcileTenant,
    SweepResultDTO,
    TenantReconciliationDTO,
)
from src.depends import get_session, get_session_factory
from src.app.use_cases.tenancy.dtos import TenantBillingSummaryDTO
from src.domain.errors import CrossTenantAccessDenied, ErrorCode
from src.domain.tenant_context import TenantContext
from src.worker.tenant_reconciler import TenantReconcilerWorker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def _engine(session: AsyncSession) -> ProvisioningEngine:
    return ProvisioningEngine(
        config_repo=SqlAlchemyTenantConfigRepository(session),
        user_repo=SqlAlchemyUserRepository(session),
        activity_repo=SqlAlchemyActivityLogRepository(session),
        default_budget_allocations=ApplicationConfig.DEFAULT_BUDGET_ALLOCATIONS,
    )


@router.post("/tenants", response_model=ProvisionTenantResponseDTO, status_code=status.HTTP_201_CREATED)
async def provision_tenant(
    request: ProvisionTenantRequestSchema,
    context: TenantContext = Depends(require_cross_tenant),
    session: AsyncSession = Depends(get_session),
):
    """
    Onboard a tenant: tenant row, first Admin user and the full baseline
    configuration, in one transaction.
    """
    use_case = ProvisionTenant(
        uow=SqlAlchemyUnitOfWork(session),
        tenant_repo=SqlAlchemyTenantRepository(session),
        user_repo=SqlAlchemyUserRepository(session),
        activity_repo=SqlAlchemyActivityLogRepository(session),
        engine=_engine(session),
    )
    result = await use_case.execute(context, ProvisionTenantCommandDTO(**request.model_dump()))
    if result.is_err():
        raise client_error_for(result.error)
    return result.value


@router.post("/reconciliation", response_model=SweepResultDTO)
async def run_reconciliation_sweep(
    context: TenantContext = Depends(require_cross_tenant),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """
    Run the consistency sweep over every active tenant, each in its own
    transaction. Per-tenant failures are reported in the result, never raised.
    """
    worker = TenantReconcilerWorker(session_factory=session_factory)
    return await worker.run_once(force=True)


@router.post("/reconciliation/{tenant_id}", response_model=TenantReconciliationDTO)
async def reconcile_tenant(
    tenant_id: int,
    context: TenantContext = Depends(require_cross_tenant),
    session: AsyncSession = Depends(get_session),
):
    """Reconcile a single tenant: CONSISTENT, REPAIRED(categories) or FAILED(reason)."""
    use_case = ReconcileTenant(
        uow=SqlAlchemyUnitOfWork(session),
        tenant_repo=SqlAlchemyTenantRepository(session),
        engine=_engine(session),
    )
    result = await use_case.execute(tenant_id)
    if result.is_err():
        raise client_error_for(result.error)
    return result.value


@router.get("/billing-summary", response_model=List[TenantBillingSummaryDTO])
async def billing_summary(
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """
    Budget totals per tenant, across all tenants. Requires the cross-tenant
    capability; everyone else receives 403.
    """
    try:
        rows = await SqlAlchemyTenantScopedRepository(session).billing_summary(context)
    except CrossTenantAccessDenied as e:
        raise ClientError(
            Error(code=ErrorCode.FORBIDDEN, message=str(e)),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return [TenantBillingSummaryDTO(**row) for row in rows]
