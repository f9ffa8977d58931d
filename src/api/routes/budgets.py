"""Budget API Routes

FastAPI routes for the budget ledger: shift deductions, administrative
adjustments and refunds, and the per-budget transaction history.
"""

import asyncio
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories.activity_log_repository import SqlAlchemyActivityLogRepository
from src.adapter.repositories.budget_repository import SqlAlchemyBudgetRepository
from src.adapter.repositories.budget_transaction_repository import SqlAlchemyBudgetTransactionRepository
from src.adapter.repositories.tenant_config_repository import SqlAlchemyTenantConfigRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.dependencies import enforce_tenant_boundary, get_tenant_context
from src.api.error import client_error_for
from src.api.schemas.budget_request import AdjustmentRequestSchema, DeductionRequestSchema
from src.app.use_cases.budget import (
    BudgetTransactionResponseDTO,
    ListBudgetTransactions,
    ListTransactionsResponseDTO,
    RecordAdjustment,
    RecordAdjustmentCommandDTO,
    RecordDeduction,
    RecordDeductionCommandDTO,
)
from src.depends import get_session
from src.domain.tenant_context import TenantContext

router = APIRouter(prefix="/budgets", tags=["Budgets"])


async def _run_to_completion(coro):
    """
    Await a ledger use case so that client disconnects cannot interrupt it

    If the request task is cancelled, the use case still runs to its own
    commit or rollback before the session is released.
    """
    task = asyncio.ensure_future(coro)
    try:
        return await asyncio.shield(task)
    except asyncio.CancelledError:
        await task
        raise


@router.post(
    "/deductions",
    response_model=BudgetTransactionResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {
            "description": "Source event already recorded",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "ALREADY_RECORDED",
                            "message": "Source event shift-1 has already been recorded"
                        }
                    }
                }
            }
        },
        503: {"description": "Budget row lock not acquired in time (LOCK_TIMEOUT); retry"},
    }
)
async def record_deduction(
    request: DeductionRequestSchema,
    payload: Dict[str, Any] = Depends(enforce_tenant_boundary),
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """
    Charge a completed shift against a client's budget.

    amount = hours x rate x staff-ratio multiplier, rounded half-even to cents.
    Each `source_event_id` is recorded at most once per tenant.

    **Example request:**
    ```json
    {
      "client_id": 42,
      "category": "SIL",
      "source_event_id": "shift-1",
      "hours": "2.00",
      "rate": "37.75"
    }
    ```

    **Returns:**
    - 201: Deduction recorded (warning set if the budget is now over-allocated)
    - 403: TENANT_BOUNDARY_VIOLATION
    - 404: BUDGET_NOT_FOUND or RATE_NOT_FOUND
    - 409: ALREADY_RECORDED
    - 422: OVER_ALLOCATION (block policy only)
    - 503: LOCK_TIMEOUT
    """
    uow = SqlAlchemyUnitOfWork(session)
    budget_repo = SqlAlchemyBudgetRepository(session, lock_timeout_ms=ApplicationConfig.LOCK_TIMEOUT_MS)
    transaction_repo = SqlAlchemyBudgetTransactionRepository(session)
    config_repo = SqlAlchemyTenantConfigRepository(session)
    activity_repo = SqlAlchemyActivityLogRepository(session)

    command = RecordDeductionCommandDTO(
        tenant_id=payload.get("tenant_id"),
        client_id=request.client_id,
        category=request.category,
        source_event_id=request.source_event_id,
        hours=request.hours,
        rate=request.rate,
        shift_type=request.shift_type,
        staff_ratio=request.staff_ratio,
        description=request.description,
    )

    use_case = RecordDeduction(uow, budget_repo, transaction_repo, config_repo, activity_repo)
    result = await _run_to_completion(use_case.execute(context, command))

    if result.is_err():
        raise client_error_for(result.error)

    return result.value


@router.post(
    "/{budget_id}/adjustments",
    response_model=BudgetTransactionResponseDTO,
    status_code=status.HTTP_201_CREATED,
)
async def record_adjustment(
    budget_id: int,
    request: AdjustmentRequestSchema,
    payload: Dict[str, Any] = Depends(enforce_tenant_boundary),
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """
    Administrative adjustment (positive amount) or refund (negative amount).

    Restricted to Coordinator, Admin and ConsoleManager. A refund cannot take
    the budget's spend below zero.
    """
    uow = SqlAlchemyUnitOfWork(session)
    command = RecordAdjustmentCommandDTO(
        tenant_id=payload.get("tenant_id"),
        budget_id=budget_id,
        source_event_id=request.source_event_id,
        amount=request.amount,
        description=request.description,
    )

    use_case = RecordAdjustment(
        uow,
        SqlAlchemyBudgetRepository(session, lock_timeout_ms=ApplicationConfig.LOCK_TIMEOUT_MS),
        SqlAlchemyBudgetTransactionRepository(session),
        SqlAlchemyActivityLogRepository(session),
    )
    result = await _run_to_completion(use_case.execute(context, command))

    if result.is_err():
        raise client_error_for(result.error)

    return result.value


@router.get("/{budget_id}/transactions", response_model=ListTransactionsResponseDTO)
async def list_budget_transactions(
    budget_id: int,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    tenant_id: Optional[int] = Query(default=None),
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """
    Ledger entries of one budget, newest first.

    **Returns:**
    - 200: Page of transactions with the total count
    - 404: Budget missing or owned by another tenant
    """
    use_case = ListBudgetTransactions(
        SqlAlchemyBudgetRepository(session),
        SqlAlchemyBudgetTransactionRepository(session),
    )
    result = await use_case.execute(context, budget_id, limit=limit, offset=offset, tenant_id=tenant_id)

    if result.is_err():
        raise client_error_for(result.error)

    return result.value
