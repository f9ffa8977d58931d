"""RecordDeduction Use Case

Charges a completed shift against a client budget with row locking, decimal
precision and idempotency by source event id.
"""

import logging
from decimal import Decimal
from typing import Optional
from config import ApplicationConfig
from libs.result import Result, Return, Error
from src.app.repositories.activity_log_repository import ActivityLogRepository
from src.app.repositories.budget_repository import BudgetRepository
from src.app.repositories.budget_transaction_repository import BudgetTransactionRepository
from src.app.repositories.tenant_config_repository import TenantConfigRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.activity_log import ActivityLog
from src.domain.budget import Budget, OverspendPolicy
from src.domain.budget_transaction import BudgetTransaction, TransactionType
from src.domain.errors import DuplicateSourceEventError, ErrorCode, LockTimeoutError
from src.domain.pricing import calculate_deduction, ratio_multiplier, to_money
from src.domain.tenant_context import TenantContext
from .dtos import BudgetTransactionResponseDTO, RecordDeductionCommandDTO

logger = logging.getLogger(__name__)


class RecordDeduction:
    """
    Use Case: Record a budget deduction for a completed shift

    Business Rules:
    1. Idempotency: one ledger entry per (tenant, source_event_id); replays
       return ALREADY_RECORDED and write nothing
    2. Pessimistic locking: the budget row is locked (SELECT FOR UPDATE)
       before the idempotency check, so concurrent deductions serialize
    3. Precision: amount = hours x rate x ratio multiplier, rounded half-even to cents
    4. Overspend is flagged (or blocked, per OVERSPEND_POLICY), never clamped
    5. Atomic: entry, spend update and activity log commit together or not at all
    6. Never retries; a lock wait timeout is reported as LOCK_TIMEOUT

    Flow:
    1. Validate inputs
    2. Lock budget for (tenant, client, category)
    3. Check idempotency inside the lock
    4. Resolve rate and compute amount
    5. Apply overspend policy
    6. Insert entry, update spend, log activity
    7. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        budget_repo: BudgetRepository,
        transaction_repo: BudgetTransactionRepository,
        config_repo: TenantConfigRepository,
        activity_repo: ActivityLogRepository,
        overspend_policy: Optional[str] = None,
    ):
        self.uow = uow
        self.budget_repo = budget_repo
        self.transaction_repo = transaction_repo
        self.config_repo = config_repo
        self.activity_repo = activity_repo
        self.overspend_policy = OverspendPolicy(overspend_policy or ApplicationConfig.OVERSPEND_POLICY)

    async def execute(
        self, context: TenantContext, command: RecordDeductionCommandDTO
    ) -> Result[BudgetTransactionResponseDTO]:
        """
        Execute the deduction

        Args:
            context: Caller's tenant context
            command: RecordDeductionCommandDTO

        Returns:
            Result[BudgetTransactionResponseDTO]: the recorded entry or an error
        """
        tenant_id = context.effective_tenant(command.tenant_id)
        if command.tenant_id is not None and int(command.tenant_id) != tenant_id:
            return Return.err(
                Error(
                    code=ErrorCode.TENANT_BOUNDARY_VIOLATION,
                    message="Deduction targets a tenant outside the caller's context",
                )
            )

        if command.rate is None and command.shift_type is None:
            return Return.err(
                Error(
                    code=ErrorCode.VALIDATION_ERROR,
                    message="Either rate or shift_type is required",
                )
            )

        try:
            # Step 1: Lock the budget row for the rest of the transaction
            budget = await self.budget_repo.get_for_client(
                tenant_id, command.client_id, command.category, for_update=True
            )

            # Step 2: Idempotency check, inside the lock and ahead of the budget check
            # so a replay still reports ALREADY_RECORDED once its budget is gone
            existing = await self.transaction_repo.get_by_source_event(tenant_id, command.source_event_id)
            if existing:
                error = self._already_recorded(command.source_event_id, existing.id)
                await self.uow.rollback()
                return error

            if not budget:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.BUDGET_NOT_FOUND,
                        message=f"No {command.category.value} budget for client {command.client_id}",
                    )
                )

            # Step 3: Resolve rate
            rate = command.rate
            if rate is None:
                service_rate = await self.config_repo.get_service_rate(
                    tenant_id, command.shift_type, command.staff_ratio
                )
                if service_rate is None:
                    await self.uow.rollback()
                    return Return.err(
                        Error(
                            code=ErrorCode.RATE_NOT_FOUND,
                            message=(
                                f"No service rate for {command.shift_type.value} "
                                f"at {command.staff_ratio.value}"
                            ),
                        )
                    )
                rate = Decimal(service_rate.rate)

            # Step 4: Amount, rounded half-even to cents
            multiplier = ratio_multiplier(command.staff_ratio)
            amount = calculate_deduction(command.hours, rate, command.staff_ratio)

            # Step 5: Overspend policy
            current_spent = to_money(budget.current_spent)
            total_allocation = to_money(budget.total_allocation)
            new_spent = current_spent + amount
            exceeds = budget.would_exceed(amount)
            if exceeds and self.overspend_policy == OverspendPolicy.BLOCK:
                # Rollback expires the budget; the error only uses the values read above
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.OVER_ALLOCATION,
                        message=(
                            f"Deduction of {amount} exceeds remaining allocation "
                            f"{total_allocation - current_spent}"
                        ),
                        reason=f"current_spent={current_spent}, total_allocation={total_allocation}",
                    )
                )

            # Step 6: Entry, spend, activity
            transaction = BudgetTransaction.for_budget(
                budget,
                source_event_id=command.source_event_id,
                transaction_type=TransactionType.DEDUCTION,
                amount=amount,
                hours=command.hours,
                rate=rate,
                multiplier=multiplier,
                description=command.description,
                created_by=context.user_id,
            )
            created = await self.transaction_repo.create(transaction)

            await self.budget_repo.update_spent(budget, new_spent, is_over_allocated=exceeds)

            await self.activity_repo.create(
                ActivityLog(
                    tenant_id=budget.tenant_id,
                    user_id=context.user_id,
                    action="budget.deduction",
                    resource_type="budget",
                    resource_id=str(budget.id),
                    description=(
                        f"Deducted {amount} for {command.source_event_id} "
                        f"({command.hours}h x {rate} x {multiplier})"
                    ),
                )
            )

            # Step 7: Commit
            response = self._to_response_dto(created, budget, exceeds)
            await self.uow.commit()

            if exceeds:
                logger.warning(
                    f"Budget {budget.id} of tenant {budget.tenant_id} is over-allocated: "
                    f"spent={new_spent}, allocation={total_allocation}"
                )

            return Return.ok(response)

        except LockTimeoutError as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.LOCK_TIMEOUT,
                    message="Budget is busy, retry shortly",
                    reason=str(e),
                )
            )
        except DuplicateSourceEventError:
            await self.uow.rollback()
            return self._already_recorded(command.source_event_id)
        except ValueError as e:
            await self.uow.rollback()
            return Return.err(
                Error(code=ErrorCode.VALIDATION_ERROR, message="Invalid deduction", reason=str(e))
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Deduction {command.source_event_id} failed for tenant {tenant_id}: {e}")
            return Return.err(
                Error(
                    code="RECORD_DEDUCTION_FAILED",
                    message="Failed to record deduction",
                    reason=str(e),
                )
            )

    @staticmethod
    def _already_recorded(source_event_id: str, transaction_id: Optional[int] = None) -> Result:
        return Return.err(
            Error(
                code=ErrorCode.ALREADY_RECORDED,
                message=f"Source event {source_event_id} has already been recorded",
                reason=f"transaction_id={transaction_id}" if transaction_id else None,
            )
        )

    @staticmethod
    def _to_response_dto(
        transaction: BudgetTransaction, budget: Budget, exceeds: bool
    ) -> BudgetTransactionResponseDTO:
        return build_transaction_response(
            transaction,
            budget,
            warning="Budget allocation exceeded" if exceeds else None,
        )


def build_transaction_response(
    transaction: BudgetTransaction, budget: Budget, warning: Optional[str] = None
) -> BudgetTransactionResponseDTO:
    return BudgetTransactionResponseDTO(
        transaction_id=transaction.id,
        tenant_id=transaction.tenant_id,
        budget_id=transaction.budget_id,
        source_event_id=transaction.source_event_id,
        transaction_type=TransactionType(transaction.transaction_type).value,
        amount=transaction.amount,
        hours=transaction.hours,
        rate=transaction.rate,
        multiplier=transaction.multiplier,
        current_spent=to_money(budget.current_spent),
        total_allocation=to_money(budget.total_allocation),
        remaining=to_money(budget.remaining),
        is_over_allocated=budget.is_over_allocated,
        warning=warning,
        created_at=transaction.created_at,
    )
