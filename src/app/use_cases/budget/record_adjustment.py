"""RecordAdjustment Use Case

Administrative increase of spend (adjustment) or signed decrease (refund),
through the same locked ledger path as deductions.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.activity_log_repository import ActivityLogRepository
from src.app.repositories.budget_repository import BudgetRepository
from src.app.repositories.budget_transaction_repository import BudgetTransactionRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.activity_log import ActivityLog
from src.domain.budget_transaction import BudgetTransaction, TransactionType
from src.domain.errors import DuplicateSourceEventError, ErrorCode, LockTimeoutError
from src.domain.pricing import to_money
from src.domain.tenant_context import TenantContext
from .dtos import BudgetTransactionResponseDTO, RecordAdjustmentCommandDTO
from .record_deduction import build_transaction_response

logger = logging.getLogger(__name__)


class RecordAdjustment:
    """
    Use Case: Record an administrative adjustment or refund

    Business Rules:
    1. Only roles allowed to adjust budgets (Coordinator, Admin, ConsoleManager)
    2. amount > 0 is an adjustment, amount < 0 a refund, zero is rejected
    3. A refund may not take current_spent below zero
    4. Same lock and idempotency guarantees as RecordDeduction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        budget_repo: BudgetRepository,
        transaction_repo: BudgetTransactionRepository,
        activity_repo: ActivityLogRepository,
    ):
        self.uow = uow
        self.budget_repo = budget_repo
        self.transaction_repo = transaction_repo
        self.activity_repo = activity_repo

    async def execute(
        self, context: TenantContext, command: RecordAdjustmentCommandDTO
    ) -> Result[BudgetTransactionResponseDTO]:
        if not context.role.can_adjust_budgets:
            return Return.err(
                Error(
                    code=ErrorCode.FORBIDDEN,
                    message=f"Role {context.role.value} cannot adjust budgets",
                )
            )

        tenant_id = context.effective_tenant(command.tenant_id)
        if command.tenant_id is not None and int(command.tenant_id) != tenant_id:
            return Return.err(
                Error(
                    code=ErrorCode.TENANT_BOUNDARY_VIOLATION,
                    message="Adjustment targets a tenant outside the caller's context",
                )
            )

        amount = to_money(command.amount)
        if amount == 0:
            return Return.err(
                Error(code=ErrorCode.VALIDATION_ERROR, message="Adjustment amount must not be zero")
            )
        transaction_type = TransactionType.ADJUSTMENT if amount > 0 else TransactionType.REFUND

        try:
            budget = await self.budget_repo.get_by_id(tenant_id, command.budget_id, for_update=True)

            existing = await self.transaction_repo.get_by_source_event(tenant_id, command.source_event_id)
            if existing:
                error = Error(
                    code=ErrorCode.ALREADY_RECORDED,
                    message=f"Source event {command.source_event_id} has already been recorded",
                    reason=f"transaction_id={existing.id}",
                )
                await self.uow.rollback()
                return Return.err(error)

            if not budget:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.BUDGET_NOT_FOUND,
                        message=f"Budget {command.budget_id} not found",
                    )
                )

            current_spent = to_money(budget.current_spent)
            new_spent = current_spent + amount
            if new_spent < 0:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.VALIDATION_ERROR,
                        message=f"Refund of {-amount} exceeds spent amount {current_spent}",
                    )
                )

            exceeds = budget.would_exceed(amount)

            transaction = BudgetTransaction.for_budget(
                budget,
                source_event_id=command.source_event_id,
                transaction_type=transaction_type,
                amount=amount,
                description=command.description,
                created_by=context.user_id,
            )
            created = await self.transaction_repo.create(transaction)
            await self.budget_repo.update_spent(budget, new_spent, is_over_allocated=exceeds)
            await self.activity_repo.create(
                ActivityLog(
                    tenant_id=budget.tenant_id,
                    user_id=context.user_id,
                    action=f"budget.{transaction_type.value}",
                    resource_type="budget",
                    resource_id=str(budget.id),
                    description=f"{transaction_type.value.capitalize()} of {amount} ({command.source_event_id})",
                )
            )

            response = build_transaction_response(
                created, budget, warning="Budget allocation exceeded" if exceeds else None
            )
            await self.uow.commit()
            return Return.ok(response)

        except LockTimeoutError as e:
            await self.uow.rollback()
            return Return.err(
                Error(code=ErrorCode.LOCK_TIMEOUT, message="Budget is busy, retry shortly", reason=str(e))
            )
        except DuplicateSourceEventError:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code=ErrorCode.ALREADY_RECORDED,
                    message=f"Source event {command.source_event_id} has already been recorded",
                )
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Adjustment {command.source_event_id} failed for tenant {tenant_id}: {e}")
            return Return.err(
                Error(
                    code="RECORD_ADJUSTMENT_FAILED",
                    message="Failed to record adjustment",
                    reason=str(e),
                )
            )
