"""ListBudgetTransactions Use Case

Read-only, paginated view of one budget's ledger.
"""

from libs.result import Result, Return, Error
from src.app.repositories.budget_repository import BudgetRepository
from src.app.repositories.budget_transaction_repository import BudgetTransactionRepository
from src.domain.budget_transaction import TransactionType
from src.domain.errors import ErrorCode
from src.domain.tenant_context import TenantContext
from .dtos import ListTransactionsResponseDTO, TransactionDTO


class ListBudgetTransactions:

    def __init__(self, budget_repo: BudgetRepository, transaction_repo: BudgetTransactionRepository):
        self.budget_repo = budget_repo
        self.transaction_repo = transaction_repo

    async def execute(
        self,
        context: TenantContext,
        budget_id: int,
        limit: int = 100,
        offset: int = 0,
        tenant_id: int = None,
    ) -> Result[ListTransactionsResponseDTO]:
        tenant_id = context.effective_tenant(tenant_id)

        budget = await self.budget_repo.get_by_id(tenant_id, budget_id)
        if budget is None:
            return Return.err(
                Error(code=ErrorCode.NOT_FOUND_OR_FORBIDDEN, message=f"Budget {budget_id} not found")
            )

        transactions = await self.transaction_repo.list_by_budget(tenant_id, budget_id, limit=limit, offset=offset)
        total = await self.transaction_repo.count_by_budget(tenant_id, budget_id)

        return Return.ok(
            ListTransactionsResponseDTO(
                budget_id=budget_id,
                tenant_id=tenant_id,
                total=total,
                limit=limit,
                offset=offset,
                transactions=[
                    TransactionDTO(
                        id=t.id,
                        source_event_id=t.source_event_id,
                        transaction_type=TransactionType(t.transaction_type).value,
                        amount=t.amount,
                        hours=t.hours,
                        rate=t.rate,
                        multiplier=t.multiplier,
                        description=t.description,
                        created_by=t.created_by,
                        created_at=t.created_at,
                    )
                    for t in transactions
                ],
            )
        )
