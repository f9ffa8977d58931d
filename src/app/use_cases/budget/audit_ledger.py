"""AuditLedger Use Case

Checks every budget's current_spent against the sum of its ledger entries.
"""

import logging
import time
from typing import List
from libs.result import Result, Return, Error
from src.app.repositories.budget_repository import BudgetRepository
from src.app.repositories.budget_transaction_repository import BudgetTransactionRepository
from src.domain.base import utcnow
from src.domain.pricing import to_money
from .dtos import LedgerAuditResultDTO, LedgerDiscrepancyDTO

logger = logging.getLogger(__name__)


class AuditLedger:
    """
    Use Case: Audit budget spend against transactions

    Business Rules:
    1. For each budget, the transaction sum must equal current_spent
    2. Discrepancies are reported and logged, never repaired here
    3. Read-only: does NOT modify any data

    Flow:
    1. Get all budgets
    2. For each budget, sum its transactions and compare
    3. Return the audit result with all discrepancies
    """

    def __init__(self, budget_repo: BudgetRepository, transaction_repo: BudgetTransactionRepository):
        self.budget_repo = budget_repo
        self.transaction_repo = transaction_repo

    async def execute(self) -> Result[LedgerAuditResultDTO]:
        start_time = time.time()
        audit_time = utcnow()

        try:
            budgets = await self.budget_repo.list_all()
            logger.info(f"Auditing {len(budgets)} budgets")

            discrepancies: List[LedgerDiscrepancyDTO] = []
            for budget in budgets:
                transaction_sum = await self.transaction_repo.get_sum_by_budget(budget.id)
                current_spent = to_money(budget.current_spent)

                if current_spent != transaction_sum:
                    discrepancy = LedgerDiscrepancyDTO(
                        tenant_id=budget.tenant_id,
                        budget_id=budget.id,
                        current_spent=current_spent,
                        calculated_spent=transaction_sum,
                        discrepancy=current_spent - transaction_sum,
                    )
                    discrepancies.append(discrepancy)
                    logger.warning(
                        f"Discrepancy for tenant {budget.tenant_id} (budget_id={budget.id}): "
                        f"current_spent={current_spent}, transaction_sum={transaction_sum}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Ledger audit found {len(discrepancies)} discrepancies "
                    f"out of {len(budgets)} budgets in {execution_time_ms}ms"
                )
            else:
                logger.info(f"Ledger audit complete. All {len(budgets)} budgets balanced in {execution_time_ms}ms")

            return Return.ok(
                LedgerAuditResultDTO(
                    total_budgets_checked=len(budgets),
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    audit_time=audit_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Ledger audit failed: {e}")
            return Return.err(
                Error(code="LEDGER_AUDIT_FAILED", message="Failed to audit budget ledger", reason=str(e))
            )
