"""Unit tests for AuditLedger use case"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.budget.audit_ledger import AuditLedger
from src.domain.budget import Budget, BudgetCategory


def make_budget(budget_id, spent):
    return Budget(
        id=budget_id,
        tenant_id=1,
        client_id=budget_id,
        category=BudgetCategory.SIL,
        total_allocation=Decimal("1000.00"),
        current_spent=Decimal(spent),
    )


@pytest.mark.asyncio
class TestAuditLedger:

    async def test_balanced_ledger(self):
        budget_repo = MagicMock()
        budget_repo.list_all = AsyncMock(return_value=[make_budget(1, "75.50"), make_budget(2, "0.00")])
        transaction_repo = MagicMock()
        transaction_repo.get_sum_by_budget = AsyncMock(side_effect=[Decimal("75.50"), Decimal("0.00")])

        result = await AuditLedger(budget_repo, transaction_repo).execute()

        assert result.is_ok()
        assert result.value.total_budgets_checked == 2
        assert result.value.discrepancies_found == 0

    async def test_discrepancy_reported_not_repaired(self):
        """
        Given: A budget whose current_spent drifted from its transaction sum
        When: The ledger is audited
        Then: The drift is reported and the budget is left untouched
        """
        budget_repo = MagicMock()
        budget_repo.list_all = AsyncMock(return_value=[make_budget(1, "100.00")])
        budget_repo.update_spent = AsyncMock()
        transaction_repo = MagicMock()
        transaction_repo.get_sum_by_budget = AsyncMock(return_value=Decimal("75.50"))

        result = await AuditLedger(budget_repo, transaction_repo).execute()

        assert result.value.discrepancies_found == 1
        assert result.value.discrepancies[0].discrepancy == Decimal("24.50")
        budget_repo.update_spent.assert_not_called()

    async def test_repository_failure(self):
        budget_repo = MagicMock()
        budget_repo.list_all = AsyncMock(side_effect=RuntimeError("db down"))

        result = await AuditLedger(budget_repo, MagicMock()).execute()

        assert result.error.code == "LEDGER_AUDIT_FAILED"
