"""Budget Transaction Repository Interface

Ledger entries are append-only: there is no update or delete.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from src.domain.budget_transaction import BudgetTransaction


class BudgetTransactionRepository(ABC):

    @abstractmethod
    async def create(self, transaction: BudgetTransaction) -> BudgetTransaction:
        """
        Append a ledger entry

        Raises:
            DuplicateSourceEventError: If (tenant_id, source_event_id) already exists
        """
        pass

    @abstractmethod
    async def get_by_source_event(self, tenant_id: int, source_event_id: str) -> Optional[BudgetTransaction]:
        """Idempotency lookup"""
        pass

    @abstractmethod
    async def list_by_budget(
        self, tenant_id: int, budget_id: int, limit: int = 100, offset: int = 0
    ) -> List[BudgetTransaction]:
        """Entries of one budget, newest first"""
        pass

    @abstractmethod
    async def count_by_budget(self, tenant_id: int, budget_id: int) -> int:
        pass

    @abstractmethod
    async def get_sum_by_budget(self, budget_id: int) -> Decimal:
        """
        Sum of all entry amounts for a budget

        Returns:
            Decimal("0.00") when the budget has no entries
        """
        pass
