"""Budget Repository Interface

Defines the contract for budget persistence. Mutating reads take a row lock
(SELECT FOR UPDATE) so concurrent deductions against one budget serialize.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional
from src.domain.budget import Budget, BudgetCategory


class BudgetRepository(ABC):
    """
    Repository interface for Budget persistence

    Every lookup is keyed by tenant_id as well as the budget's own key.
    """

    @abstractmethod
    async def get_for_client(
        self,
        tenant_id: int,
        client_id: int,
        category: BudgetCategory,
        for_update: bool = False,
    ) -> Optional[Budget]:
        """
        Retrieve the active budget of a client in one category

        Args:
            tenant_id: Owning tenant
            client_id: Client identifier
            category: Funding category
            for_update: If True, lock the row until the transaction ends

        Returns:
            Budget if found, None otherwise

        Raises:
            LockTimeoutError: If the row lock was not acquired within the lock timeout
        """
        pass

    @abstractmethod
    async def get_by_id(self, tenant_id: int, budget_id: int, for_update: bool = False) -> Optional[Budget]:
        """
        Retrieve a budget by id within a tenant

        Raises:
            LockTimeoutError: If the row lock was not acquired within the lock timeout
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[Budget]:
        """All budgets of all tenants (ledger audit only)"""
        pass

    @abstractmethod
    async def update_spent(self, budget: Budget, current_spent: Decimal, is_over_allocated: bool) -> Budget:
        """
        Persist a new spent figure for a budget already locked by the caller
        """
        pass
