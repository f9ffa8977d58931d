"""SQLAlchemy implementation of BudgetRepository

Provides persistence for Budget entities with pessimistic locking support so
concurrent deductions against the same budget serialize.
"""

import logging
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.exc import DBAPIError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.budget_repository import BudgetRepository
from src.domain.base import utcnow
from src.domain.budget import Budget, BudgetCategory
from src.domain.errors import LockTimeoutError
from .locking import apply_lock_timeout, is_lock_timeout

logger = logging.getLogger(__name__)


class SqlAlchemyBudgetRepository(BudgetRepository):
    """
    SQLAlchemy implementation of BudgetRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE, bounded by LOCK_TIMEOUT_MS
    - Lock waits that expire surface as LockTimeoutError
    """

    def __init__(self, session: AsyncSession, lock_timeout_ms: Optional[int] = None):
        self.session = session
        self.lock_timeout_ms = lock_timeout_ms

    async def get_for_client(
        self,
        tenant_id: int,
        client_id: int,
        category: BudgetCategory,
        for_update: bool = False,
    ) -> Optional[Budget]:
        stmt = select(Budget).where(
            Budget.tenant_id == tenant_id,
            Budget.client_id == client_id,
            Budget.category == category,
            Budget.is_active == True,  # noqa: E712
        )
        return await self._fetch_one(stmt, for_update)

    async def get_by_id(self, tenant_id: int, budget_id: int, for_update: bool = False) -> Optional[Budget]:
        stmt = select(Budget).where(Budget.id == budget_id, Budget.tenant_id == tenant_id)
        return await self._fetch_one(stmt, for_update)

    async def list_all(self) -> List[Budget]:
        result = await self.session.execute(select(Budget).order_by(Budget.tenant_id, Budget.id))
        return list(result.scalars().all())

    async def update_spent(self, budget: Budget, current_spent: Decimal, is_over_allocated: bool) -> Budget:
        """
        Note:
            Should be called within a transaction with the budget already locked
        """
        budget.current_spent = current_spent
        budget.is_over_allocated = is_over_allocated
        budget.updated_at = utcnow()
        self.session.add(budget)
        await self.session.flush()
        return budget

    async def _fetch_one(self, stmt, for_update: bool) -> Optional[Budget]:
        try:
            if for_update:
                await apply_lock_timeout(self.session, self.lock_timeout_ms)
                stmt = stmt.with_for_update()
            result = await self.session.execute(stmt)
        except DBAPIError as e:
            if for_update and is_lock_timeout(e):
                logger.warning(f"Budget lock not acquired within timeout: {e.orig}")
                raise LockTimeoutError(str(e.orig)) from e
            raise
        return result.scalar_one_or_none()
