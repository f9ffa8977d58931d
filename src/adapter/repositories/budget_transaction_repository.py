"""SQLAlchemy implementation of BudgetTransactionRepository

Idempotency is enforced twice: by the lookup inside the budget lock and by
the unique (tenant_id, source_event_id) constraint.
"""

from decimal import Decimal
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.budget_transaction_repository import BudgetTransactionRepository
from src.domain.budget_transaction import BudgetTransaction
from src.domain.errors import DuplicateSourceEventError


class SqlAlchemyBudgetTransactionRepository(BudgetTransactionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: BudgetTransaction) -> BudgetTransaction:
        """
        Raises:
            DuplicateSourceEventError: If the source event was already recorded
                (a concurrent writer won the unique key)
        """
        self.session.add(transaction)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise DuplicateSourceEventError(transaction.tenant_id, transaction.source_event_id) from e
        await self.session.refresh(transaction)
        return transaction

    async def get_by_source_event(self, tenant_id: int, source_event_id: str) -> Optional[BudgetTransaction]:
        stmt = select(BudgetTransaction).where(
            BudgetTransaction.tenant_id == tenant_id,
            BudgetTransaction.source_event_id == source_event_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_budget(
        self, tenant_id: int, budget_id: int, limit: int = 100, offset: int = 0
    ) -> List[BudgetTransaction]:
        stmt = (
            select(BudgetTransaction)
            .where(
                BudgetTransaction.tenant_id == tenant_id,
                BudgetTransaction.budget_id == budget_id,
            )
            .order_by(BudgetTransaction.created_at.desc(), BudgetTransaction.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_budget(self, tenant_id: int, budget_id: int) -> int:
        stmt = select(func.count(BudgetTransaction.id)).where(
            BudgetTransaction.tenant_id == tenant_id,
            BudgetTransaction.budget_id == budget_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def get_sum_by_budget(self, budget_id: int) -> Decimal:
        stmt = select(func.coalesce(func.sum(BudgetTransaction.amount), 0)).where(
            BudgetTransaction.budget_id == budget_id
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar_one())).quantize(Decimal("0.01"))
