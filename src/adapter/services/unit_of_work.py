from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Unit of work over one AsyncSession; repositories built on the same
    session share its transaction, so a single commit covers the ledger row,
    the budget update and the activity log together."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        if self.session.in_transaction():
            await self.session.rollback()
