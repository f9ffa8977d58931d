from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.activity_log_repository import ActivityLogRepository
from src.domain.activity_log import ActivityLog


class SqlAlchemyActivityLogRepository(ActivityLogRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, entry: ActivityLog) -> ActivityLog:
        self.session.add(entry)
        await self.session.flush()
        return entry
