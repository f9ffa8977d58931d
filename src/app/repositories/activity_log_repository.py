"""Activity Log Repository Interface"""

from abc import ABC, abstractmethod
from src.domain.activity_log import ActivityLog


class ActivityLogRepository(ABC):

    @abstractmethod
    async def create(self, entry: ActivityLog) -> ActivityLog:
        pass
