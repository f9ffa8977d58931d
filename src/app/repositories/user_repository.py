"""User Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.user import User


class UserRepository(ABC):

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Look a user up by primary key, across all tenants (authentication only)"""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        pass

    @abstractmethod
    async def list_active_staff(self, tenant_id: int) -> List[User]:
        """Active users of a tenant whose role receives rostered hours"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        pass
