"""Tenant Repository Interface"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.tenant import Tenant


class TenantRepository(ABC):

    @abstractmethod
    async def get_by_id(self, tenant_id: int) -> Optional[Tenant]:
        pass

    @abstractmethod
    async def list_active(self) -> List[Tenant]:
        """Active tenants ordered by id"""
        pass

    @abstractmethod
    async def create(self, tenant: Tenant) -> Tenant:
        pass
