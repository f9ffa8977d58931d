"""Tenant Configuration Repository Interface

Read side of the provisioning engine's gap detection, plus the service rate
lookup used by the deduction engine.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set, Tuple
from src.domain.client import Client
from src.domain.pricing import ShiftType, StaffRatio
from src.domain.tenant_config import ServiceRate


class TenantConfigRepository(ABC):

    @abstractmethod
    async def pay_scale_keys(self, tenant_id: int) -> Set[Tuple[int, int, str]]:
        """Existing (level, pay_point, employment_type) keys"""
        pass

    @abstractmethod
    async def tax_bracket_keys(self, tenant_id: int, tax_year: str) -> Set:
        """Existing min_income values of the given tax year"""
        pass

    @abstractmethod
    async def hour_allocation_staff_ids(self, tenant_id: int, allocation_period: str) -> Set[int]:
        pass

    @abstractmethod
    async def service_rate_keys(self, tenant_id: int) -> Set[Tuple[str, str]]:
        """Existing (shift_type, staff_ratio) keys"""
        pass

    @abstractmethod
    async def clients_without_budget(self, tenant_id: int) -> List[Client]:
        """Active clients that own no budget row at all"""
        pass

    @abstractmethod
    async def get_service_rate(
        self, tenant_id: int, shift_type: ShiftType, staff_ratio: StaffRatio
    ) -> Optional[ServiceRate]:
        pass

    @abstractmethod
    async def add_all(self, rows: Iterable) -> int:
        """Insert tenant-owned rows; returns how many were added"""
        pass
