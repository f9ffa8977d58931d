"""SQLAlchemy implementation of TenantConfigRepository"""

from typing import Iterable, List, Optional, Set, Tuple
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.tenant_config_repository import TenantConfigRepository
from src.domain.budget import Budget
from src.domain.client import Client
from src.domain.pricing import ShiftType, StaffRatio
from src.domain.role import EmploymentType
from src.domain.tenant_config import HourAllocation, PayScale, ServiceRate, TaxBracket


class SqlAlchemyTenantConfigRepository(TenantConfigRepository):
    """
    Keys are returned as the same types the provisioning baseline builds
    (enum members, Decimal), so set differences line up.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def pay_scale_keys(self, tenant_id: int) -> Set[Tuple[int, int, EmploymentType]]:
        stmt = select(PayScale.level, PayScale.pay_point, PayScale.employment_type).where(
            PayScale.tenant_id == tenant_id
        )
        result = await self.session.execute(stmt)
        return {(level, pay_point, EmploymentType(employment_type)) for level, pay_point, employment_type in result.all()}

    async def tax_bracket_keys(self, tenant_id: int, tax_year: str) -> Set:
        stmt = select(TaxBracket.min_income).where(
            TaxBracket.tenant_id == tenant_id,
            TaxBracket.tax_year == tax_year,
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def hour_allocation_staff_ids(self, tenant_id: int, allocation_period: str) -> Set[int]:
        stmt = select(HourAllocation.staff_id).where(
            HourAllocation.tenant_id == tenant_id,
            HourAllocation.allocation_period == allocation_period,
        )
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def service_rate_keys(self, tenant_id: int) -> Set[Tuple[ShiftType, StaffRatio]]:
        stmt = select(ServiceRate.shift_type, ServiceRate.staff_ratio).where(
            ServiceRate.tenant_id == tenant_id
        )
        result = await self.session.execute(stmt)
        return {(ShiftType(shift_type), StaffRatio(staff_ratio)) for shift_type, staff_ratio in result.all()}

    async def clients_without_budget(self, tenant_id: int) -> List[Client]:
        has_budget = (
            select(Budget.id)
            .where(Budget.client_id == Client.id, Budget.tenant_id == tenant_id)
            .exists()
        )
        stmt = (
            select(Client)
            .where(
                Client.tenant_id == tenant_id,
                Client.is_active == True,  # noqa: E712
                ~has_budget,
            )
            .order_by(Client.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_service_rate(
        self, tenant_id: int, shift_type: ShiftType, staff_ratio: StaffRatio
    ) -> Optional[ServiceRate]:
        stmt = select(ServiceRate).where(
            ServiceRate.tenant_id == tenant_id,
            ServiceRate.shift_type == ShiftType(shift_type),
            ServiceRate.staff_ratio == StaffRatio(staff_ratio),
            ServiceRate.is_active == True,  # noqa: E712
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_all(self, rows: Iterable) -> int:
        rows = list(rows)
        if not rows:
            return 0
        self.session.add_all(rows)
        await self.session.flush()
        return len(rows)
