from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.tenant_repository import TenantRepository
from src.domain.tenant import Tenant


class SqlAlchemyTenantRepository(TenantRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, tenant_id: int) -> Optional[Tenant]:
        result = await self.session.execute(select(Tenant).where(Tenant.id == tenant_id))
        return result.scalar_one_or_none()

    async def list_active(self) -> List[Tenant]:
        stmt = select(Tenant).where(Tenant.is_active == True).order_by(Tenant.id)  # noqa: E712
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, tenant: Tenant) -> Tenant:
        self.session.add(tenant)
        await self.session.flush()
        await self.session.refresh(tenant)
        return tenant
