from typing import List, Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.user_repository import UserRepository
from src.domain.role import Role
from src.domain.user import User

STAFF_ROLES = [role for role in Role if role.is_staff]


class SqlAlchemyUserRepository(UserRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def list_active_staff(self, tenant_id: int) -> List[User]:
        stmt = (
            select(User)
            .where(
                User.tenant_id == tenant_id,
                User.is_active == True,  # noqa: E712
                User.role.in_(STAFF_ROLES),
            )
            .order_by(User.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user
