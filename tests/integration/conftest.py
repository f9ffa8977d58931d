import itertools
import pytest
import pytest_asyncio
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlmodel import SQLModel, select

import src.domain  # noqa: F401  registers every table on SQLModel.metadata
from config import ApplicationConfig
from src.app.services.session_tokens import issue_token
from src.depends import build_engine, build_session_factory, get_session, get_session_factory
from src.domain import Budget, BudgetCategory, Client, Role, Tenant, User
from src.domain.role import EmploymentType


class Seeder:
    """
    Writes and reads test rows, each in its own short-lived session

    On SQLite an open transaction holds the database write lock, so no
    session is kept open between calls.
    """

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._usernames = itertools.count(1)

    async def add(self, entity):
        async with self.session_factory() as session:
            session.add(entity)
            await session.commit()
            return entity

    async def tenant(self, name: str) -> int:
        return (await self.add(Tenant(name=name))).id

    async def user(
        self,
        tenant_id,
        role: Role = Role.SUPPORT_WORKER,
        username: str = None,
        is_active: bool = True,
    ) -> int:
        user = User(
            tenant_id=tenant_id,
            username=username or f"{role.value.lower()}-{next(self._usernames)}",
            full_name=f"{role.value} of tenant {tenant_id}",
            role=role,
            employment_type=EmploymentType.FULLTIME,
            is_active=is_active,
        )
        return (await self.add(user)).id

    async def client(self, tenant_id: int, ndis_number: str = "430000001") -> int:
        client = Client(tenant_id=tenant_id, first_name="Ana", last_name="Diaz", ndis_number=ndis_number)
        return (await self.add(client)).id

    async def budget(
        self,
        tenant_id: int,
        client_id: int,
        category: BudgetCategory = BudgetCategory.SIL,
        total_allocation: str = "1000.00",
    ) -> int:
        budget = Budget(
            tenant_id=tenant_id,
            client_id=client_id,
            category=category,
            total_allocation=Decimal(total_allocation),
        )
        return (await self.add(budget)).id

    async def get(self, model, entity_id):
        async with self.session_factory() as session:
            return await session.get(model, entity_id)

    async def all(self, model, *where):
        async with self.session_factory() as session:
            result = await session.execute(select(model).where(*where))
            return list(result.scalars().all())


@pytest.fixture
def auth():
    """Bearer header for a user id"""
    def _auth(user_id: int) -> dict:
        return {"Authorization": f"Bearer {issue_token(user_id)}"}
    return _auth


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """File-backed SQLite test database, recreated per test"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'care_ledger_test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def seed(session_factory):
    return Seeder(session_factory)


@pytest_asyncio.fixture
async def client(session_factory):
    """Create test client with one fresh database session per request"""
    from src.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_session():
        async with session_factory() as session:
            yield session

    def override_get_session_factory():
        return session_factory

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_factory] = override_get_session_factory

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def two_tenants(seed):
    """Tenants A and B, each with a support worker, an admin, a client and a SIL budget"""
    data = {}
    for key, name in (("a", "Harbour Care"), ("b", "Ridge Support")):
        tenant_id = await seed.tenant(name)
        client_id = await seed.client(tenant_id)
        data[key] = {
            "tenant_id": tenant_id,
            "worker_id": await seed.user(tenant_id, Role.SUPPORT_WORKER, username=f"worker.{key}"),
            "admin_id": await seed.user(tenant_id, Role.ADMIN, username=f"admin.{key}"),
            "client_id": client_id,
            "budget_id": await seed.budget(tenant_id, client_id),
        }
    data["console_id"] = await seed.user(data["a"]["tenant_id"], Role.CONSOLE_MANAGER, username="console")
    return data
