import pytest
from unittest.mock import AsyncMock, MagicMock

from src.domain.role import Role
from src.domain.tenant_context import TenantContext


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def worker_context():
    """Support worker of tenant 1"""
    return TenantContext(tenant_id=1, user_id=10, role=Role.SUPPORT_WORKER)


@pytest.fixture
def admin_context():
    """Admin of tenant 1"""
    return TenantContext(tenant_id=1, user_id=11, role=Role.ADMIN)


@pytest.fixture
def console_context():
    """Console manager homed in tenant 1"""
    return TenantContext(tenant_id=1, user_id=99, role=Role.CONSOLE_MANAGER)
