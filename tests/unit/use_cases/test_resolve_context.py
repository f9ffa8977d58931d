"""Unit tests for ResolveTenantContext use case"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.session_tokens import issue_token
from src.app.use_cases.tenancy.resolve_context import ResolveTenantContext
from src.domain.role import Capability, Role
from src.domain.user import User


@pytest.fixture
def mock_user_repo():
    return MagicMock()


@pytest.fixture
def resolve_use_case(mock_user_repo):
    return ResolveTenantContext(user_repo=mock_user_repo)


def make_user(**overrides):
    fields = dict(id=10, tenant_id=1, username="sam", full_name="Sam Lee", role=Role.COORDINATOR)
    fields.update(overrides)
    return User(**fields)


@pytest.mark.asyncio
class TestResolveTenantContext:

    async def test_context_comes_from_user_row(self, resolve_use_case, mock_user_repo):
        """
        Given: A valid token for an active coordinator of tenant 1
        When: The context is resolved
        Then: tenant, user and role are read from the user row
        """
        mock_user_repo.get_by_id = AsyncMock(return_value=make_user())

        result = await resolve_use_case.execute(issue_token(10))

        assert result.is_ok()
        assert result.value.tenant_id == 1
        assert result.value.user_id == 10
        assert result.value.role == Role.COORDINATOR
        assert result.value.capability == Capability.TENANT_SCOPED_ONLY
        mock_user_repo.get_by_id.assert_called_once_with(10)

    async def test_console_manager_gets_cross_tenant_capability(self, resolve_use_case, mock_user_repo):
        mock_user_repo.get_by_id = AsyncMock(return_value=make_user(role=Role.CONSOLE_MANAGER))

        result = await resolve_use_case.execute(issue_token(10))

        assert result.value.capability == Capability.CROSS_TENANT_READ

    async def test_missing_token(self, resolve_use_case, mock_user_repo):
        mock_user_repo.get_by_id = AsyncMock()

        result = await resolve_use_case.execute(None)

        assert result.error.code == "UNAUTHENTICATED"
        mock_user_repo.get_by_id.assert_not_called()

    async def test_malformed_token(self, resolve_use_case):
        result = await resolve_use_case.execute("not-a-token")

        assert result.error.code == "UNAUTHENTICATED"

    async def test_expired_token(self, resolve_use_case):
        result = await resolve_use_case.execute(issue_token(10, ttl_seconds=-60))

        assert result.error.code == "UNAUTHENTICATED"

    async def test_token_signed_with_other_key(self, resolve_use_case):
        result = await resolve_use_case.execute(issue_token(10, secret_key="someone-else"))

        assert result.error.code == "UNAUTHENTICATED"

    async def test_inactive_user(self, resolve_use_case, mock_user_repo):
        mock_user_repo.get_by_id = AsyncMock(return_value=make_user(is_active=False))

        result = await resolve_use_case.execute(issue_token(10))

        assert result.error.code == "UNAUTHENTICATED"

    async def test_user_without_tenant(self, resolve_use_case, mock_user_repo):
        """
        Given: A user row with no tenant_id
        When: The context is resolved
        Then: NO_TENANT_CONTEXT
        """
        mock_user_repo.get_by_id = AsyncMock(return_value=make_user(tenant_id=None))

        result = await resolve_use_case.execute(issue_token(10))

        assert result.error.code == "NO_TENANT_CONTEXT"
