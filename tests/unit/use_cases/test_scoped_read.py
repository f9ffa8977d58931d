"""Unit tests for ScopedRead use case"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.tenancy.scoped_read import MAX_PAGE_SIZE, ScopedRead
from src.domain.budget import BudgetCategory
from src.domain.client import Client


@pytest.fixture
def mock_scoped_repo():
    repo = MagicMock()
    repo.list = AsyncMock(return_value=[])
    return repo


@pytest.mark.asyncio
class TestScopedRead:

    async def test_list_is_pinned_to_context_tenant(self, mock_scoped_repo, worker_context):
        """
        Given: A tenant-scoped caller asking for tenant 2
        When: Clients are listed
        Then: The repository is queried for tenant 1 only
        """
        result = await ScopedRead(mock_scoped_repo).execute(
            worker_context, "client", filters={"tenant_id": "2"}
        )

        assert result.is_ok()
        assert result.value.tenant_id == 1
        mock_scoped_repo.list.assert_called_once_with(1, "client", {}, limit=100, offset=0)

    async def test_console_manager_reads_named_tenant(self, mock_scoped_repo, console_context):
        await ScopedRead(mock_scoped_repo).execute(console_context, "client", filters={"tenant_id": "2"})

        assert mock_scoped_repo.list.call_args[0][0] == 2

    async def test_filters_are_coerced_to_column_types(self, mock_scoped_repo, worker_context):
        await ScopedRead(mock_scoped_repo).execute(
            worker_context, "budget", filters={"client_id": "3", "category": "SIL"}
        )

        filters = mock_scoped_repo.list.call_args[0][2]
        assert filters == {"client_id": 3, "category": BudgetCategory.SIL}

    async def test_unknown_filter(self, mock_scoped_repo, worker_context):
        result = await ScopedRead(mock_scoped_repo).execute(worker_context, "client", filters={"salary": "1"})

        assert result.error.code == "VALIDATION_ERROR"
        mock_scoped_repo.list.assert_not_called()

    async def test_page_size_is_capped(self, mock_scoped_repo, worker_context):
        result = await ScopedRead(mock_scoped_repo).execute(worker_context, "client", limit=10_000)

        assert result.value.limit == MAX_PAGE_SIZE

    async def test_foreign_row_reads_as_missing(self, mock_scoped_repo, worker_context):
        mock_scoped_repo.get = AsyncMock(return_value=None)

        result = await ScopedRead(mock_scoped_repo).execute(worker_context, "client", entity_id=7)

        assert result.error.code == "NOT_FOUND_OR_FORBIDDEN"
        mock_scoped_repo.get.assert_called_once_with(1, "client", 7)

    async def test_get_returns_record(self, mock_scoped_repo, worker_context):
        mock_scoped_repo.get = AsyncMock(
            return_value=Client(id=7, tenant_id=1, first_name="Ana", last_name="Diaz", ndis_number="1")
        )

        result = await ScopedRead(mock_scoped_repo).execute(worker_context, "client", entity_id=7)

        assert result.value.id == 7
        assert result.value.kind == "client"

    async def test_unknown_kind(self, mock_scoped_repo, worker_context):
        result = await ScopedRead(mock_scoped_repo).execute(worker_context, "invoice")

        assert result.error.code == "NOT_FOUND_OR_FORBIDDEN"
