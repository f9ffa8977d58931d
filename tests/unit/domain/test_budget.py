"""Unit tests for Budget and BudgetTransaction entities"""

from datetime import timedelta
from decimal import Decimal

from src.domain.activity_log import ActivityLog
from src.domain.base import utcnow
from src.domain.budget import Budget, BudgetCategory
from src.domain.client import Client
from src.domain.budget_transaction import BudgetTransaction, TransactionType


def make_budget(**overrides):
    fields = dict(
        id=5,
        tenant_id=1,
        client_id=3,
        category=BudgetCategory.SIL,
        total_allocation=Decimal("1000.00"),
        current_spent=Decimal("900.00"),
    )
    fields.update(overrides)
    return Budget(**fields)


class TestBudget:

    def test_remaining(self):
        assert make_budget().remaining == Decimal("100.00")

    def test_would_exceed(self):
        budget = make_budget()
        assert not budget.would_exceed(Decimal("100.00"))
        assert budget.would_exceed(Decimal("100.01"))


class TestBudgetTransaction:

    def test_for_budget_copies_tenant_from_budget(self):
        """
        Given: A budget owned by tenant 1
        When: An entry is built for it while the caller passes tenant_id=2
        Then: The entry carries tenant 1 and the budget's id
        """
        transaction = BudgetTransaction.for_budget(
            make_budget(),
            tenant_id=2,
            source_event_id="shift-1",
            transaction_type=TransactionType.DEDUCTION,
            amount=Decimal("75.50"),
        )

        assert transaction.tenant_id == 1
        assert transaction.budget_id == 5
        assert transaction.amount == Decimal("75.50")


class TestTimestamps:

    def test_utcnow_is_timezone_aware(self):
        assert utcnow().utcoffset() == timedelta(0)

    def test_timestamp_columns_store_timezone(self):
        for model in (Budget, BudgetTransaction, ActivityLog, Client):
            assert model.__table__.c.created_at.type.timezone is True
        assert Budget.__table__.c.updated_at.type.timezone is True

    def test_new_rows_default_to_aware_timestamps(self):
        assert make_budget().created_at.tzinfo is not None
