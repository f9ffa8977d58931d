"""ORM guards for write-once tables

Ledger transactions and activity log rows are append-only. Flushing an UPDATE
or DELETE for them raises ImmutableRecordError before SQL is emitted.
"""

from sqlalchemy import event
from src.domain.activity_log import ActivityLog
from src.domain.budget_transaction import BudgetTransaction
from src.domain.errors import ImmutableRecordError

WRITE_ONCE_MODELS = (BudgetTransaction, ActivityLog)

_registered = False


def _reject_update(mapper, connection, target):
    raise ImmutableRecordError(type(target).__name__, target.id)


def _reject_delete(mapper, connection, target):
    raise ImmutableRecordError(type(target).__name__, target.id)


def register_immutability_listeners() -> None:
    """Attach before_update/before_delete guards. Safe to call repeatedly."""
    global _registered
    if _registered:
        return
    for model in WRITE_ONCE_MODELS:
        event.listen(model, "before_update", _reject_update)
        event.listen(model, "before_delete", _reject_delete)
    _registered = True


register_immutability_listeners()
