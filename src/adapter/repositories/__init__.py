from .tenant_repository import SqlAlchemyTenantRepository
from .user_repository import SqlAlchemyUserRepository
from .budget_repository import SqlAlchemyBudgetRepository
from .budget_transaction_repository import SqlAlchemyBudgetTransactionRepository
from .activity_log_repository import SqlAlchemyActivityLogRepository
from .tenant_config_repository import SqlAlchemyTenantConfigRepository
from .tenant_scoped_repository import SqlAlchemyTenantScopedRepository

__all__ = [
    "SqlAlchemyTenantRepository",
    "SqlAlchemyUserRepository",
    "SqlAlchemyBudgetRepository",
    "SqlAlchemyBudgetTransactionRepository",
    "SqlAlchemyActivityLogRepository",
    "SqlAlchemyTenantConfigRepository",
    "SqlAlchemyTenantScopedRepository",
]
