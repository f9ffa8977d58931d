from .tenant_repository import TenantRepository
from .user_repository import UserRepository
from .budget_repository import BudgetRepository
from .budget_transaction_repository import BudgetTransactionRepository
from .activity_log_repository import ActivityLogRepository
from .tenant_config_repository import TenantConfigRepository
from .tenant_scoped_repository import TenantScopedRepository, ENTITY_KINDS, PROTECTED_FIELDS

__all__ = [
    "TenantRepository",
    "UserRepository",
    "BudgetRepository",
    "BudgetTransactionRepository",
    "ActivityLogRepository",
    "TenantConfigRepository",
    "TenantScopedRepository",
    "ENTITY_KINDS",
    "PROTECTED_FIELDS",
]
