"""ProvisionTenant Use Case

Onboards a tenant: the tenant row, its first Admin user and the complete
baseline configuration commit together.
"""

import logging
from libs.result import Result, Return, Error
from src.app.repositories.activity_log_repository import ActivityLogRepository
from src.app.repositories.tenant_repository import TenantRepository
from src.app.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.activity_log import ActivityLog
from src.domain.errors import ErrorCode
from src.domain.role import EmploymentType, Role
from src.domain.tenant import Tenant
from src.domain.tenant_context import TenantContext
from src.domain.user import User
from .dtos import ProvisionTenantCommandDTO, ProvisionTenantResponseDTO
from .provisioning_engine import ProvisioningEngine

logger = logging.getLogger(__name__)


class ProvisionTenant:
    """
    Use Case: Create a new tenant with its baseline

    Business Rules:
    1. Only CROSS_TENANT_READ callers (ConsoleManager) may onboard tenants
    2. Usernames are globally unique
    3. All-or-nothing: any failure leaves no tenant behind
    """

    def __init__(
        self,
        uow: UnitOfWork,
        tenant_repo: TenantRepository,
        user_repo: UserRepository,
        activity_repo: ActivityLogRepository,
        engine: ProvisioningEngine,
    ):
        self.uow = uow
        self.tenant_repo = tenant_repo
        self.user_repo = user_repo
        self.activity_repo = activity_repo
        self.engine = engine

    async def execute(
        self, context: TenantContext, command: ProvisionTenantCommandDTO
    ) -> Result[ProvisionTenantResponseDTO]:
        if not context.can_read_across_tenants:
            return Return.err(
                Error(code=ErrorCode.FORBIDDEN, message="Only console managers may provision tenants")
            )

        try:
            if await self.user_repo.get_by_username(command.admin_username):
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.VALIDATION_ERROR,
                        message=f"Username {command.admin_username} is already taken",
                    )
                )

            tenant = await self.tenant_repo.create(Tenant(name=command.name))
            admin = await self.user_repo.create(
                User(
                    tenant_id=tenant.id,
                    username=command.admin_username,
                    full_name=command.admin_full_name,
                    role=Role.ADMIN,
                    employment_type=EmploymentType.FULLTIME,
                )
            )
            await self.activity_repo.create(
                ActivityLog(
                    tenant_id=tenant.id,
                    user_id=context.user_id,
                    action="tenant.provisioned",
                    resource_type="tenant",
                    resource_id=str(tenant.id),
                    description=f"Provisioned {tenant.name} with admin {admin.username}",
                )
            )

            plan = await self.engine.plan(tenant.id)
            categories = await self.engine.apply(plan)
            await self.uow.commit()

            logger.info(f"Provisioned tenant {tenant.id} ({tenant.name}) with {plan.row_count} baseline rows")
            return Return.ok(
                ProvisionTenantResponseDTO(
                    tenant_id=tenant.id,
                    tenant_name=tenant.name,
                    admin_user_id=admin.id,
                    categories=categories,
                    rows_created=plan.row_count,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Provisioning tenant {command.name} failed: {e}")
            return Return.err(
                Error(code="PROVISION_TENANT_FAILED", message="Failed to provision tenant", reason=str(e))
            )
