"""ScopedWrite Use Case

Creates, updates and soft-deletes tenant-owned rows. Each successful mutation
writes an ActivityLog row in the same transaction.
"""

import logging
from typing import Any, Dict, Optional
from pydantic import ValidationError
from libs.result import Result, Return, Error
from src.app.repositories.activity_log_repository import ActivityLogRepository
from src.app.repositories.tenant_scoped_repository import (
    ENTITY_KINDS,
    PROTECTED_FIELDS,
    TenantScopedRepository,
)
from src.app.repositories.user_repository import UserRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.activity_log import ActivityLog
from src.domain.errors import ErrorCode
from src.domain.tenant_context import TenantContext
from .boundary_guard import BoundaryGuard
from .dtos import ScopedRecordDTO, WriteAction, to_record_dto
from .schemas import CREATE_SCHEMAS, UPDATE_SCHEMAS

logger = logging.getLogger(__name__)


class ScopedWrite:
    """
    Use Case: Mutate a tenant-owned row

    Business Rules:
    1. The payload passes the boundary guard before anything else
    2. tenant_id, id and ledger-derived fields cannot be written
    3. References (budget.client_id, hour_allocation.staff_id) must belong
       to the same tenant
    4. Update and deactivate on a foreign or missing row are NOT_FOUND_OR_FORBIDDEN
    5. Only successful mutations are logged; failures roll back
    6. Budgets, hour allocations and rate tables are writable only by the
       roles Role.can_write_records admits
    """

    def __init__(
        self,
        uow: UnitOfWork,
        scoped_repo: TenantScopedRepository,
        activity_repo: ActivityLogRepository,
        user_repo: Optional[UserRepository] = None,
        guard: Optional[BoundaryGuard] = None,
    ):
        self.uow = uow
        self.scoped_repo = scoped_repo
        self.activity_repo = activity_repo
        self.user_repo = user_repo
        self.guard = guard or BoundaryGuard()

    async def execute(
        self,
        context: TenantContext,
        kind: str,
        payload: Optional[Dict[str, Any]],
        entity_id: Optional[int] = None,
        action: WriteAction = WriteAction.CREATE,
    ) -> Result[ScopedRecordDTO]:
        entity_kind = ENTITY_KINDS.get(kind)
        if entity_kind is None:
            return Return.err(
                Error(code=ErrorCode.NOT_FOUND_OR_FORBIDDEN, message=f"Unknown record kind '{kind}'")
            )
        if not entity_kind.writable:
            return Return.err(
                Error(code=ErrorCode.VALIDATION_ERROR, message=f"Records of kind '{kind}' are read-only")
            )
        if not context.role.can_write_records(kind):
            return Return.err(
                Error(
                    code=ErrorCode.FORBIDDEN,
                    message=f"Role {context.role.value} cannot write {kind} records",
                )
            )

        guarded = self.guard.check(context, payload, creating=action == WriteAction.CREATE)
        if guarded.is_err():
            return guarded
        values = dict(guarded.value)
        tenant_id = context.effective_tenant(values.pop("tenant_id", None))

        protected = PROTECTED_FIELDS.intersection(values)
        if protected:
            return Return.err(
                Error(
                    code=ErrorCode.VALIDATION_ERROR,
                    message=f"Fields cannot be written: {', '.join(sorted(protected))}",
                )
            )

        try:
            values = self._validate(kind, action, values)
        except ValidationError as e:
            return Return.err(
                Error(code=ErrorCode.VALIDATION_ERROR, message=f"Invalid {kind} payload", reason=str(e))
            )

        try:
            if action == WriteAction.CREATE:
                reference_error = await self._check_references(tenant_id, kind, values)
                if reference_error is not None:
                    await self.uow.rollback()
                    return Return.err(reference_error)
                entity = await self.scoped_repo.create(tenant_id, kind, values)
            elif action == WriteAction.UPDATE:
                entity = await self.scoped_repo.update(tenant_id, kind, entity_id, values)
            else:
                entity = await self.scoped_repo.deactivate(tenant_id, kind, entity_id)

            if entity is None:
                await self.uow.rollback()
                return Return.err(
                    Error(
                        code=ErrorCode.NOT_FOUND_OR_FORBIDDEN,
                        message=f"{kind} {entity_id} not found",
                    )
                )

            await self.activity_repo.create(
                ActivityLog(
                    tenant_id=tenant_id,
                    user_id=context.user_id,
                    action=f"{kind}.{action.value}",
                    resource_type=kind,
                    resource_id=str(entity.id),
                    description=self._describe(action, values),
                )
            )
            response = to_record_dto(kind, entity)
            await self.uow.commit()
            return Return.ok(response)

        except ValueError as e:
            await self.uow.rollback()
            return Return.err(
                Error(code=ErrorCode.VALIDATION_ERROR, message=f"Invalid {kind} write", reason=str(e))
            )
        except Exception as e:
            await self.uow.rollback()
            logger.error(f"Scoped write of {kind} failed for tenant {tenant_id}: {e}")
            return Return.err(
                Error(code="SCOPED_WRITE_FAILED", message=f"Failed to write {kind}", reason=str(e))
            )

    @staticmethod
    def _validate(kind: str, action: WriteAction, values: Dict[str, Any]) -> Dict[str, Any]:
        if action == WriteAction.DEACTIVATE:
            return {}
        if action == WriteAction.CREATE:
            return CREATE_SCHEMAS[kind].model_validate(values).model_dump()
        return UPDATE_SCHEMAS[kind].model_validate(values).model_dump(exclude_unset=True)

    async def _check_references(self, tenant_id: int, kind: str, values: Dict[str, Any]) -> Optional[Error]:
        if kind == "budget":
            client = await self.scoped_repo.get(tenant_id, "client", values["client_id"])
            if client is None:
                return Error(
                    code=ErrorCode.NOT_FOUND_OR_FORBIDDEN,
                    message=f"client {values['client_id']} not found",
                )
        if kind == "hour_allocation" and self.user_repo is not None:
            staff = await self.user_repo.get_by_id(values["staff_id"])
            if staff is None or staff.tenant_id != tenant_id:
                return Error(
                    code=ErrorCode.NOT_FOUND_OR_FORBIDDEN,
                    message=f"staff member {values['staff_id']} not found",
                )
        return None

    @staticmethod
    def _describe(action: WriteAction, values: Dict[str, Any]) -> str:
        if action == WriteAction.DEACTIVATE:
            return "Deactivated"
        fields = ", ".join(sorted(values)) or "nothing"
        return f"{action.value.capitalize()}d fields: {fields}"
