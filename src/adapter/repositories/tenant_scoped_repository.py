"""SQLAlchemy implementation of TenantScopedRepository

Every statement built here carries a tenant_id predicate. Writes load the
target row by id alone first so a cross-tenant attempt can be told apart
from a missing row in the logs, while callers see the same None for both.
"""

import logging
from typing import Any, Dict, List, Optional
from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.tenant_scoped_repository import (
    ENTITY_KINDS,
    PROTECTED_FIELDS,
    TenantScopedRepository,
)
from src.domain.base import BaseModel, utcnow
from src.domain.budget import Budget
from src.domain.errors import CrossTenantAccessDenied
from src.domain.tenant import Tenant
from src.domain.tenant_context import TenantContext

logger = logging.getLogger(__name__)
security_logger = logging.getLogger("security.audit")


class SqlAlchemyTenantScopedRepository(TenantScopedRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list(
        self,
        tenant_id: int,
        kind: str,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[BaseModel]:
        model = self._model(kind)
        stmt = select(model).where(model.tenant_id == tenant_id)
        for field, value in (filters or {}).items():
            if field == "tenant_id":
                continue
            stmt = stmt.where(getattr(model, field) == value)
        stmt = stmt.order_by(model.id).limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get(self, tenant_id: int, kind: str, entity_id: int) -> Optional[BaseModel]:
        model = self._model(kind)
        stmt = select(model).where(model.id == entity_id, model.tenant_id == tenant_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, tenant_id: int, kind: str, values: Dict[str, Any]) -> BaseModel:
        model = self._model(kind, for_write=True)
        self._reject_protected(values)
        entity = model(**values)
        entity.tenant_id = tenant_id
        self.session.add(entity)
        await self._flush(model)
        await self.session.refresh(entity)
        return entity

    async def update(
        self, tenant_id: int, kind: str, entity_id: int, values: Dict[str, Any]
    ) -> Optional[BaseModel]:
        model = self._model(kind, for_write=True)
        self._reject_protected(values)

        existing = await self._load_owned(model, tenant_id, entity_id)
        if existing is None:
            return None

        values = dict(values)
        if "updated_at" in model.model_fields:
            values["updated_at"] = utcnow()

        stmt = (
            update(model)
            .where(model.id == entity_id, model.tenant_id == tenant_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.session.execute(stmt)
        except IntegrityError as e:
            raise ValueError(f"{model.__tablename__} update conflicts with an existing row") from e
        if result.rowcount != 1:
            return None

        await self.session.refresh(existing)
        return existing

    async def deactivate(self, tenant_id: int, kind: str, entity_id: int) -> Optional[BaseModel]:
        return await self.update(tenant_id, kind, entity_id, {"is_active": False})

    async def billing_summary(self, context: TenantContext) -> List[Dict[str, Any]]:
        if not context.can_read_across_tenants:
            security_logger.warning(
                f"Cross-tenant read denied: user_id={context.user_id} "
                f"tenant_id={context.tenant_id} role={context.role.value}"
            )
            raise CrossTenantAccessDenied(context.user_id, context.role.value)

        stmt = (
            select(
                Tenant.id,
                Tenant.name,
                func.count(Budget.id),
                func.coalesce(func.sum(Budget.total_allocation), 0),
                func.coalesce(func.sum(Budget.current_spent), 0),
            )
            .select_from(Tenant)
            .outerjoin(Budget, Budget.tenant_id == Tenant.id)
            .group_by(Tenant.id, Tenant.name)
            .order_by(Tenant.id)
        )
        result = await self.session.execute(stmt)
        return [
            {
                "tenant_id": tenant_id,
                "tenant_name": name,
                "budget_count": budget_count,
                "total_allocation": total_allocation,
                "current_spent": current_spent,
            }
            for tenant_id, name, budget_count, total_allocation, current_spent in result.all()
        ]

    async def _load_owned(self, model, tenant_id: int, entity_id: int) -> Optional[BaseModel]:
        result = await self.session.execute(select(model).where(model.id == entity_id))
        existing = result.scalar_one_or_none()
        if existing is None:
            return None
        if existing.tenant_id != tenant_id:
            security_logger.warning(
                f"Cross-tenant write blocked: {model.__tablename__} id={entity_id} "
                f"owned_by={existing.tenant_id} requested_by={tenant_id}"
            )
            return None
        return existing

    async def _flush(self, model) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ValueError(f"{model.__tablename__} row conflicts with an existing row") from e

    @staticmethod
    def _model(kind: str, for_write: bool = False):
        entity_kind = ENTITY_KINDS.get(kind)
        if entity_kind is None:
            raise ValueError(f"Unknown entity kind: {kind}")
        if for_write and not entity_kind.writable:
            raise ValueError(f"Entity kind {kind} is read-only")
        return entity_kind.model

    @staticmethod
    def _reject_protected(values: Dict[str, Any]) -> None:
        protected = PROTECTED_FIELDS.intersection(values)
        if protected:
            raise ValueError(f"Fields cannot be written: {', '.join(sorted(protected))}")
