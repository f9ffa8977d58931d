"""ScopedRead Use Case

Lists or fetches tenant-owned rows through the tenant-scoped repository.
"""

from typing import Any, Dict, Optional, Union
from pydantic import TypeAdapter, ValidationError
from libs.result import Result, Return, Error
from src.app.repositories.tenant_scoped_repository import ENTITY_KINDS, TenantScopedRepository
from src.domain.errors import ErrorCode
from src.domain.tenant_context import TenantContext
from .dtos import ScopedListDTO, ScopedRecordDTO, to_record_dto

MAX_PAGE_SIZE = 500


class ScopedRead:
    """
    Use Case: Read tenant-owned rows

    Business Rules:
    1. The tenant predicate is always the context tenant, except for
       CROSS_TENANT_READ callers that name another tenant
    2. A row of another tenant reads exactly like a missing row
    3. Filters may only name columns of the entity kind
    """

    def __init__(self, scoped_repo: TenantScopedRepository):
        self.scoped_repo = scoped_repo

    async def execute(
        self,
        context: TenantContext,
        kind: str,
        filters: Optional[Dict[str, Any]] = None,
        entity_id: Optional[int] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Result[Union[ScopedListDTO, ScopedRecordDTO]]:
        entity_kind = ENTITY_KINDS.get(kind)
        if entity_kind is None:
            return Return.err(
                Error(code=ErrorCode.NOT_FOUND_OR_FORBIDDEN, message=f"Unknown record kind '{kind}'")
            )

        filters = dict(filters or {})
        tenant_id = context.effective_tenant(filters.pop("tenant_id", None))

        try:
            if entity_id is not None:
                entity = await self.scoped_repo.get(tenant_id, kind, entity_id)
                if entity is None:
                    return Return.err(
                        Error(
                            code=ErrorCode.NOT_FOUND_OR_FORBIDDEN,
                            message=f"{kind} {entity_id} not found",
                        )
                    )
                return Return.ok(to_record_dto(kind, entity))

            coerced = self._coerce_filters(entity_kind.model, filters)
        except ValueError as e:
            return Return.err(
                Error(code=ErrorCode.VALIDATION_ERROR, message="Invalid filter", reason=str(e))
            )

        limit = max(1, min(int(limit), MAX_PAGE_SIZE))
        offset = max(0, int(offset))
        rows = await self.scoped_repo.list(tenant_id, kind, coerced, limit=limit, offset=offset)
        return Return.ok(
            ScopedListDTO(
                kind=kind,
                tenant_id=tenant_id,
                items=[to_record_dto(kind, row) for row in rows],
                limit=limit,
                offset=offset,
            )
        )

    @staticmethod
    def _coerce_filters(model, filters: Dict[str, Any]) -> Dict[str, Any]:
        coerced = {}
        for field, raw in filters.items():
            model_field = model.model_fields.get(field)
            if model_field is None:
                raise ValueError(f"Unknown filter field '{field}'")
            try:
                coerced[field] = TypeAdapter(model_field.annotation).validate_python(raw)
            except ValidationError as e:
                raise ValueError(f"Invalid value for '{field}': {raw!r}") from e
        return coerced
