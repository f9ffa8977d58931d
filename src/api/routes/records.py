"""Tenant-scoped record API Routes

Generic CRUD over tenant-owned entity kinds. Every read and write goes
through the tenant-scoped repository; every mutation passes the boundary
guard first.
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.activity_log_repository import SqlAlchemyActivityLogRepository
from src.adapter.repositories.tenant_scoped_repository import SqlAlchemyTenantScopedRepository
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.dependencies import enforce_tenant_boundary, get_tenant_context
from src.api.error import client_error_for
from src.app.use_cases.tenancy import ScopedListDTO, ScopedRead, ScopedRecordDTO, ScopedWrite, WriteAction
from src.depends import get_session
from src.domain.tenant_context import TenantContext

router = APIRouter(prefix="/records", tags=["Records"])

PAGING_PARAMS = {"limit", "offset"}


def _scoped_write(session: AsyncSession) -> ScopedWrite:
    return ScopedWrite(
        uow=SqlAlchemyUnitOfWork(session),
        scoped_repo=SqlAlchemyTenantScopedRepository(session),
        activity_repo=SqlAlchemyActivityLogRepository(session),
        user_repo=SqlAlchemyUserRepository(session),
    )


@router.get("/{kind}", response_model=ScopedListDTO)
async def list_records(
    kind: str,
    request: Request,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """
    List rows of one entity kind in the caller's tenant.

    Any other query parameter is an equality filter on a column of the kind,
    e.g. `/records/budget?client_id=42`. Console managers may add `tenant_id`
    to read another tenant.

    **Returns:**
    - 200: Page of records
    - 400: Unknown filter column or bad filter value
    - 404: Unknown kind
    """
    filters: Dict[str, Any] = {
        key: value for key, value in request.query_params.items() if key not in PAGING_PARAMS
    }
    result = await ScopedRead(SqlAlchemyTenantScopedRepository(session)).execute(
        context, kind, filters=filters, limit=limit, offset=offset
    )
    if result.is_err():
        raise client_error_for(result.error)
    return result.value


@router.get("/{kind}/{entity_id}", response_model=ScopedRecordDTO)
async def get_record(
    kind: str,
    entity_id: int,
    tenant_id: Optional[int] = Query(default=None),
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """
    Fetch one row. A row owned by another tenant answers 404 exactly like a
    missing one.
    """
    filters = {"tenant_id": tenant_id} if tenant_id is not None else None
    result = await ScopedRead(SqlAlchemyTenantScopedRepository(session)).execute(
        context, kind, filters=filters, entity_id=entity_id
    )
    if result.is_err():
        raise client_error_for(result.error)
    return result.value


@router.post("/{kind}", response_model=ScopedRecordDTO, status_code=status.HTTP_201_CREATED)
async def create_record(
    kind: str,
    payload: Dict[str, Any] = Depends(enforce_tenant_boundary),
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """
    Create a row. A body without `tenant_id` is assigned the caller's tenant;
    a body naming another tenant is rejected with 403 TENANT_BOUNDARY_VIOLATION.

    **Example request (budget):**
    ```json
    {"client_id": 42, "category": "SIL", "total_allocation": "50000.00"}
    ```
    """
    result = await _scoped_write(session).execute(context, kind, payload, action=WriteAction.CREATE)
    if result.is_err():
        raise client_error_for(result.error)
    return result.value


@router.patch("/{kind}/{entity_id}", response_model=ScopedRecordDTO)
async def update_record(
    kind: str,
    entity_id: int,
    payload: Dict[str, Any] = Depends(enforce_tenant_boundary),
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """
    Update a row of the caller's tenant. `tenant_id`, `id`, `current_spent`
    and `is_over_allocated` cannot be written.
    """
    result = await _scoped_write(session).execute(
        context, kind, payload, entity_id=entity_id, action=WriteAction.UPDATE
    )
    if result.is_err():
        raise client_error_for(result.error)
    return result.value


@router.delete("/{kind}/{entity_id}", response_model=ScopedRecordDTO)
async def deactivate_record(
    kind: str,
    entity_id: int,
    payload: Dict[str, Any] = Depends(enforce_tenant_boundary),
    context: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """Soft delete: the row stays, with is_active set to false."""
    result = await _scoped_write(session).execute(
        context, kind, payload, entity_id=entity_id, action=WriteAction.DEACTIVATE
    )
    if result.is_err():
        raise client_error_for(result.error)
    return result.value
