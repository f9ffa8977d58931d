"""Tenancy use cases"""
from .resolve_context import ResolveTenantContext
from .boundary_guard import BoundaryGuard
from .scoped_read import ScopedRead
from .scoped_write import ScopedWrite
from .dtos import ScopedListDTO, ScopedRecordDTO, TenantContextDTO, WriteAction

__all__ = [
    "ResolveTenantContext",
    "BoundaryGuard",
    "ScopedRead",
    "ScopedWrite",
    "ScopedListDTO",
    "ScopedRecordDTO",
    "TenantContextDTO",
    "WriteAction",
]
