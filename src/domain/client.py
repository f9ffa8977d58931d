"""Client Domain Entity (care recipient)"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import ForeignKey, String, UniqueConstraint
from src.domain.base import BaseModel, IdType, TimestampType, utcnow


class Client(BaseModel, table=True):
    """
    Client - care recipient owned by one tenant

    Funding is represented by one or more Budget rows.
    """

    __tablename__ = "clients"
    __table_args__ = (
        # Target of the composite (client_id, tenant_id) key on budgets
        UniqueConstraint("id", "tenant_id", name="uq_clients_id_tenant"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    tenant_id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, ForeignKey("tenants.id"), nullable=False, index=True),
    )

    first_name: str = Field(sa_column=Column(String(100), nullable=False))

    last_name: str = Field(sa_column=Column(String(100), nullable=False))

    ndis_number: str = Field(sa_column=Column(String(50), nullable=False))

    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)

    updated_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)
