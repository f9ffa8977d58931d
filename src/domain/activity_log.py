"""Activity Log Domain Entity

Append-only audit record written for every successful mutation of
tenant-owned data.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import Index, String, Text
from src.domain.base import BaseModel, IdType, TimestampType, utcnow


class ActivityLog(BaseModel, table=True):
    """
    Activity Log - write-once audit row

    user_id is None for system actions such as reconciliation repairs.
    """

    __tablename__ = "activity_logs"
    __table_args__ = (
        Index("ix_activity_logs_tenant_created", "tenant_id", "created_at"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    tenant_id: int = Field(sa_column=Column(IdType, nullable=False))

    user_id: Optional[int] = Field(default=None, sa_column=Column(IdType, nullable=True))

    action: str = Field(sa_column=Column(String(100), nullable=False))

    resource_type: str = Field(sa_column=Column(String(50), nullable=False))

    resource_id: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))

    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    created_at: datetime = Field(default_factory=utcnow, sa_type=TimestampType)
