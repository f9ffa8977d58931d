"""Shared base for all domain entities"""

from datetime import datetime, timezone
from sqlalchemy import BigInteger, DateTime, Integer
from sqlmodel import SQLModel

# BIGINT primary keys only autoincrement on SQLite when declared as INTEGER
IdType = BigInteger().with_variant(Integer(), "sqlite")

# TIMESTAMP WITH TIME ZONE on PostgreSQL
TimestampType = DateTime(timezone=True)


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp"""
    return datetime.now(timezone.utc)


class BaseModel(SQLModel):
    pass
