"""Row-lock helpers shared by repositories that SELECT ... FOR UPDATE"""

import logging
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig

logger = logging.getLogger(__name__)

# PostgreSQL lock_not_available
LOCK_NOT_AVAILABLE = "55P03"


def dialect_name(session: AsyncSession) -> str:
    bind = session.bind
    dialect = getattr(bind, "dialect", None)
    return dialect.name if dialect is not None else ""


async def apply_lock_timeout(session: AsyncSession, timeout_ms=None) -> None:
    """
    Bound the wait for row locks in the current transaction

    PostgreSQL only; SQLite serializes writers with BEGIN IMMEDIATE and the
    driver's busy timeout instead.
    """
    if dialect_name(session) != "postgresql":
        return
    timeout_ms = int(timeout_ms if timeout_ms is not None else ApplicationConfig.LOCK_TIMEOUT_MS)
    await session.execute(text(f"SET LOCAL lock_timeout = '{timeout_ms}ms'"))


def is_lock_timeout(error: DBAPIError) -> bool:
    orig = getattr(error, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == LOCK_NOT_AVAILABLE:
        return True
    message = str(orig if orig is not None else error).lower()
    return "lock timeout" in message or "database is locked" in message
