from typing import Optional
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig


def build_engine(db_uri: Optional[str] = None, **kwargs) -> AsyncEngine:
    """
    Create the async engine

    On SQLite every transaction starts with BEGIN IMMEDIATE so writers
    serialize the way SELECT ... FOR UPDATE serializes them on PostgreSQL,
    and foreign keys are enforced.
    """
    db_uri = db_uri or ApplicationConfig.DB_URI
    engine = create_async_engine(db_uri, echo=False, future=True, **kwargs)

    if engine.dialect.name == "sqlite":

        @event.listens_for(engine.sync_engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            # Hand transaction control to the "begin" hook below
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


engine = build_engine()

AsyncSessionLocal = build_session_factory(engine)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_session_factory() -> sessionmaker:
    """Factory for work that needs one session per unit, such as the reconciliation sweep"""
    return AsyncSessionLocal
