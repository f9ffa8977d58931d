import logging
import sentry_sdk
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel
import src.domain  # noqa: F401  registers every table on SQLModel.metadata
from src.api.error import ClientError
from src.api.routes import admin, budgets, health, records, tenancy
from src.depends import AsyncSessionLocal, engine
from src.domain.errors import ErrorCode
from src.worker.tenant_reconciler import TenantReconcilerWorker

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def init_sentry(config) -> None:
    if not config.ENABLE_SENTRY or not config.DSN_SENTRY:
        return
    sentry_sdk.init(dsn=config.DSN_SENTRY, environment=config.SENTRY_ENVIRONMENT)
    logger.info("Sentry initialized")


def create_app(config) -> FastAPI:
    configure_logging(config.LOG_LEVEL)
    init_sentry(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(config, "AUTO_CREATE_TABLES", False):
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        if config.RECONCILIATION_ON_STARTUP:
            worker = TenantReconcilerWorker(session_factory=AsyncSessionLocal)
            try:
                await worker.run_once()
            except Exception as e:
                logger.error(f"Startup reconciliation sweep failed: {e}")
        yield

    app = FastAPI(title="Care Ledger Core", version="1.0.0", lifespan=lifespan)

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=config.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(ClientError)
    async def client_error_handler(request: Request, exc: ClientError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error.to_dict()},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": {
                    "code": ErrorCode.VALIDATION_ERROR,
                    "message": "Invalid request parameters",
                    "reason": str(exc.errors()),
                }
            },
        )

    prefix = config.API_PREFIX or ""
    app.include_router(health.router, prefix=prefix)
    app.include_router(tenancy.router, prefix=prefix)
    app.include_router(records.router, prefix=prefix)
    app.include_router(budgets.router, prefix=prefix)
    app.include_router(admin.router, prefix=prefix)

    return app
