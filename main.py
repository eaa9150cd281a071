# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, DBAPIError

from fechou.routers import (
    auth_router,
    user_router,
    admin_router,
    client_router,
    quote_router,
    public_router,
    review_router,
    payment_router,
    notification_router,
    saved_item_router,
    referral_router,
    stats_router,
)

from fechou.core.config import APP_ENV, APP_VERSION, CORS_ORIGINS, ENABLE_SCHEDULER
from fechou.core.db import engine, init_models
from fechou.core.scheduler import scheduler
from fechou.core.exceptions import AppException
from fechou.core.logging import setup_logging
from fechou.constants.error_codes import ErrorCode
from fechou.middleware.request_logging import request_logging_middleware
from fechou.core.error_handlers import (
    app_exception_handler,
    validation_exception_handler,
    http_exception_handler,
    integrity_error_handler,
    unhandled_exception_handler,
)
from fechou.utils.db_retry import run_with_db_retry

# ------------------------------------------------------------------------------
# ENV CONFIG
# ------------------------------------------------------------------------------
APP_NAME = "Fechou! API"

# ------------------------------------------------------------------------------
# LOGGING
# ------------------------------------------------------------------------------
setup_logging()
logger = logging.getLogger(__name__)

# ------------------------------------------------------------------------------
# LIFESPAN
# ------------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application", extra={"environment": APP_ENV})

    if APP_ENV == "development":
        await init_models()
        logger.info("Database models initialized (development)")
    else:
        logger.info("init_models() skipped outside development")

    if APP_ENV != "production" or ENABLE_SCHEDULER:
        scheduler.start()
        logger.info("Scheduler started")
    else:
        logger.info("Scheduler disabled (production)")

    yield

    logger.info("Shutting down application")
    if scheduler.running:
        scheduler.shutdown()
    await engine.dispose()

# ------------------------------------------------------------------------------
# APP INIT
# ------------------------------------------------------------------------------
app = FastAPI(
    title=APP_NAME,
    description="Quotes, plans and referrals for small service providers",
    version=APP_VERSION,
    docs_url="/docs" if APP_ENV != "production" else None,
    redoc_url=None,
    lifespan=lifespan,
)

# ------------------------------------------------------------------------------
# EXCEPTION HANDLERS
# ------------------------------------------------------------------------------
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(IntegrityError, integrity_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# ------------------------------------------------------------------------------
# MIDDLEWARE
# ------------------------------------------------------------------------------
app.middleware("http")(request_logging_middleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------------------------------------------------------------
# HEALTH CHECK
# ------------------------------------------------------------------------------
@app.get("/", tags=["Health"])
async def service_info():
    return {
        "status": "ok",
        "service": "fechou-api",
        "environment": APP_ENV,
        "version": APP_VERSION,
    }


async def _ping_database():
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


@app.get("/health", tags=["Health"])
async def health_check():
    try:
        await run_with_db_retry(_ping_database, label="health check")
    except DBAPIError:
        logger.exception("Health check failed")
        raise AppException(
            503,
            "Database unavailable",
            ErrorCode.SERVICE_UNAVAILABLE,
            headers={"Retry-After": "30"},
        )

    return {"status": "ok", "database": "ok"}

# ------------------------------------------------------------------------------
# ROUTERS
# ------------------------------------------------------------------------------
app.include_router(auth_router)
app.include_router(user_router)
app.include_router(admin_router)
app.include_router(client_router)
app.include_router(quote_router)
app.include_router(public_router)
app.include_router(review_router)
app.include_router(payment_router)
app.include_router(notification_router)
app.include_router(saved_item_router)
app.include_router(referral_router)
app.include_router(stats_router)
