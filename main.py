"""
NutriCoach FastAPI Application
Main entry point: middleware, exception handlers and routers
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio

from api.routes import (
    health,
    users,
    specialists,
    clients,
    dishes,
    menus,
    assignments,
    journal,
    chat,
    ai,
    storage,
)
from domain.models import init_database
from app.config import settings
from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    service_exception_handler,
    general_exception_handler,
)
from app.exceptions import ServiceError

# Root logging for every nutricoach.* logger
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("nutricoach.main")


async def wait_for_database() -> None:
    """Create missing tables, retrying while the database container starts"""
    attempts = settings.db_init_attempts
    for attempt in range(1, attempts + 1):
        try:
            await anyio.to_thread.run_sync(init_database)
        except Exception as exc:
            if attempt == attempts:
                _logger.error(f"db_init_failed attempts={attempts}")
                raise
            _logger.warning(f"db_init_retry attempt={attempt}/{attempts} error='{exc}'")
            await anyio.sleep(settings.db_init_delay_sec)
        else:
            _logger.info(f"db_init_ok attempt={attempt}")
            return


@asynccontextmanager
async def lifespan(app: FastAPI):
    _logger.info(f"startup env={settings.environment.value} version={settings.app_version}")
    await wait_for_database()

    if not settings.llm_api_key:
        _logger.warning("llm_not_configured: /ai endpoints will answer LLM_NOT_CONFIGURED")
    if not settings.storage_url:
        _logger.warning("storage_not_configured: /storage endpoints will answer STORAGE_NOT_CONFIGURED")

    yield
    _logger.info("shutdown")


app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=(
        f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
    ),
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

app.add_middleware(RequestLoggingMiddleware)

# Register exception handlers
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(ServiceError, service_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

for module in (health, users, specialists, clients, dishes, menus, assignments, journal, chat, ai, storage):
    app.include_router(module.router, prefix=settings.api_prefix)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
