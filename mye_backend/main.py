# mye_backend/main.py
# Точка входа FastAPI. Клиент БД создаётся здесь и стартует/останавливается в lifespan.
# Схему ведёт Alembic (alembic upgrade head до запуска), приложение её не меняет.

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from mye_backend.core.config import Settings, settings as default_settings
from mye_backend.core.errors import RequestValidationFailed, ShopError
from mye_backend.db.session import Database
from mye_backend.services.notifications import Notifier, notifier_from_settings
from mye_backend.services.uploads import UPLOAD_URL_PREFIX

# Импорт моделей, чтобы SQLAlchemy видел их определения
import mye_backend.models.user
import mye_backend.models.brand
import mye_backend.models.product
import mye_backend.models.order

from mye_backend.api import brands as brands_router
from mye_backend.api import checkout as checkout_router
from mye_backend.api import orders as orders_router
from mye_backend.api import products as products_router
from mye_backend.api import upload as upload_router

# Настройка логирования
logging.basicConfig(level=default_settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

SERVICE_NAME = "MYE Backend API"
VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Управление жизненным циклом приложения.
    Запускается при старте и завершении приложения.
    """
    settings: Settings = app.state.settings
    database: Database = app.state.database

    # Startup
    logger.info("🚀 FastAPI starting up...")
    database.start()
    if not database.wait_until_ready(retries=settings.DB_CONNECT_RETRIES, delay=settings.DB_CONNECT_DELAY):
        logger.error("⚠️ Database is not reachable. Application may not work correctly.")
        if settings.is_production:
            raise RuntimeError("Cannot start application: database is unreachable")
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

    yield

    # Shutdown
    logger.info("🛑 FastAPI shutting down...")
    database.shutdown()


def _field_path(loc: tuple) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header")]
    return ".".join(parts) or "body"


def _validation_message(exc: RequestValidationError) -> RequestValidationFailed:
    errors = exc.errors()
    missing = [_field_path(e["loc"]) for e in errors if e["type"] == "missing"]
    if missing and len(missing) == len(errors):
        return RequestValidationFailed(f"Missing required fields: {', '.join(missing)}", missing)
    fields = [_field_path(e["loc"]) for e in errors]
    details = "; ".join(f"{_field_path(e['loc'])}: {e['msg']}" for e in errors)
    return RequestValidationFailed(f"Invalid request: {details}", fields)


def _error_body(exc: ShopError) -> dict:
    body = {"success": False, "error": str(exc), "errorType": type(exc).__name__}
    if isinstance(exc, RequestValidationFailed):
        body["fields"] = exc.fields
    return body


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ShopError)
    async def shop_error_handler(request: Request, exc: ShopError):
        """Доменные ошибки -> HTTP-статус из класса исключения."""
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # Ошибки схемы запроса — 400 со списком полей, до каких-либо записей в БД
        error = _validation_message(exc)
        return JSONResponse(status_code=error.status_code, content=_error_body(error))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.detail, "errorType": type(exc).__name__},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Глобальный обработчик ошибок."""
        logger.error(f"Unhandled exception: {exc}", exc_info=exc)
        debug = app.state.settings.ENVIRONMENT == "development"
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": str(exc) if debug else "Internal server error",
            },
        )


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    notifier: Optional[Notifier] = None,
) -> FastAPI:
    """Собирает приложение. В тестах сюда передают свои settings, БД и notifier."""
    settings = settings or default_settings

    app = FastAPI(
        title=SERVICE_NAME,
        description="Admin backend: products, brands, uploads, checkout and order tracking",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database or Database(settings.DATABASE_URL)
    app.state.notifier = notifier or notifier_from_settings(settings)

    # CORS: в development всё открыто, иначе только CORS_ORIGINS
    if settings.ENVIRONMENT == "development":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    # Подключаем роутеры
    app.include_router(products_router.router, prefix="/api/products", tags=["products"])
    app.include_router(brands_router.router, prefix="/api/brands", tags=["brands"])
    app.include_router(upload_router.router, prefix="/api/upload", tags=["upload"])
    app.include_router(checkout_router.router, prefix="/api", tags=["checkout"])
    app.include_router(orders_router.router, prefix="/api/orders", tags=["orders"])

    app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False), name="uploads")

    # Базовые health check endpoints
    @app.get("/", tags=["health"])
    async def root():
        """Базовый health check."""
        return {"status": "ok", "service": SERVICE_NAME, "environment": settings.ENVIRONMENT}

    @app.get("/health", tags=["health"])
    def health():
        """Детальный health check с запросом к БД."""
        connected = app.state.database.started and app.state.database.ping()
        return JSONResponse(
            status_code=200 if connected else 503,
            content={
                "status": "healthy" if connected else "degraded",
                "database": "connected" if connected else "unreachable",
                "version": VERSION,
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "mye_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.ENVIRONMENT == "development",
        log_level=default_settings.LOG_LEVEL.lower(),
    )
