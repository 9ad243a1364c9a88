"""
IMOVEIS API - Ponto de Entrada
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from imoveis_sync import __version__
from imoveis_sync.api.routes import health_router, listings_legacy_router, listings_router
from imoveis_sync.api.schemas import error_body, utc_now_iso
from imoveis_sync.application.use_cases.sync_listings import SyncListingsUseCase
from imoveis_sync.config import Settings, get_settings
from imoveis_sync.infrastructure.data_sources import ListingSource, XmlFeedProvider
from imoveis_sync.infrastructure.database import create_engine, create_session_factory, init_db
from imoveis_sync.infrastructure.logging_config import setup_logging
from imoveis_sync.infrastructure.scheduler import create_scheduler, start_scheduler, stop_scheduler
from imoveis_sync.infrastructure.services.listing_store_service import ListingStoreService

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    source: Optional[ListingSource] = None,
    store: Optional[ListingStoreService] = None,
) -> FastAPI:
    """
    Monta a aplicação.

    source/store podem ser injetados (testes); senão são criados a partir
    das configurações no startup.
    """
    settings = settings or get_settings()

    # ============================================================
    # 🔁 LIFESPAN
    # ============================================================
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Iniciando Imoveis API...")

        app.state.settings = settings
        app.state.source = source or XmlFeedProvider.from_settings(settings)
        app.state.store = store
        app.state.sync_use_case = None
        app.state.sync_lock = asyncio.Lock()

        if app.state.store is None and settings.database_configured:
            engine = create_engine(settings)
            if settings.database_auto_create:
                await init_db(engine)
                logger.info("✅ Tabelas criadas!")
            app.state.store = ListingStoreService(create_session_factory(engine), engine)

        if app.state.store is not None:
            app.state.sync_use_case = SyncListingsUseCase(app.state.source, app.state.store)
        else:
            logger.warning("⚠️ DATABASE_URL não configurada, sincronização desativada")

        if settings.scheduler_enabled and app.state.sync_use_case is not None:
            use_case = app.state.sync_use_case
            lock = app.state.sync_lock

            async def scheduled_sync():
                if lock.locked():
                    logger.info("⏭️ Sincronização em andamento, rodada agendada ignorada")
                    return
                async with lock:
                    await use_case.sync()

            create_scheduler(scheduled_sync, settings.sync_interval_minutes)
            start_scheduler()

        yield

        logger.info("👋 Encerrando Imoveis API...")
        stop_scheduler()
        if app.state.store is not None:
            await app.state.store.close()

    # ============================================================
    # FASTAPI APP
    # ============================================================
    app = FastAPI(
        title="Imoveis API",
        description="Feed de imóveis Gaia + sincronização com PostgreSQL",
        version=__version__,
        lifespan=lifespan,
    )

    # ============================================================
    # ⭐ CORS
    # ============================================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ============================================================
    # LOG DE REQUISIÇÕES
    # ============================================================
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} - {elapsed_ms}ms"
        )
        return response

    # ============================================================
    # ERROS
    # ============================================================
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"Route {request.method} {request.url.path} not found"
        else:
            message = str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content=error_body(message))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=422, content=error_body(str(exc)))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"❌ Erro não tratado em {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=error_body("Internal Server Error", path=request.url.path),
        )

    # ============================================================
    # ROTAS
    # ============================================================
    app.include_router(health_router)
    app.include_router(listings_router)
    app.include_router(listings_legacy_router)

    @app.get("/")
    async def root():
        return {
            "name": "Imoveis API",
            "version": __version__,
            "status": "running",
            "timestamp": utc_now_iso(),
            "endpoints": {
                "health": "GET /health",
                "imoveis": "GET /imoveis",
                "sql": "GET /imoveis/sql",
                "db_sync": "POST /imoveis/db-sync",
                "sync_stats": "GET /imoveis/sync-stats",
            },
        }

    return app


settings = get_settings()
setup_logging(settings.log_level)
app = create_app(settings)
