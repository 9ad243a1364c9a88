"""
ROTAS DE IMÓVEIS
================

- GET  /imoveis             -> snapshot do feed (JSON)
- GET  /imoveis/sql         -> um INSERT por imóvel
- POST /imoveis/db-sync     -> rodada de reconciliação com o banco
- GET  /imoveis/sync-stats  -> totais + horário da última rodada

As rotas antigas /imoveis-sql e /db-sync continuam respondendo.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from imoveis_sync.api.dependencies import get_listing_source, get_sync_lock, get_sync_use_case
from imoveis_sync.api.schemas import (
    ErrorResponse,
    ListingsResponse,
    SqlStatementsResponse,
    SyncResultResponse,
    SyncStatsResponse,
    error_body,
)
from imoveis_sync.application.use_cases.sync_listings import SyncListingsUseCase
from imoveis_sync.domain.exceptions import ImoveisSyncError
from imoveis_sync.infrastructure.data_sources.interface import ListingSource
from imoveis_sync.infrastructure.services.sql_export_service import format_insert_statements

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/imoveis", tags=["Imóveis"])

# Caminhos antigos, fora da documentação
legacy_router = APIRouter(include_in_schema=False)

CACHE_CONTROL = "public, max-age=300"


# =============================================================================
# FEED
# =============================================================================

@router.get(
    "",
    response_model=ListingsResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_imoveis(
    response: Response,
    source: ListingSource = Depends(get_listing_source),
):
    """Busca o feed e devolve os imóveis normalizados."""
    try:
        listings = await source.fetch()
    except ImoveisSyncError as e:
        logger.error(f"❌ Erro ao buscar imóveis: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(f"Failed to fetch real estate data: {e}"),
        )

    response.headers["Cache-Control"] = CACHE_CONTROL
    return ListingsResponse(
        data=[listing.to_dict() for listing in listings],
        count=len(listings),
    )


@router.get(
    "/sql",
    response_model=SqlStatementsResponse,
    responses={500: {"model": ErrorResponse}},
)
async def list_imoveis_sql(
    response: Response,
    source: ListingSource = Depends(get_listing_source),
):
    """Mesmo snapshot, renderizado como INSERTs para carga manual."""
    try:
        listings = await source.fetch()
    except ImoveisSyncError as e:
        logger.error(f"❌ Erro ao gerar SQL: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(f"Failed to generate SQL statements: {e}"),
        )

    statements = format_insert_statements(listings)
    response.headers["Cache-Control"] = CACHE_CONTROL
    return SqlStatementsResponse(data=statements, count=len(statements))


# =============================================================================
# SINCRONIZAÇÃO
# =============================================================================

@router.post(
    "/db-sync",
    response_model=SyncResultResponse,
    responses={409: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def sync_database(
    use_case: SyncListingsUseCase = Depends(get_sync_use_case),
    lock: asyncio.Lock = Depends(get_sync_lock),
):
    """
    Executa uma rodada de reconciliação.

    Falha parcial ou total volta com 200 e success=false no corpo.
    Se já existe uma rodada em andamento (HTTP ou scheduler): 409.
    """
    if lock.locked():
        logger.warning("⚠️ Sincronização já em andamento, requisição recusada")
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=error_body("Synchronization already in progress"),
        )

    async with lock:
        result = await use_case.sync()

    return result.to_dict()


@router.get("/sync-stats", response_model=SyncStatsResponse)
async def sync_stats(use_case: SyncListingsUseCase = Depends(get_sync_use_case)):
    return await use_case.get_stats()


legacy_router.add_api_route(
    "/imoveis-sql", list_imoveis_sql, methods=["GET"], response_model=SqlStatementsResponse
)
legacy_router.add_api_route(
    "/db-sync", sync_database, methods=["POST"], response_model=SyncResultResponse
)
