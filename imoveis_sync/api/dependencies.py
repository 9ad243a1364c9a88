"""
DEPENDENCIES (Dependências)
============================

Funções injetadas nas rotas. Tudo é montado uma vez no lifespan e fica
em app.state; aqui só buscamos de lá.
"""

import asyncio
from typing import Optional

from fastapi import HTTPException, Request, status

from imoveis_sync.application.use_cases.sync_listings import SyncListingsUseCase
from imoveis_sync.infrastructure.data_sources.interface import ListingSource
from imoveis_sync.infrastructure.services.listing_store_service import ListingStoreService


def get_listing_source(request: Request) -> ListingSource:
    return request.app.state.source


def get_store(request: Request) -> Optional[ListingStoreService]:
    """Store do banco, ou None quando DATABASE_URL não está configurada."""
    return getattr(request.app.state, "store", None)


def get_sync_use_case(request: Request) -> SyncListingsUseCase:
    """
    Motor de reconciliação.

    Sem banco configurado não há o que sincronizar: 503.
    """
    use_case = getattr(request.app.state, "sync_use_case", None)
    if use_case is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not configured",
        )
    return use_case


def get_sync_lock(request: Request) -> asyncio.Lock:
    return request.app.state.sync_lock
