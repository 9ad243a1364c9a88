"""
HEALTH CHECK
============
Usado por monitoramento externo e pelo load balancer.

Retorna 200 se tudo OK, 503 se o banco (quando configurado) não responde.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from imoveis_sync.api.dependencies import get_store
from imoveis_sync.infrastructure.scheduler import get_scheduler_status
from imoveis_sync.infrastructure.services.listing_store_service import ListingStoreService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check(
    request: Request,
    store: Optional[ListingStoreService] = Depends(get_store),
):
    settings = request.app.state.settings
    status = "healthy"
    checks = {}

    if store is None:
        checks["database"] = "not_configured"
    elif await store.ping():
        checks["database"] = "ok"
    else:
        checks["database"] = "error"
        status = "unhealthy"

    checks["scheduler"] = get_scheduler_status()
    checks["environment"] = settings.environment
    checks["timestamp"] = datetime.now(timezone.utc).isoformat()

    body = {"status": status, "checks": checks}
    if status == "unhealthy":
        logger.warning("⚠️ Health check: banco indisponível")
        return JSONResponse(status_code=503, content=body)

    return body
