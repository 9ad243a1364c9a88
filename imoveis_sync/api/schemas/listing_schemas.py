"""
SCHEMAS DE RESPOSTA
===================

Formato JSON das rotas de imóveis. Todas as respostas carregam
success + timestamp, como o consumidor atual espera.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ListingsResponse(BaseModel):
    """Snapshot do feed já normalizado."""
    success: bool = True
    data: List[Dict[str, Any]] = Field(default_factory=list)
    count: int = 0
    timestamp: str = Field(default_factory=utc_now_iso)


class SqlStatementsResponse(BaseModel):
    """Um INSERT por imóvel, na ordem do feed."""
    success: bool = True
    data: List[str] = Field(default_factory=list)
    count: int = 0
    timestamp: str = Field(default_factory=utc_now_iso)


class SyncResultResponse(BaseModel):
    success: bool
    added: int
    updated: int
    deleted: int
    errors: List[str] = Field(default_factory=list)
    timestamp: str


class SyncStatsResponse(BaseModel):
    total_properties: int
    active_properties: int
    last_sync: Optional[str] = None


class ErrorResponse(BaseModel):
    """Corpo padrão de erro (404, 409, 500, 503)."""
    success: bool = False
    error: str
    timestamp: str = Field(default_factory=utc_now_iso)
    path: Optional[str] = None


def error_body(error: str, path: Optional[str] = None) -> Dict[str, Any]:
    """Corpo de erro pronto para JSONResponse (sem path quando não informado)."""
    return ErrorResponse(error=error, path=path).model_dump(exclude_none=True)
