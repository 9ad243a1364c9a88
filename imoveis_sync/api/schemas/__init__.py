"""Schemas Pydantic da API."""

from .listing_schemas import (
    ErrorResponse,
    ListingsResponse,
    SqlStatementsResponse,
    SyncResultResponse,
    SyncStatsResponse,
    error_body,
    utc_now_iso,
)

__all__ = [
    "ErrorResponse",
    "ListingsResponse",
    "SqlStatementsResponse",
    "SyncResultResponse",
    "SyncStatsResponse",
    "error_body",
    "utc_now_iso",
]
