"""Domínio: imóveis do feed, resultado de sincronização e exceções."""

from .listing import Corretor, Foto, Listing
from .sync_result import SyncResult
from .exceptions import FetchError, ImoveisSyncError, ParseError, StoreError

__all__ = [
    "Corretor",
    "Foto",
    "Listing",
    "SyncResult",
    "ImoveisSyncError",
    "FetchError",
    "ParseError",
    "StoreError",
]
