"""
Utilitários compartilhados pelos testes: fábrica de Listing, montagem de
XML no formato Carga e dublês de fonte/store.
"""

from typing import Dict, Iterable, List, Optional, Set
from unittest.mock import AsyncMock, MagicMock

from imoveis_sync.domain.exceptions import FetchError, StoreError
from imoveis_sync.domain.listing import Listing
from imoveis_sync.domain.services.listing_mapper import to_normalized_row
from imoveis_sync.infrastructure.data_sources.interface import ListingSource
from imoveis_sync.infrastructure.services.listing_store_service import (
    build_insert_statement,
    build_update_statement,
)


def make_listing(codigo: str, **overrides) -> Listing:
    data = {
        "codigo_imovel": codigo,
        "titulo_imovel": f"Imóvel {codigo}",
        "publicar": "1",
        "cidade": "Taubaté",
        "estado": "SP",
    }
    data.update(overrides)
    return Listing(**data)


def imovel_xml(codigo: str, titulo: Optional[str] = None, extra: str = "") -> str:
    titulo = f"Imóvel {codigo}" if titulo is None else titulo
    return (
        "<Imovel>"
        f"<CodigoImovel>{codigo}</CodigoImovel>"
        f"<TituloImovel>{titulo}</TituloImovel>"
        f"{extra}"
        "</Imovel>"
    )


def carga_xml(*imoveis: str) -> bytes:
    body = "".join(imoveis)
    return f'<?xml version="1.0" encoding="utf-8"?><Carga><Imoveis>{body}</Imoveis></Carga>'.encode("utf-8")


class FakeSource(ListingSource):
    """Fonte em memória. error != None faz o fetch falhar."""

    def __init__(self, listings: Iterable[Listing] = (), error: Optional[Exception] = None):
        self.listings = list(listings)
        self.error = error
        self.calls = 0

    async def fetch(self) -> List[Listing]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.listings)


def _written_ativo(stmt) -> bool:
    return stmt.compile().params["ativo"]


class FakeStore:
    """
    Store em memória com a mesma interface do ListingStoreService.

    rows: código -> ativo. fail_codes: códigos cuja escrita lança StoreError.
    O ativo gravado vem dos mesmos statements do ListingStoreService.
    """

    def __init__(
        self,
        active: Iterable[str] = (),
        fail_codes: Iterable[str] = (),
        baseline_down: bool = False,
    ):
        self.rows: Dict[str, bool] = {code: True for code in active}
        self.fail_codes: Set[str] = set(fail_codes)
        self.baseline_down = baseline_down
        self.operations: List[tuple] = []
        self.closed = False

    def _check(self, code: str, operation: str) -> None:
        if code in self.fail_codes:
            raise StoreError(f"{operation} failed", code=code, cause=RuntimeError("constraint"))

    async def existing_active_codes(self) -> Set[str]:
        if self.baseline_down:
            return set()
        return {code for code, ativo in self.rows.items() if ativo}

    async def insert(self, listing: Listing) -> None:
        self.operations.append(("insert", listing.code))
        self._check(listing.code, "insert")
        if listing.code in self.rows:
            raise StoreError("insert failed", code=listing.code, cause=RuntimeError("duplicate key"))
        self.rows[listing.code] = _written_ativo(build_insert_statement(to_normalized_row(listing)))

    async def update(self, listing: Listing) -> int:
        self.operations.append(("update", listing.code))
        self._check(listing.code, "update")
        if listing.code not in self.rows:
            return 0
        self.rows[listing.code] = _written_ativo(build_update_statement(to_normalized_row(listing)))
        return 1

    async def soft_delete(self, codigo_imovel: str) -> None:
        self.operations.append(("soft_delete", codigo_imovel))
        self._check(codigo_imovel, "soft delete")
        if codigo_imovel in self.rows:
            self.rows[codigo_imovel] = False

    async def count(self, active_only: bool = True) -> int:
        if active_only:
            return sum(1 for ativo in self.rows.values() if ativo)
        return len(self.rows)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True


def make_session_factory(execute_result=None, execute_error: Optional[BaseException] = None):
    """
    Mock de async_sessionmaker: factory.begin() -> async context manager
    que entrega uma sessão cujo execute() é AsyncMock.
    """
    session = MagicMock()
    session.execute = AsyncMock(return_value=execute_result, side_effect=execute_error)

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=session)
    context.__aexit__ = AsyncMock(return_value=False)

    factory = MagicMock()
    factory.begin.return_value = context
    return factory, session


FEED_DOWN = FetchError("Failed to fetch real estate feed", RuntimeError("connection reset"))
