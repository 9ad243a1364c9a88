"""
SERVIÇO DE PERSISTÊNCIA DE IMÓVEIS
==================================

Único ponto de escrita na tabela imoveis_vale. Todas as operações são
parametrizadas (SQLAlchemy Core) e executadas uma a uma, cada uma na sua
própria transação.

- existing_active_codes(): falha "suave" -> conjunto vazio
- insert(): nunca faz upsert; conflito de chave vira StoreError
- update(): código inexistente não é erro (0 linhas)
- soft_delete(): ativo = false, nunca DELETE físico
"""

import asyncio
import logging
from typing import Optional, Set, Union

from sqlalchemy import Insert, Select, Update, func, insert, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from imoveis_sync.domain.entities import ImovelRecord
from imoveis_sync.domain.exceptions import StoreError
from imoveis_sync.domain.listing import Listing
from imoveis_sync.domain.services.listing_mapper import COLUMNS, NormalizedRow, to_normalized_row

logger = logging.getLogger(__name__)

# Erros de conexão do asyncpg chegam crus (sem o wrapper do SQLAlchemy):
# OSError, ou asyncio.TimeoutError no timeout de conexão (fora de OSError no 3.10)
STORE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)

IMMUTABLE_ON_UPDATE = ("codigo_imovel", "data_cadastro")
MUTABLE_COLUMNS = tuple(c for c in COLUMNS if c not in IMMUTABLE_ON_UPDATE)


# =============================================================================
# STATEMENTS
# =============================================================================

def build_active_codes_query() -> Select:
    return select(ImovelRecord.codigo_imovel).where(ImovelRecord.ativo.is_(True))


def _snapshot_values(row: NormalizedRow) -> dict:
    # Todo imóvel presente no feed fica ativo no banco; Publicar só vale na exportação SQL
    return {**row.as_dict(), "ativo": True}


def build_insert_statement(row: NormalizedRow) -> Insert:
    return insert(ImovelRecord).values(**_snapshot_values(row))


def build_update_statement(row: NormalizedRow) -> Update:
    values = _snapshot_values(row)
    return (
        update(ImovelRecord)
        .where(ImovelRecord.codigo_imovel == row.codigo_imovel)
        .values(**{column: values[column] for column in MUTABLE_COLUMNS})
    )


def build_soft_delete_statement(codigo_imovel: str) -> Update:
    return (
        update(ImovelRecord)
        .where(ImovelRecord.codigo_imovel == codigo_imovel)
        .values(ativo=False, data_atualizacao=func.current_date())
    )


# =============================================================================
# SERVIÇO
# =============================================================================

class ListingStoreService:
    """Adapter da tabela imoveis_vale."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ):
        self._session_factory = session_factory
        self._engine = engine

    async def existing_active_codes(self) -> Set[str]:
        """Códigos ativos no banco. Falha de conexão -> set() (apenas logada)."""
        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(build_active_codes_query())
                return set(result.scalars().all())
        except STORE_ERRORS as e:
            logger.error(f"❌ Falha ao buscar códigos existentes: {e}", exc_info=True)
            return set()

    async def insert(self, listing: Listing) -> None:
        stmt = build_insert_statement(to_normalized_row(listing))
        await self._execute(stmt, listing.code, "insert")

    async def update(self, listing: Listing) -> int:
        """Sobrescreve as colunas mutáveis. Retorna linhas afetadas (0 = não existe)."""
        stmt = build_update_statement(to_normalized_row(listing))
        rowcount = await self._execute(stmt, listing.code, "update")
        if rowcount == 0:
            logger.debug(f"Imóvel {listing.code} não existe; update ignorado")
        return rowcount

    async def soft_delete(self, codigo_imovel: str) -> None:
        await self._execute(build_soft_delete_statement(codigo_imovel), codigo_imovel, "soft delete")

    async def _execute(self, stmt: Union[Insert, Update], code: str, operation: str) -> int:
        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(stmt)
                return result.rowcount
        except STORE_ERRORS as e:
            logger.error(f"❌ Falha no {operation} do imóvel {code}: {e}", exc_info=True)
            raise StoreError(f"{operation} failed", code=code, cause=e) from e

    # =========================================================================
    # APOIO (estatísticas / health)
    # =========================================================================

    async def count(self, active_only: bool = True) -> int:
        """Total de imóveis (só ativos por padrão). Propaga StoreError."""
        query = select(func.count()).select_from(ImovelRecord)
        if active_only:
            query = query.where(ImovelRecord.ativo.is_(True))
        try:
            async with self._session_factory.begin() as session:
                result = await session.execute(query)
                return result.scalar() or 0
        except STORE_ERRORS as e:
            raise StoreError("count of properties failed", cause=e) from e

    async def ping(self) -> bool:
        try:
            async with self._session_factory.begin() as session:
                await session.execute(text("SELECT 1"))
            return True
        except STORE_ERRORS as e:
            logger.warning(f"⚠️ Banco indisponível: {e}")
            return False

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
