"""
CASO DE USO: SINCRONIZAR IMÓVEIS
================================

Reconcilia o snapshot do feed com a tabela imoveis_vale.

FLUXO DE UMA RODADA:
1. Busca o snapshot completo na fonte (falhou -> rodada abortada)
2. Lê os códigos ativos no banco (baseline; falha de conexão -> vazio)
3. Diff por código:
   - novos     = snapshot - baseline
   - atualizar = snapshot ∩ baseline
   - remover   = baseline - snapshot
4. Aplica remoções, atualizações e inclusões, nessa ordem, um imóvel por
   vez. Erro em um imóvel vira mensagem no resultado e a rodada segue.
5. success = nenhuma mensagem de erro

Nenhuma exceção sai de sync(): toda falha termina no SyncResult.
O caso de uso não guarda estado entre rodadas além do horário da última.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set

from imoveis_sync.domain.exceptions import StoreError
from imoveis_sync.domain.listing import Listing
from imoveis_sync.domain.sync_result import SyncResult
from imoveis_sync.infrastructure.data_sources.interface import ListingSource
from imoveis_sync.infrastructure.services.listing_store_service import ListingStoreService

logger = logging.getLogger(__name__)


# =============================================================================
# DIFF
# =============================================================================

@dataclass(frozen=True)
class SyncPlan:
    """Partição do snapshot e do baseline por código."""

    to_add: List[Listing] = field(default_factory=list)
    to_update: List[Listing] = field(default_factory=list)
    to_delete: List[str] = field(default_factory=list)


def dedupe_by_code(listings: Iterable[Listing]) -> List[Listing]:
    """Um imóvel por código; repetido no feed, vale a última ocorrência."""
    by_code: Dict[str, Listing] = {}
    for listing in listings:
        if listing.code in by_code:
            logger.warning(f"⚠️ Código {listing.code} repetido no feed; usando a última ocorrência")
            # reinsere para manter a posição da última ocorrência
            del by_code[listing.code]
        by_code[listing.code] = listing
    return list(by_code.values())


def compute_diff(listings: Iterable[Listing], baseline: Set[str]) -> SyncPlan:
    snapshot = dedupe_by_code(listings)
    snapshot_codes = {listing.code for listing in snapshot}

    return SyncPlan(
        to_add=[listing for listing in snapshot if listing.code not in baseline],
        to_update=[listing for listing in snapshot if listing.code in baseline],
        to_delete=sorted(code for code in baseline if code not in snapshot_codes),
    )


# =============================================================================
# CASO DE USO
# =============================================================================

class SyncListingsUseCase:
    """
    Motor de reconciliação. Criado uma vez no startup com a fonte e o
    store injetados; cada chamada de sync() é uma rodada independente.

    Rodadas simultâneas não são coordenadas aqui (última escrita vence no
    banco). Quem chama serializa, se precisar.
    """

    def __init__(self, source: ListingSource, store: ListingStoreService):
        self._source = source
        self._store = store
        self._last_sync: Optional[str] = None

    @property
    def last_sync(self) -> Optional[str]:
        return self._last_sync

    async def sync(self) -> SyncResult:
        result = SyncResult()

        try:
            logger.info("🔄 Iniciando sincronização do banco...")

            listings = await self._source.fetch()
            logger.info(f"📊 Recebidos {len(listings)} imóveis do feed")

            baseline = await self._store.existing_active_codes()
            logger.info(f"🗄️ {len(baseline)} imóveis ativos no banco")

            plan = compute_diff(listings, baseline)
            logger.info(
                f"➕ Novos: {len(plan.to_add)} | "
                f"🔄 Atualizar: {len(plan.to_update)} | "
                f"🗑️ Remover: {len(plan.to_delete)}"
            )

            await self._apply(plan, result)

            result.success = not result.errors
            logger.info(
                f"✅ Sincronização concluída: {result.added} adicionados, "
                f"{result.updated} atualizados, {result.deleted} removidos",
                extra={"extra": {
                    "added": result.added,
                    "updated": result.updated,
                    "deleted": result.deleted,
                    "errors": len(result.errors),
                }},
            )
            if result.errors:
                logger.warning(f"⚠️ {len(result.errors)} erros durante a sincronização")

        except Exception as e:
            message = f"Synchronization failed: {e}"
            logger.error(f"❌ {message}", exc_info=True)
            result.errors.append(message)
            result.success = False

        self._last_sync = datetime.now(timezone.utc).isoformat()
        return result

    async def _apply(self, plan: SyncPlan, result: SyncResult) -> None:
        logger.info("🗑️ Processando remoções...")
        for code in plan.to_delete:
            try:
                await self._store.soft_delete(code)
                result.deleted += 1
            except Exception as e:
                self._record_error(result, f"Failed to delete property {code}: {e}")

        logger.info("🔄 Processando atualizações...")
        for listing in plan.to_update:
            try:
                await self._store.update(listing)
                result.updated += 1
            except Exception as e:
                self._record_error(result, f"Failed to update property {listing.code}: {e}")

        logger.info("➕ Processando inclusões...")
        for listing in plan.to_add:
            try:
                await self._store.insert(listing)
                result.added += 1
            except Exception as e:
                self._record_error(result, f"Failed to add property {listing.code}: {e}")

    @staticmethod
    def _record_error(result: SyncResult, message: str) -> None:
        logger.error(message)
        result.errors.append(message)

    # =========================================================================
    # ESTATÍSTICAS
    # =========================================================================

    async def get_stats(self) -> Dict[str, Any]:
        try:
            total = await self._store.count(active_only=False)
            active = await self._store.count(active_only=True)
        except StoreError as e:
            logger.error(f"❌ Falha ao obter estatísticas de sincronização: {e}")
            return {
                "total_properties": 0,
                "active_properties": 0,
                "last_sync": None,
            }

        return {
            "total_properties": total,
            "active_properties": active,
            "last_sync": self._last_sync,
        }
