"""
Executa UMA rodada de sincronização feed -> banco e sai.

Uso:
    python -m imoveis_sync.scripts.run_sync

Imprime o resultado em JSON. Código de saída 0 se success, 1 caso contrário.
Útil para cron externo quando a API não está no ar.
"""

import asyncio
import json
import logging
import sys

from imoveis_sync.application.use_cases.sync_listings import SyncListingsUseCase
from imoveis_sync.config import get_settings
from imoveis_sync.infrastructure.data_sources import XmlFeedProvider
from imoveis_sync.infrastructure.database import create_engine, create_session_factory
from imoveis_sync.infrastructure.services.listing_store_service import ListingStoreService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def run_sync() -> int:
    settings = get_settings()

    if not settings.database_configured:
        logger.error("❌ DATABASE_URL não configurada")
        return 1

    engine = create_engine(settings)
    store = ListingStoreService(create_session_factory(engine), engine)
    use_case = SyncListingsUseCase(XmlFeedProvider.from_settings(settings), store)

    try:
        result = await use_case.sync()
    finally:
        await store.close()

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0 if result.success else 1


def main():
    sys.exit(asyncio.run(run_sync()))


if __name__ == "__main__":
    main()
