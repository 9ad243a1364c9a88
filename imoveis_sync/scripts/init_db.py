"""
Cria a tabela imoveis_vale (se não existir).

Uso:
    python -m imoveis_sync.scripts.init_db

Apenas para desenvolvimento; em produção a tabela já existe.
"""

import asyncio
import logging
import sys

from imoveis_sync.config import get_settings
from imoveis_sync.infrastructure.database import create_engine, init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main() -> int:
    settings = get_settings()
    if not settings.database_configured:
        logger.error("❌ DATABASE_URL não configurada")
        return 1

    engine = create_engine(settings)
    try:
        await init_db(engine)
        logger.info("✅ Tabela imoveis_vale verificada/criada")
    finally:
        await engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
