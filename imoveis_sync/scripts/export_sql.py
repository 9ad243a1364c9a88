"""
Exporta o feed como INSERTs SQL (carga manual).

Uso:
    python -m imoveis_sync.scripts.export_sql
    python -m imoveis_sync.scripts.export_sql --input feed.xml --output imoveis.sql

Sem --input, busca o feed configurado em FEED_URL.
Sem --output, escreve na saída padrão.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from imoveis_sync.config import get_settings
from imoveis_sync.domain.exceptions import ImoveisSyncError
from imoveis_sync.domain.listing import Listing
from imoveis_sync.infrastructure.data_sources import XmlFeedProvider
from imoveis_sync.infrastructure.services.sql_export_service import format_insert_statements

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Exporta o feed de imóveis como INSERTs SQL")
    parser.add_argument("--input", "-i", type=Path, help="arquivo XML local (em vez do feed remoto)")
    parser.add_argument("--output", "-o", type=Path, help="arquivo .sql de saída (padrão: stdout)")
    return parser.parse_args(argv)


async def load_listings(input_path: Optional[Path]) -> List[Listing]:
    provider = XmlFeedProvider.from_settings(get_settings())
    if input_path is None:
        return await provider.fetch()

    logger.info(f"📂 Lendo feed de {input_path}")
    return provider.parse(input_path.read_bytes())


async def export_sql(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        listings = await load_listings(args.input)
    except (ImoveisSyncError, OSError) as e:
        logger.error(f"❌ Falha ao carregar o feed: {e}")
        return 1

    sql = "\n\n".join(format_insert_statements(listings))

    if args.output is None:
        print(sql)
    else:
        args.output.write_text(sql + "\n", encoding="utf-8")
        logger.info(f"✅ {len(listings)} INSERTs gravados em {args.output}")

    return 0


def main():
    sys.exit(asyncio.run(export_sql()))


if __name__ == "__main__":
    main()
