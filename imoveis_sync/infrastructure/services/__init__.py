"""
INFRASTRUCTURE SERVICES
========================

- Persistência: ListingStoreService (tabela imoveis_vale)
- Exportação: INSERTs literais a partir do mesmo mapeamento
"""

from .listing_store_service import ListingStoreService
from .sql_export_service import (
    escape_sql_string,
    format_insert_statement,
    format_insert_statements,
    sql_literal,
)

__all__ = [
    "ListingStoreService",
    "escape_sql_string",
    "format_insert_statement",
    "format_insert_statements",
    "sql_literal",
]
