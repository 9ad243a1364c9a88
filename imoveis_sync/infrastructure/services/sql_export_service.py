"""
SERVIÇO DE EXPORTAÇÃO SQL
=========================

Gera INSERTs literais da tabela imoveis_vale para uso externo
(carga manual, conferência, backup). Não executa nada.

Parte da mesma linha normalizada usada pelo banco (listing_mapper), então
as coerções são idênticas às da sincronização. Único escape aplicado:
aspas simples dobradas.
"""

from datetime import date
from typing import Any, Iterable, List

from imoveis_sync.domain.listing import Listing
from imoveis_sync.domain.services.listing_mapper import COLUMNS, to_normalized_row


TABLE_NAME = '"public"."imoveis_vale"'


def escape_sql_string(value: str) -> str:
    if not value:
        return ""
    return value.replace("'", "''")


def _format_number(value: float) -> str:
    # 350000.0 -> "350000"; 1234.5 -> "1234.5"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def sql_literal(value: Any) -> str:
    """Valor Python -> literal SQL. Nunca lança."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_number(value)
    if isinstance(value, date):
        return f"'{value.isoformat()}'"
    return f"'{escape_sql_string(str(value))}'"


def format_insert_statement(listing: Listing) -> str:
    row = to_normalized_row(listing)
    columns = ",\n".join(f'  "{column}"' for column in COLUMNS)
    values = ",\n".join(f"  {sql_literal(value)}" for value in row.as_tuple())
    return f"INSERT INTO {TABLE_NAME} (\n{columns}\n) VALUES (\n{values}\n);"


def format_insert_statements(listings: Iterable[Listing]) -> List[str]:
    return [format_insert_statement(listing) for listing in listings]
