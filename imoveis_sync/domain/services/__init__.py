"""Serviços puros do domínio."""

from .listing_mapper import COLUMNS, NormalizedRow, to_normalized_row

__all__ = [
    "COLUMNS",
    "NormalizedRow",
    "to_normalized_row",
]
