"""Entidades persistidas."""
from .base import Base
from .imovel import ImovelRecord

__all__ = [
    "Base",
    "ImovelRecord",
]
