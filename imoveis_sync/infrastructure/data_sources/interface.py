"""
DATA SOURCE INTERFACE
=====================

Interface abstrata da fonte de imóveis consumida pela sincronização.
A fonte entrega o snapshot completo a cada chamada; não há cache nem
retentativa nesta camada.
"""

from abc import ABC, abstractmethod
from typing import Dict, List
from dataclasses import dataclass, field

from imoveis_sync.domain.listing import Listing


@dataclass
class FeedConfig:
    """Configuração de um feed HTTP."""

    url: str
    timeout: float = 30.0
    headers: Dict[str, str] = field(default_factory=dict)


class ListingSource(ABC):
    """
    Fonte do snapshot de imóveis.

    Implementações devem:
    - Devolver sempre uma lista (mesmo com um único imóvel no feed)
    - Descartar registros sem código ou título
    - Preencher campos ausentes com os padrões de Listing
    - Lançar FetchError (rede/timeout) ou ParseError (payload inválido)
    """

    @abstractmethod
    async def fetch(self) -> List[Listing]:
        """Busca e normaliza o snapshot completo."""
        pass
