"""
DATA SOURCES - Fonte do snapshot de imóveis
===========================================

Providers disponíveis:
- XmlFeedProvider: feed XML da Gaia (Carga/Imoveis/Imovel) via HTTP
"""

from .interface import FeedConfig, ListingSource
from .xml_feed_provider import XmlFeedProvider

__all__ = [
    "FeedConfig",
    "ListingSource",
    "XmlFeedProvider",
]
