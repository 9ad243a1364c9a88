"""
XML FEED PROVIDER
=================

Provider do feed XML da Gaia (GaiaWebServiceImovel).

Formato esperado:
    <Carga>
      <Imoveis>
        <Imovel>
          <CodigoImovel>...</CodigoImovel>
          <TituloImovel>...</TituloImovel>
          ...
          <corretor><nome>...</nome>...</corretor>
          <Fotos><Foto><NomeArquivo>...</NomeArquivo>...</Foto></Fotos>
        </Imovel>
        ...
      </Imoveis>
    </Carga>

O feed pode trazer um único <Imovel> ou vários; o resultado é sempre uma
lista. Atributos XML são ignorados e o texto de cada tag é aparado, com
espaços internos colapsados.
"""

import logging
from typing import TYPE_CHECKING, Dict, List, Optional

import httpx
from lxml import etree

from imoveis_sync.domain.exceptions import FetchError, ParseError
from imoveis_sync.domain.listing import Corretor, Foto, Listing, text_fields

from .interface import FeedConfig, ListingSource

if TYPE_CHECKING:
    from imoveis_sync.config import Settings

logger = logging.getLogger(__name__)


LISTING_FIELDS = text_fields(Listing)
CORRETOR_FIELDS = text_fields(Corretor)
FOTO_FIELDS = text_fields(Foto)


def _local_name(element: etree._Element) -> Optional[str]:
    # Comentários e instruções de processamento não têm tag string
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def _child(element: etree._Element, name: str) -> Optional[etree._Element]:
    for child in element:
        if _local_name(child) == name:
            return child
    return None


def _children(element: etree._Element, name: str) -> List[etree._Element]:
    return [child for child in element if _local_name(child) == name]


def _normalize_text(text: Optional[str]) -> str:
    if not text:
        return ""
    return " ".join(text.split())


def _leaf_texts(element: etree._Element) -> Dict[str, str]:
    """Texto das tags-folha filhas. Tag repetida: vale a primeira."""
    texts: Dict[str, str] = {}
    for child in element:
        name = _local_name(child)
        if name is None or name in texts:
            continue
        if len(child):
            continue
        texts[name] = _normalize_text(child.text)
    return texts


def _fill(campos: Dict[str, tuple], texts: Dict[str, str]) -> Dict[str, str]:
    """Aplica o padrão de cada campo quando a tag falta ou vem vazia."""
    return {attr: texts.get(tag) or default for attr, (tag, default) in campos.items()}


class XmlFeedProvider(ListingSource):
    """
    Busca o feed XML via HTTP e normaliza em Listing.

    Uma única requisição por chamada, com timeout. Sem retentativa:
    quem chama decide se repete a rodada.
    """

    DEFAULT_HEADERS = {
        "Accept": "application/xml, text/xml",
        "User-Agent": "ImoveisAPI/1.0",
    }

    def __init__(
        self,
        config: FeedConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not config.url:
            raise ValueError("XmlFeedProvider requer 'url' na configuração")
        self.config = config
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: "Settings") -> "XmlFeedProvider":
        """Provider do FEED_URL configurado, com o User-Agent das configurações."""
        return cls(
            FeedConfig(
                url=settings.feed_url,
                timeout=settings.feed_timeout,
                headers={"User-Agent": settings.feed_user_agent},
            )
        )

    @property
    def headers(self) -> Dict[str, str]:
        return {**self.DEFAULT_HEADERS, **self.config.headers}

    async def fetch(self) -> List[Listing]:
        logger.info("📡 Buscando feed de imóveis...")
        payload = await self._fetch_xml()
        logger.info("📄 XML recebido, convertendo...")
        listings = self.parse(payload)
        logger.info(f"✅ {len(listings)} imóveis normalizados do feed")
        return listings

    async def _fetch_xml(self) -> bytes:
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout,
                headers=self.headers,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(self.config.url)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error(f"⏱️ Timeout de {self.config.timeout}s ao buscar o feed")
            raise FetchError(f"Timeout after {self.config.timeout}s fetching feed", e) from e
        except httpx.HTTPError as e:
            logger.error(f"❌ Falha HTTP ao buscar o feed: {type(e).__name__}: {e}")
            raise FetchError("Failed to fetch real estate feed", e) from e

        if not response.content or not response.content.strip():
            raise FetchError("No data received from external API")

        return response.content

    # =========================================================================
    # PARSE / NORMALIZAÇÃO
    # =========================================================================

    def parse(self, payload: bytes) -> List[Listing]:
        """Converte o XML bruto em Listing, sem acesso à rede."""
        parser = etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
            huge_tree=True,
        )
        try:
            root = etree.fromstring(payload, parser)
        except (etree.XMLSyntaxError, ValueError) as e:
            raise ParseError("Malformed XML payload", e) from e

        if root is None or _local_name(root) != "Carga":
            raise ParseError(f"Unexpected root element: {getattr(root, 'tag', None)!r}")

        imoveis = _child(root, "Imoveis")
        elements = _children(imoveis, "Imovel") if imoveis is not None else []
        if not elements:
            logger.warning("⚠️ Nenhum imóvel encontrado no feed")
            return []

        listings = []
        skipped = 0
        for element in elements:
            listing = self._normalize(element)
            if listing is None:
                skipped += 1
                continue
            listings.append(listing)

        if skipped:
            logger.debug(f"⏭️ {skipped} imóveis descartados sem código ou título")

        return listings

    def _normalize(self, element: etree._Element) -> Optional[Listing]:
        texts = _leaf_texts(element)
        if not texts.get("CodigoImovel") or not texts.get("TituloImovel"):
            return None

        return Listing(
            **_fill(LISTING_FIELDS, texts),
            corretor=self._normalize_corretor(_child(element, "corretor")),
            fotos=self._normalize_fotos(_child(element, "Fotos")),
        )

    def _normalize_corretor(self, element: Optional[etree._Element]) -> Corretor:
        if element is None:
            return Corretor()
        return Corretor(**_fill(CORRETOR_FIELDS, _leaf_texts(element)))

    def _normalize_fotos(self, element: Optional[etree._Element]) -> tuple:
        if element is None:
            return ()
        return tuple(
            Foto(**_fill(FOTO_FIELDS, _leaf_texts(foto)))
            for foto in _children(element, "Foto")
        )
