"""
MAPEAMENTO LISTING -> LINHA NORMALIZADA
=======================================

Função pura única que converte um Listing (strings do feed) nos valores
tipados das colunas da tabela imoveis_vale. É consumida por:

- ListingStoreService: escrita parametrizada no PostgreSQL
- sql_export_service: renderização literal dos INSERTs

Regras de coerção:
- Preços/áreas "0" ou "0.00" viram None (zero não é valor econômico válido)
- Contadores "0" viram None
- Flags: "1"/"true" -> True, qualquer outra coisa -> False
- Datas DD/MM/AAAA -> date; ISO passa pelo parser genérico; resto -> None
"""

import math
import re
from dataclasses import astuple, dataclass, fields
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple

from imoveis_sync.domain.listing import Listing


# =============================================================================
# TABELAS DE TRADUÇÃO
# =============================================================================

TIPO_OFERTA_MAP = {
    "1": "Venda",
    "2": "Aluguel",
    "3": "Venda/Aluguel",
}
TIPO_OFERTA_PADRAO = "Venda"

FINALIDADE_MAP = {
    "residencial": "Residencial",
    "comercial": "Comercial",
    "industrial": "Industrial",
    "rural": "Rural",
}
FINALIDADE_PADRAO = "Residencial"

PADRAO_MAP = {
    "alto padrão": "Alto Padrão",
    "alto padrao": "Alto Padrão",
    "médio padrão": "Médio Padrão",
    "medio padrao": "Médio Padrão",
    "padrão": "Padrão",
    "padrao": "Padrão",
}
PADRAO_NAO_INFORMADO = ("não informado", "nao informado")

VALORES_ZERO_DECIMAL = ("0", "0.00")
VALORES_VERDADEIROS = ("1", "true")

_DATA_BR = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})")
_INTEIRO = re.compile(r"^\s*([-+]?\d+)")


# =============================================================================
# LINHA NORMALIZADA
# =============================================================================

@dataclass(frozen=True)
class NormalizedRow:
    """Valores das colunas de imoveis_vale, na ordem da tabela."""

    codigo_imovel: str
    finalidade: Optional[str]
    tipo_imovel: str
    cidade: str
    tipo_oferta: str
    preco_venda: Optional[float]
    preco_aluguel: Optional[float]
    qtd_dormitorios: Optional[int]
    qtd_suites: Optional[int]
    area_util: Optional[float]
    bairro: Optional[str]
    qtd_vagas_cobertas: Optional[int]
    qtd_banheiros: Optional[int]
    padrao_imovel: Optional[str]
    padrao_localizacao: Optional[str]
    ano_construcao: Optional[int]
    mobiliado: bool
    ar_condicionado: bool
    piscina: bool
    elevador: bool
    estado: Optional[str]
    endereco: Optional[str]
    titulo_imovel: Optional[str]
    preco_condominio: Optional[float]
    observacoes: Optional[str]
    ativo: bool
    data_cadastro: Optional[date]
    data_atualizacao: Optional[date]
    url_site: Optional[str]

    def as_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in COLUMNS}

    def as_tuple(self) -> Tuple[Any, ...]:
        return astuple(self)


COLUMNS: Tuple[str, ...] = tuple(f.name for f in fields(NormalizedRow))


# =============================================================================
# COERÇÕES
# =============================================================================

def parse_numeric(value: Optional[str]) -> Optional[float]:
    """Preço/área. "0", "0.00", vazio ou inválido -> None."""
    if not value or value in VALORES_ZERO_DECIMAL:
        return None
    try:
        number = float(value.strip().replace(",", "."))
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_integer(value: Optional[str]) -> Optional[int]:
    """Contadores. Lê o inteiro inicial ("3 quartos" -> 3); "0" -> None."""
    if not value or value == "0":
        return None
    match = _INTEIRO.match(value)
    if not match:
        return None
    return int(match.group(1))


def parse_boolean(value: Optional[str]) -> bool:
    return value in VALORES_VERDADEIROS


def parse_date(value: Optional[str]) -> Optional[date]:
    """DD/MM/AAAA do feed ou ISO 8601. Datas impossíveis -> None."""
    if not value:
        return None

    match = _DATA_BR.match(value)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError:
        return None


def empty_to_none(value: Optional[str]) -> Optional[str]:
    return value or None


# =============================================================================
# TRADUÇÕES
# =============================================================================

def map_tipo_oferta(tipo_oferta: str) -> str:
    if not tipo_oferta:
        return TIPO_OFERTA_PADRAO
    return TIPO_OFERTA_MAP.get(tipo_oferta, tipo_oferta)


def map_finalidade(finalidade: str) -> str:
    if not finalidade:
        return FINALIDADE_PADRAO
    return FINALIDADE_MAP.get(finalidade.lower(), finalidade)


def map_padrao(padrao: str) -> Optional[str]:
    """Usado para PadraoImovel e PadraoLocalizacao."""
    if not padrao or padrao.lower() in PADRAO_NAO_INFORMADO:
        return None
    return PADRAO_MAP.get(padrao.lower(), padrao)


def build_complete_address(listing: Listing) -> str:
    """Rua, número, complemento, bairro, cidade, UF e CEP, pulando vazios."""
    parts = [
        listing.endereco,
        listing.numero,
        listing.complemento_endereco,
        listing.bairro,
        listing.cidade,
        listing.estado,
    ]
    if listing.cep:
        parts.append(f"CEP: {listing.cep}")
    return ", ".join(part for part in parts if part)


# =============================================================================
# FUNÇÃO PRINCIPAL
# =============================================================================

def to_normalized_row(listing: Listing) -> NormalizedRow:
    return NormalizedRow(
        codigo_imovel=listing.codigo_imovel,
        finalidade=map_finalidade(listing.finalidade),
        tipo_imovel=listing.tipo_imovel,
        cidade=listing.cidade,
        tipo_oferta=map_tipo_oferta(listing.tipo_oferta),
        preco_venda=parse_numeric(listing.preco_venda),
        preco_aluguel=parse_numeric(listing.preco_aluguel),
        qtd_dormitorios=parse_integer(listing.qtd_dormitorios),
        qtd_suites=parse_integer(listing.qtd_suites),
        area_util=parse_numeric(listing.area_util),
        bairro=empty_to_none(listing.bairro),
        qtd_vagas_cobertas=parse_integer(listing.qtd_vagas_cobertas),
        qtd_banheiros=parse_integer(listing.qtd_banheiros),
        padrao_imovel=map_padrao(listing.padrao_imovel),
        padrao_localizacao=map_padrao(listing.padrao_localizacao),
        ano_construcao=parse_integer(listing.ano_construcao),
        mobiliado=parse_boolean(listing.mobiliado),
        ar_condicionado=parse_boolean(listing.ar_condicionado),
        piscina=parse_boolean(listing.piscina),
        elevador=parse_boolean(listing.elevador),
        estado=empty_to_none(listing.estado),
        endereco=empty_to_none(build_complete_address(listing)),
        titulo_imovel=empty_to_none(listing.titulo_imovel),
        preco_condominio=parse_numeric(listing.preco_condominio),
        observacoes=empty_to_none(listing.observacao),
        ativo=parse_boolean(listing.publicar),
        data_cadastro=parse_date(listing.data_cadastro),
        data_atualizacao=parse_date(listing.data_atualizacao),
        url_site=empty_to_none(listing.url_gaia_site),
    )
