"""
ImovelRecord - Tabela imoveis_vale
==================================

Espelho persistido do feed Gaia. Uma linha por código de imóvel.

- Nunca é apagada fisicamente: imóveis que somem do feed ficam com ativo = false
- As colunas seguem exatamente NormalizedRow (listing_mapper)
"""
from datetime import date
from typing import Optional
from sqlalchemy import String, Integer, Boolean, Text, Numeric, Date, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ImovelRecord(Base):
    """Imóvel sincronizado a partir do feed."""

    __tablename__ = "imoveis_vale"

    codigo_imovel: Mapped[str] = mapped_column(String(50), primary_key=True)

    # Classificação
    finalidade: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    tipo_imovel: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    tipo_oferta: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    padrao_imovel: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    padrao_localizacao: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Localização
    cidade: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    bairro: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    estado: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    endereco: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Valores
    preco_venda: Mapped[Optional[float]] = mapped_column(Numeric(15, 2), nullable=True)
    preco_aluguel: Mapped[Optional[float]] = mapped_column(Numeric(15, 2), nullable=True)
    preco_condominio: Mapped[Optional[float]] = mapped_column(Numeric(15, 2), nullable=True)

    # Detalhes
    area_util: Mapped[Optional[float]] = mapped_column(Numeric(10, 2), nullable=True)
    qtd_dormitorios: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    qtd_suites: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    qtd_banheiros: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    qtd_vagas_cobertas: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    ano_construcao: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Comodidades
    mobiliado: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    ar_condicionado: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    piscina: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    elevador: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Textos
    titulo_imovel: Mapped[Optional[str]] = mapped_column(String(300), nullable=True)
    observacoes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    url_site: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Status e datas do feed
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)
    data_cadastro: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    data_atualizacao: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    __table_args__ = (
        Index("ix_imoveis_vale_cidade_ativo", "cidade", "ativo"),
    )

    def __repr__(self) -> str:
        return f"<ImovelRecord(codigo='{self.codigo_imovel}', cidade='{self.cidade}', ativo={self.ativo})>"
