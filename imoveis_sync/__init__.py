"""imoveis-sync: sincroniza o feed XML de imóveis com o PostgreSQL."""

__version__ = "1.0.0"
