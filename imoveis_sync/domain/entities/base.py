"""Base declarativa para os modelos do banco."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Classe base para todos os modelos."""
    pass
