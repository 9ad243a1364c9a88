"""Gerencia conexão com PostgreSQL."""
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from imoveis_sync.config import Settings


def resolve_database_url(raw_url: str, ssl: Optional[bool] = None) -> Tuple[URL, bool]:
    """
    Converte a URL para o driver asyncpg e resolve o uso de TLS.

    postgres:// e postgresql:// viram postgresql+asyncpg://. O parâmetro
    sslmode sai da URL (asyncpg não o aceita como argumento): TLS fica
    ligado, exceto com sslmode=disable, a menos que `ssl` force um valor.
    """
    if raw_url.startswith("postgresql://"):
        raw_url = raw_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif raw_url.startswith("postgres://"):
        raw_url = raw_url.replace("postgres://", "postgresql+asyncpg://", 1)

    url = make_url(raw_url)
    sslmode = url.query.get("sslmode")
    if ssl is None:
        ssl = sslmode != "disable"

    return url.difference_update_query(["sslmode"]), ssl


def create_engine(settings: Settings) -> AsyncEngine:
    """Cria a engine com o pool dono das conexões do store."""
    if not settings.database_url:
        raise ValueError("DATABASE_URL não configurada")

    url, ssl = resolve_database_url(settings.database_url, settings.database_ssl)

    connect_args: Dict[str, Any] = {"timeout": settings.database_connect_timeout}
    if url.get_backend_name() == "postgresql":
        # "require" = criptografa sem validar certificado
        connect_args["ssl"] = "require" if ssl else False

    return create_async_engine(
        url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=settings.database_pool_size,
        max_overflow=0,
        connect_args=connect_args,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def init_db(engine: AsyncEngine) -> None:
    """Cria tabelas do banco (usar só em dev)."""
    from imoveis_sync.domain.entities import Base
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
