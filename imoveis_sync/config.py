"""Configurações da aplicação - carrega variáveis do .env"""

from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_FEED_URL = (
    "https://imob.valuegaia.com.br/integra/midia.ashx"
    "?midia=GaiaWebServiceImovel&p=CHANGE_ME"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",  # carrega local
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # ===========================================
    # CORE
    # ===========================================
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: List[str] = ["*"]

    # ===========================================
    # BANCO (PostgreSQL)
    # ===========================================
    database_url: Optional[str] = None
    # None = segue o sslmode da URL (TLS ligado, exceto sslmode=disable)
    database_ssl: Optional[bool] = None
    database_pool_size: int = 20
    database_connect_timeout: float = 2.0
    database_auto_create: bool = False  # create_all no startup (só dev)

    # ===========================================
    # FEED XML (Gaia)
    # ===========================================
    feed_url: str = DEFAULT_FEED_URL
    feed_timeout: float = 30.0
    feed_user_agent: str = "ImoveisAPI/1.0"

    # ===========================================
    # SINCRONIZAÇÃO AGENDADA
    # ===========================================
    sync_interval_minutes: int = 0  # 0 = desligado

    # ===========================================
    # PROPRIEDADES
    # ===========================================
    @property
    def database_configured(self) -> bool:
        """Verifica se há banco configurado para a sincronização."""
        return bool(self.database_url)

    @property
    def scheduler_enabled(self) -> bool:
        return self.database_configured and self.sync_interval_minutes > 0


@lru_cache
def get_settings() -> Settings:
    return Settings()
