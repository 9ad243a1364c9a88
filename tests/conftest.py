import pytest

from imoveis_sync.config import Settings
from imoveis_sync.infrastructure.scheduler import stop_scheduler


@pytest.fixture
def test_settings() -> Settings:
    """Configurações isoladas do .env local e sem scheduler."""
    return Settings(
        _env_file=None,
        environment="test",
        database_url=None,
        sync_interval_minutes=0,
        feed_url="https://feed.example.com/carga.xml",
    )


@pytest.fixture(autouse=True)
def reset_scheduler():
    """Garante que nenhum teste herde o scheduler global de outro."""
    yield
    stop_scheduler()
