from .connection import create_engine, create_session_factory, init_db, resolve_database_url

__all__ = [
    "create_engine",
    "create_session_factory",
    "init_db",
    "resolve_database_url",
]
