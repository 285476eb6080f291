from .base import Base
from .session import create_engine, create_session_factory, create_tables
from .remote_store import SQLAlchemyRemoteStore

__all__ = [
    "Base",
    "create_engine",
    "create_session_factory",
    "create_tables",
    "SQLAlchemyRemoteStore",
]
