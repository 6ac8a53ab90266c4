from shared.database.postgres import (
    AsyncSessionFactory,
    Base,
    get_async_engine,
    get_async_session_factory,
)

__all__ = [
    "AsyncSessionFactory",
    "Base",
    "get_async_engine",
    "get_async_session_factory",
]
