from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import get_settings

settings = get_settings()


def engine_options(database_url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.echo_sql, "pool_pre_ping": True}
    if make_url(database_url).get_backend_name() == "sqlite":
        # Writers wait up to 30s for the single SQLite write lock.
        options["connect_args"] = {"timeout": 30}
    else:
        options["pool_recycle"] = 3600
    return options


engine = create_async_engine(settings.database_url, **engine_options(settings.database_url))

async_session = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
