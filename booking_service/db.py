from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from .config import DATABASE_URL, SQL_ECHO


def get_engine(database_url: str, echo: bool = False):
    kwargs = {"echo": echo, "future": True}
    # aiosqlite connections must not outlive the event loop that opened them
    if database_url.startswith("sqlite"):
        kwargs["poolclass"] = NullPool
    return create_async_engine(database_url, **kwargs)


def get_session(engine):
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
    )


engine = get_engine(DATABASE_URL, echo=SQL_ECHO)
SessionLocal = get_session(engine)

Base = declarative_base()


async def init_db():
    # imported for table registration on Base.metadata
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db():
    async with SessionLocal() as session:
        yield session
