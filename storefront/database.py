from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from supabase import create_client, Client

Base = declarative_base()


def create_engine_from_url(database_url: str, **kwargs) -> AsyncEngine:
    # Supabase's pooler (pgbouncer) breaks asyncpg prepared statements
    if database_url.startswith("postgresql+asyncpg"):
        kwargs.setdefault("connect_args", {"statement_cache_size": 0})
    return create_async_engine(database_url, echo=False, **kwargs)


def create_sessionmaker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False
    )


def create_supabase_client(url: str, key: str) -> Client:
    return create_client(url, key)
