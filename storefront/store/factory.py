from fastapi import Request

from storefront.config import SUPPORTED_BACKENDS, Settings
from storefront.database import create_engine_from_url, create_supabase_client
from storefront.errors import ConfigurationError
from storefront.logging import get_logger
from storefront.store.base import CatalogStore
from storefront.store.sql_store import SqlCatalogStore
from storefront.store.supabase_store import SupabaseCatalogStore

logger = get_logger(__name__)


def build_store(settings: Settings) -> CatalogStore:
    """Create the configured store. Missing connection parameters are fatal."""
    backend = settings.store_backend
    if backend not in SUPPORTED_BACKENDS:
        raise ConfigurationError(
            f"Unknown STORE_BACKEND {backend!r}; expected one of {', '.join(SUPPORTED_BACKENDS)}"
        )

    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_key:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set")
        logger.info("Using Supabase catalog store")
        return SupabaseCatalogStore(
            create_supabase_client(settings.supabase_url, settings.supabase_key)
        )

    if not settings.database_url:
        raise ConfigurationError("DATABASE_URL must be set when STORE_BACKEND=sql")
    logger.info("Using SQL catalog store")
    return SqlCatalogStore(create_engine_from_url(settings.database_url))


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store
