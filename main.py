from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from storefront.config import get_settings
from storefront.errors import AuthError, StoreError
from storefront.logging import configure_logging
from storefront.routers import admin, auth, products
from storefront.store.base import CatalogStore
from storefront.store.factory import build_store, get_store
from storefront.store.sql_store import SqlCatalogStore


@asynccontextmanager
async def lifespan(app: FastAPI):
    owned = app.state.store is None
    if owned:
        # raises ConfigurationError, aborting startup, when the backend isn't configured
        app.state.store = build_store(get_settings())
        if isinstance(app.state.store, SqlCatalogStore):
            await app.state.store.create_schema()
    try:
        yield
    finally:
        if owned:
            await app.state.store.close()
            app.state.store = None


def create_app(store: Optional[CatalogStore] = None) -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Storefront API",
        description="Product catalog and admin API for the storefront",
        lifespan=lifespan,
    )
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AuthError, auth.auth_error_handler)

    # Public catalog
    app.include_router(products.router)

    # Admin
    app.include_router(auth.router)
    app.include_router(admin.router)

    @app.get("/", tags=["General"])
    def root():
        return {"message": "Storefront Backend API"}

    @app.get("/health/store", tags=["General"])
    async def test_store_connection(store: CatalogStore = Depends(get_store)):
        try:
            await store.ping()
            return {"success": True, "message": "Catalog store reachable"}
        except StoreError as e:
            return {"success": False, "error": e.message}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.host, port=settings.port)
