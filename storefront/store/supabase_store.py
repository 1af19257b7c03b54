from typing import Any, Callable, Dict, List

import anyio
import httpx
from postgrest.exceptions import APIError
from supabase import Client

from storefront.errors import NotFoundError, StoreError
from storefront.logging import get_logger
from storefront.schemas.product import ProductFields, ProductOut
from storefront.store.base import PRODUCTS_TABLE, CatalogStore, ProductListing

logger = get_logger(__name__)


class SupabaseCatalogStore(CatalogStore):
    """
    Products collection served by Supabase (PostgREST).

    The supabase client is synchronous, so each query runs in a worker
    thread to keep the event loop free.
    """

    def __init__(self, client: Client, table: str = PRODUCTS_TABLE):
        self.client = client
        self.table = table

    async def _execute(self, build_query: Callable[[Any], Any]) -> List[Dict[str, Any]]:
        def sync_execute():
            return build_query(self.client.table(self.table)).execute()

        try:
            response = await anyio.to_thread.run_sync(sync_execute)
        except APIError as e:
            raise StoreError(e.message or str(e)) from e
        except httpx.HTTPError as e:
            raise StoreError(str(e)) from e
        return response.data or []

    async def list(self) -> ProductListing:
        try:
            rows = await self._execute(
                lambda q: q.select("*").order("created_at", desc=True)
            )
        except StoreError as e:
            logger.error("Error fetching products: %s", e)
            return ProductListing(items=[], error=e.message)
        return ProductListing(items=[ProductOut.model_validate(r) for r in rows])

    async def get_by_id(self, product_id: int) -> ProductOut:
        rows = await self._execute(
            lambda q: q.select("*").eq("id", product_id).limit(1)
        )
        if not rows:
            raise NotFoundError(f"Product {product_id} not found")
        return ProductOut.model_validate(rows[0])

    async def insert(self, fields: ProductFields) -> ProductOut:
        rows = await self._execute(lambda q: q.insert(fields.model_dump()))
        if not rows:
            raise StoreError("Insert returned no row")
        return ProductOut.model_validate(rows[0])

    async def update(self, product_id: int, fields: ProductFields) -> None:
        rows = await self._execute(
            lambda q: q.update(fields.model_dump()).eq("id", product_id)
        )
        if not rows:
            raise NotFoundError(f"Product {product_id} not found")

    async def remove(self, product_id: int) -> None:
        await self._execute(lambda q: q.delete().eq("id", product_id))

    async def ping(self) -> None:
        await self._execute(lambda q: q.select("id").limit(1))
