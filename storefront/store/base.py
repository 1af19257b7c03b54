from abc import ABC, abstractmethod
from typing import List, NamedTuple, Optional

from storefront.schemas.product import ProductFields, ProductOut

PRODUCTS_TABLE = "Products"


class ProductListing(NamedTuple):
    items: List[ProductOut]
    error: Optional[str] = None


class CatalogStore(ABC):
    """
    Thin adapter over the Products collection.

    Every call is a fresh round trip to the backend: nothing is cached and
    mutations return only success/failure, so callers list() again after
    changing anything.
    """

    @abstractmethod
    async def list(self) -> ProductListing:
        """Newest first. Backend failures come back in ProductListing.error."""

    @abstractmethod
    async def get_by_id(self, product_id: int) -> ProductOut:
        """Raises NotFoundError when no row matches."""

    @abstractmethod
    async def insert(self, fields: ProductFields) -> ProductOut:
        ...

    @abstractmethod
    async def update(self, product_id: int, fields: ProductFields) -> None:
        ...

    @abstractmethod
    async def remove(self, product_id: int) -> None:
        ...

    @abstractmethod
    async def ping(self) -> None:
        ...

    async def close(self) -> None:
        return None
