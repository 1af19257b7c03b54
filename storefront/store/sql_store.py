from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from storefront.database import Base, create_sessionmaker
from storefront.errors import NotFoundError, StoreError
from storefront.logging import get_logger
from storefront.models.product import Product
from storefront.schemas.product import ProductFields, ProductOut
from storefront.store.base import CatalogStore, ProductListing

logger = get_logger(__name__)


def _store_error(e: Exception) -> StoreError:
    # OverflowError: a Python int the driver cannot bind (e.g. beyond SQLite INTEGER)
    orig = getattr(e, "orig", None)
    return StoreError(str(orig) if orig is not None else str(e))


class SqlCatalogStore(CatalogStore):
    """Products table reached directly through SQLAlchemy (asyncpg, aiosqlite...)."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.SessionLocal = create_sessionmaker(engine)

    async def create_schema(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def list(self) -> ProductListing:
        try:
            async with self.SessionLocal() as session:
                result = await session.execute(
                    select(Product).order_by(Product.created_at.desc(), Product.id.desc())
                )
                products = result.scalars().all()
        except (SQLAlchemyError, OverflowError) as e:
            err = _store_error(e)
            logger.error("Error fetching products: %s", err)
            return ProductListing(items=[], error=err.message)
        return ProductListing(items=[ProductOut.model_validate(p) for p in products])

    async def get_by_id(self, product_id: int) -> ProductOut:
        try:
            async with self.SessionLocal() as session:
                result = await session.execute(select(Product).where(Product.id == product_id))
                product = result.scalar_one_or_none()
        except (SQLAlchemyError, OverflowError) as e:
            raise _store_error(e) from e
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        return ProductOut.model_validate(product)

    async def insert(self, fields: ProductFields) -> ProductOut:
        try:
            async with self.SessionLocal() as session:
                product = Product(**fields.model_dump())
                session.add(product)
                await session.commit()
                await session.refresh(product)
        except (SQLAlchemyError, OverflowError) as e:
            raise _store_error(e) from e
        return ProductOut.model_validate(product)

    async def update(self, product_id: int, fields: ProductFields) -> None:
        try:
            async with self.SessionLocal() as session:
                result = await session.execute(
                    update(Product)
                    .where(Product.id == product_id)
                    .values(**fields.model_dump())
                )
                await session.commit()
        except (SQLAlchemyError, OverflowError) as e:
            raise _store_error(e) from e
        if result.rowcount == 0:
            raise NotFoundError(f"Product {product_id} not found")

    async def remove(self, product_id: int) -> None:
        try:
            async with self.SessionLocal() as session:
                await session.execute(delete(Product).where(Product.id == product_id))
                await session.commit()
        except (SQLAlchemyError, OverflowError) as e:
            raise _store_error(e) from e

    async def ping(self) -> None:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OverflowError) as e:
            raise _store_error(e) from e

    async def close(self) -> None:
        await self.engine.dispose()
