from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from storefront.errors import NotFoundError, StoreError
from storefront.schemas.product import format_product_response, parse_product_id
from storefront.store.base import CatalogStore, ProductListing
from storefront.store.factory import get_store

router = APIRouter(tags=["catalogue"])

# Catalog pages always reflect the latest committed state
NO_STORE = {"Cache-Control": "no-store"}


def listing_response(listing: ProductListing) -> JSONResponse:
    return JSONResponse(
        content={
            "detail": [format_product_response(p) for p in listing.items],
            "error": listing.error,
        },
        status_code=200,
        headers=NO_STORE,
    )


@router.get("/products", response_class=JSONResponse)
async def read_products(store: CatalogStore = Depends(get_store)):
    return listing_response(await store.list())


@router.get("/products/{product_id}", response_class=JSONResponse)
async def read_product(product_id: str, store: CatalogStore = Depends(get_store)):
    try:
        product = await store.get_by_id(parse_product_id(product_id))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except StoreError as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {e.message}")
    return JSONResponse(
        content={"detail": format_product_response(product)},
        status_code=200,
        headers=NO_STORE,
    )
