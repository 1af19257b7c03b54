from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response

from storefront.errors import NotFoundError, ProductValidationError, StoreError
from storefront.logging import get_logger
from storefront.routers.auth import require_admin
from storefront.routers.products import listing_response
from storefront.schemas.product import (
    MUTABLE_FIELDS,
    format_product_response,
    normalize_product_form,
    parse_product_id,
)
from storefront.store.base import CatalogStore
from storefront.store.factory import get_store

logger = get_logger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin)]
)


async def read_product_form(request: Request) -> Dict[str, Any]:
    """
    Pull the five product fields out of the request. Supports
    multipart/form-data, application/x-www-form-urlencoded and a JSON body.
    """
    content_type = request.headers.get("content-type", "").lower()
    if "multipart/form-data" in content_type or "application/x-www-form-urlencoded" in content_type:
        form = await request.form()
        return {key: form.get(key) for key in MUTABLE_FIELDS}

    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON data")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid JSON data")
    return {key: payload.get(key) for key in MUTABLE_FIELDS}


@router.get("/products", response_class=JSONResponse)
async def admin_read_products(store: CatalogStore = Depends(get_store)):
    return listing_response(await store.list())


@router.post("/products", response_class=JSONResponse, status_code=201)
async def create_product(request: Request, store: CatalogStore = Depends(get_store)):
    try:
        fields = normalize_product_form(await read_product_form(request))
        product = await store.insert(fields)
    except ProductValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except StoreError as e:
        logger.warning("Error adding product: %s", e)
        raise HTTPException(status_code=500, detail=f"Error adding product: {e.message}")

    return JSONResponse(
        content={"detail": format_product_response(product), "message": "Product added successfully!"},
        status_code=201,
    )


@router.put("/products/{product_id}", response_class=JSONResponse)
async def update_product(product_id: str, request: Request, store: CatalogStore = Depends(get_store)):
    """Full replacement: all five fields are required on every update."""
    try:
        fields = normalize_product_form(await read_product_form(request))
        await store.update(parse_product_id(product_id), fields)
    except ProductValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except StoreError as e:
        logger.warning("Error updating product %s: %s", product_id, e)
        raise HTTPException(status_code=500, detail=f"Error updating product: {e.message}")

    return JSONResponse(content={"message": "Product updated successfully!"}, status_code=200)


@router.delete("/products/{product_id}", status_code=204)
async def delete_product(product_id: str, store: CatalogStore = Depends(get_store)):
    try:
        await store.remove(parse_product_id(product_id))
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    except StoreError as e:
        logger.warning("Error deleting product %s: %s", product_id, e)
        raise HTTPException(status_code=500, detail=f"Error deleting product: {e.message}")
    return Response(status_code=204)
