import math
import re
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel

from storefront.errors import NotFoundError, ProductValidationError

MUTABLE_FIELDS = ("name", "description", "price", "image_url", "stock")


class ProductFields(BaseModel):
    """The five fields an admin sets. Updates always replace all of them."""
    name: str
    description: Optional[str] = None
    price: float
    image_url: Optional[str] = None
    stock: int


class ProductOut(ProductFields):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True

    @property
    def in_stock(self) -> bool:
        return self.stock > 0


def format_product_response(product: ProductOut) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "image_url": product.image_url,
        "stock": product.stock,
        "in_stock": product.in_stock,
        "created_at": product.created_at.isoformat() if product.created_at else None,
    }


# ====================== NORMALIZER ======================

# Postgres integer/bigint limits for the Products columns
MAX_STOCK = 2**31 - 1
MAX_PRODUCT_ID = 2**63 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


def _text(raw: Mapping[str, Any], key: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _parse_price(value: str) -> float:
    text = value.strip()
    if not _DECIMAL_RE.fullmatch(text):
        raise ProductValidationError(f"Invalid price: {value!r}")
    price = float(text)
    if not math.isfinite(price):
        raise ProductValidationError(f"Invalid price: {value!r}")
    if price < 0:
        raise ProductValidationError("Price cannot be negative")
    return price


def _parse_stock(value: str) -> int:
    text = value.strip()
    if not _INTEGER_RE.fullmatch(text):
        raise ProductValidationError(f"Invalid stock: {value!r}")
    stock = int(text)
    if stock < 0:
        raise ProductValidationError("Stock cannot be negative")
    if stock > MAX_STOCK:
        raise ProductValidationError(f"Stock cannot exceed {MAX_STOCK}")
    return stock


def parse_product_id(value: Any) -> int:
    """
    Ids arrive as path strings. Anything that can't be a stored id
    (not digits, zero, beyond bigint) can't match a row either.
    """
    text = value if isinstance(value, str) else str(value)
    if not _INTEGER_RE.fullmatch(text) or text[0] in "+-":
        raise NotFoundError(f"Product {value!r} not found")
    product_id = int(text)
    if not 0 < product_id <= MAX_PRODUCT_ID:
        raise NotFoundError(f"Product {value!r} not found")
    return product_id


def normalize_product_form(raw: Mapping[str, Any]) -> ProductFields:
    """
    Coerce raw form values (strings) into typed product fields.

    Blank description/image_url become None. The name is re-checked here
    even though the admin form marks it required, since API callers can
    skip the form entirely.
    """
    name = _text(raw, "name").strip()
    if not name:
        raise ProductValidationError("Product name is required")

    description = _text(raw, "description")
    image_url = _text(raw, "image_url")

    return ProductFields(
        name=name,
        description=description or None,
        price=_parse_price(_text(raw, "price")),
        image_url=image_url or None,
        stock=_parse_stock(_text(raw, "stock")),
    )
