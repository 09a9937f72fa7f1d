# shopcart/core.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict

from pydantic import BaseModel

from .models import Product

CENTS = Decimal("0.01")


class ProductIdIn(BaseModel):
    product_id: int


class UpdateQuantityIn(BaseModel):
    product_id: int
    quantity: int


def format_money(amount: Decimal) -> str:
    """Two decimal places, half-up, no currency sign."""
    return str(Decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP))


def _make_product_dict(p: Product) -> Dict[str, Any]:
    return {
        "id": p.id,
        "name": p.name,
        "description": p.description,
        "price": format_money(p.price),
        "image": p.image,
    }
