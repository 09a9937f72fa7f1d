# shopcart/catalog.py
import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import TypeAdapter

from .models import Product

logger = logging.getLogger(__name__)

DEFAULT_PRODUCTS: List[Product] = [
    Product(
        id=1,
        name="Wireless Headphones",
        description="Over-ear headphones with active noise cancelling.",
        price=Decimal("99.99"),
        image="images/headphones.jpg",
    ),
    Product(
        id=2,
        name="Smart Watch",
        description="Fitness tracking, notifications and a week of battery.",
        price=Decimal("199.99"),
        image="images/smartwatch.jpg",
    ),
    Product(
        id=3,
        name="Laptop Backpack",
        description="Water-resistant backpack with a padded 15\" sleeve.",
        price=Decimal("49.99"),
        image="images/backpack.jpg",
    ),
    Product(
        id=4,
        name="Portable Speaker",
        description="Bluetooth speaker, 12 hours of playback.",
        price=Decimal("79.99"),
        image="images/speaker.jpg",
    ),
    Product(
        id=5,
        name="USB-C Hub",
        description="7-in-1 hub with HDMI, card reader and 100W passthrough.",
        price=Decimal("34.50"),
        image="images/usb-hub.jpg",
    ),
    Product(
        id=6,
        name="Mechanical Keyboard",
        description="Hot-swappable switches, RGB backlight.",
        price=Decimal("129.00"),
        image="images/keyboard.jpg",
    ),
]


class Catalog:
    """Static product list, looked up by id. Order is display order."""

    def __init__(self, products: Iterable[Product]):
        self._products: Dict[int, Product] = {}
        for p in products:
            if p.id in self._products:
                raise ValueError(f"duplicate product id {p.id}")
            self._products[p.id] = p

    def get(self, product_id: int) -> Optional[Product]:
        return self._products.get(product_id)

    def all(self) -> List[Product]:
        return list(self._products.values())

    def search(self, term: str) -> List[Product]:
        term = term.lower()
        return [p for p in self._products.values() if term in p.name.lower()]

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._products


def load_catalog(path: Optional[Union[str, Path]] = None) -> Catalog:
    """Load a catalog from a JSON array of products, or the built-in one."""
    if path is None:
        return Catalog(DEFAULT_PRODUCTS)
    path = Path(path).expanduser()
    data = json.loads(path.read_text(encoding="utf-8"))
    products = TypeAdapter(List[Product]).validate_python(data)
    logger.info("Loaded %d products from %s", len(products), path)
    return Catalog(products)
