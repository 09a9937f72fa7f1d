# shopcart/models.py
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """Catalog entry. Read-only to the cart."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: Optional[str] = ""
    price: Decimal = Field(ge=0)
    image: str = ""


class LineItem(BaseModel):
    """A product plus the quantity currently selected."""
    model_config = ConfigDict(validate_assignment=True)

    id: int
    name: str
    description: Optional[str] = ""
    price: Decimal = Field(ge=0)
    image: str = ""
    quantity: int = Field(default=1, ge=1)

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "LineItem":
        return cls(**product.model_dump(), quantity=quantity)

    @property
    def product(self) -> Product:
        return Product(**self.model_dump(exclude={"quantity"}))

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity
