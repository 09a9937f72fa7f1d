# shopcart/view.py
from typing import List

from pydantic import BaseModel

from .catalog import Catalog
from .core import format_money
from .store import CartStore

IN_CART_LABEL = "In Cart"
ADD_TO_CART_LABEL = "Add to Cart"


class LineItemView(BaseModel):
    id: int
    name: str
    image: str
    price: str
    quantity: int
    line_total: str


class ProductCardView(BaseModel):
    id: int
    name: str
    description: str
    image: str
    price: str
    in_cart: bool
    button_label: str


class CartView(BaseModel):
    item_count: int
    items: List[LineItemView]
    subtotal: str
    tax: str
    total: str
    products: List[ProductCardView] = []


def render_cart(store: CartStore, catalog: Catalog) -> CartView:
    """Map the store's current contents and totals to what a surface displays.
    Only reads from the store."""
    items = store.items
    in_cart = {it.id for it in items}

    return CartView(
        item_count=store.get_item_count(),
        items=[
            LineItemView(
                id=it.id,
                name=it.name,
                image=it.image,
                price=format_money(it.price),
                quantity=it.quantity,
                line_total=format_money(it.line_total),
            )
            for it in items
        ],
        subtotal=format_money(store.get_subtotal()),
        tax=format_money(store.get_tax_amount()),
        total=format_money(store.get_total()),
        products=[
            ProductCardView(
                id=p.id,
                name=p.name,
                description=p.description or "",
                image=p.image,
                price=format_money(p.price),
                in_cart=p.id in in_cart,
                button_label=IN_CART_LABEL if p.id in in_cart else ADD_TO_CART_LABEL,
            )
            for p in catalog.all()
        ],
    )
