# shopcart/controller.py
import logging
from typing import Callable, List, Optional

from pydantic import BaseModel

from .catalog import Catalog
from .store import CartEvent, CartStore
from .view import CartView, render_cart

logger = logging.getLogger(__name__)

THANK_YOU_MESSAGE = "Thank you for your purchase!"
EMPTY_CART_MESSAGE = "Your cart is empty!"

Surface = Callable[[CartView], None]


class CheckoutResult(BaseModel):
    status: str  # placed | empty
    message: str
    receipt: Optional[CartView] = None

    @property
    def placed(self) -> bool:
        return self.status == "placed"


class CartController:
    """
    Translates user intents into CartStore calls and pushes a fresh CartView
    to every subscribed surface whenever the store reports a change.
    """

    def __init__(self, store: CartStore, catalog: Catalog):
        self.store = store
        self.catalog = catalog
        self._surfaces: List[Surface] = []
        store.subscribe(self._on_change)

    # ---------------------------
    # Intents
    # ---------------------------
    def add(self, product_id: int) -> bool:
        product = self.catalog.get(product_id)
        if product is None:
            logger.debug("Ignoring add for unknown product %s", product_id)
            return False
        self.store.add_item(product)
        return True

    def increment(self, product_id: int) -> None:
        item = self.store.get_item(product_id)
        if item:
            self.store.update_quantity(product_id, item.quantity + 1)

    def decrement(self, product_id: int) -> None:
        # dropping below 1 removes the line, no confirmation asked
        item = self.store.get_item(product_id)
        if item:
            self.store.update_quantity(product_id, item.quantity - 1)

    def remove(self, product_id: int) -> None:
        self.store.remove_item(product_id)

    def set_quantity(self, product_id: int, quantity: int) -> None:
        self.store.update_quantity(product_id, quantity)

    def confirm_checkout(self) -> CheckoutResult:
        if self.store.is_empty():
            return CheckoutResult(status="empty", message=EMPTY_CART_MESSAGE)
        receipt = self.render()
        self.store.clear()
        logger.info("Checkout confirmed: %d item(s), total %s", receipt.item_count, receipt.total)
        return CheckoutResult(status="placed", message=THANK_YOU_MESSAGE, receipt=receipt)

    # ---------------------------
    # Rendering
    # ---------------------------
    def render(self) -> CartView:
        return render_cart(self.store, self.catalog)

    def subscribe(self, surface: Surface) -> None:
        self._surfaces.append(surface)

    def unsubscribe(self, surface: Surface) -> None:
        if surface in self._surfaces:
            self._surfaces.remove(surface)

    def _on_change(self, event: CartEvent) -> None:
        if not self._surfaces:
            return
        view = self.render()
        for surface in list(self._surfaces):
            surface(view)
