# shopcart/store.py
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from .database import StorageSlot, decode_snapshot, encode_snapshot
from .errors import CartNotLoadedError, StorageUnavailableError
from .models import LineItem, Product

logger = logging.getLogger(__name__)

TAX_RATE = Decimal("0.10")
DEFAULT_KEY = "cart"


@dataclass(frozen=True)
class CartEvent:
    """Sent to listeners after a mutation has been persisted."""
    kind: str  # loaded | added | removed | updated | cleared
    product_id: Optional[int] = None


Listener = Callable[[CartEvent], None]


class CartStore:
    """
    Single source of truth for cart contents.

    Every mutation is saved before listeners hear about it. If the save fails
    the in-memory items are put back the way they were and the storage error
    propagates, so what is shown never runs ahead of what is persisted.
    """

    def __init__(self, storage: StorageSlot, key: str = DEFAULT_KEY):
        self._storage = storage
        self._key = key
        self._items: List[LineItem] = []
        self._listeners: List[Listener] = []
        self._loaded = False

    @classmethod
    def open(cls, storage: StorageSlot, key: str = DEFAULT_KEY) -> "CartStore":
        store = cls(storage, key)
        store.load()
        return store

    # ---------------------------
    # Persistence
    # ---------------------------
    def load(self) -> None:
        try:
            raw = self._storage.get(self._key)
        except StorageUnavailableError:
            raise
        except Exception as e:
            raise StorageUnavailableError(self._key, str(e)) from e
        self._items = decode_snapshot(raw)
        self._loaded = True
        logger.debug("Loaded cart '%s' with %d line item(s)", self._key, len(self._items))
        self._notify(CartEvent("loaded"))

    def save(self) -> None:
        self._require_loaded()
        try:
            self._storage.set(self._key, encode_snapshot(self._items))
        except StorageUnavailableError:
            raise
        except Exception as e:
            # any slot failure counts as storage being unavailable
            raise StorageUnavailableError(self._key, str(e)) from e

    # ---------------------------
    # Mutations
    # ---------------------------
    def add_item(self, product: Product) -> None:
        self._require_loaded()
        previous = self._checkpoint()
        item = self._find(product.id)
        if item:
            item.quantity += 1
        else:
            self._items.append(LineItem.from_product(product))
        self._commit(previous, CartEvent("added", product.id))

    def remove_item(self, product_id: int) -> None:
        self._require_loaded()
        if self._find(product_id) is None:
            return
        previous = self._checkpoint()
        self._items = [it for it in self._items if it.id != product_id]
        self._commit(previous, CartEvent("removed", product_id))

    def update_quantity(self, product_id: int, new_quantity: int) -> None:
        self._require_loaded()
        item = self._find(product_id)
        if item is None:
            return
        if new_quantity <= 0:
            self.remove_item(product_id)
            return
        previous = self._checkpoint()
        item.quantity = new_quantity
        self._commit(previous, CartEvent("updated", product_id))

    def clear(self) -> None:
        self._require_loaded()
        previous = self._checkpoint()
        self._items = []
        self._commit(previous, CartEvent("cleared"))

    # ---------------------------
    # Derived values (pure)
    # ---------------------------
    def get_subtotal(self) -> Decimal:
        return sum((it.line_total for it in self._items), Decimal("0"))

    def get_tax_amount(self) -> Decimal:
        return self.get_subtotal() * TAX_RATE

    def get_total(self) -> Decimal:
        subtotal = self.get_subtotal()
        return subtotal + subtotal * TAX_RATE

    def get_item_count(self) -> int:
        return sum(it.quantity for it in self._items)

    # ---------------------------
    # Read access
    # ---------------------------
    @property
    def items(self) -> Tuple[LineItem, ...]:
        return tuple(it.model_copy() for it in self._items)

    def get_item(self, product_id: int) -> Optional[LineItem]:
        item = self._find(product_id)
        return item.model_copy() if item else None

    def contains(self, product_id: int) -> bool:
        return self._find(product_id) is not None

    def is_empty(self) -> bool:
        return not self._items

    @property
    def loaded(self) -> bool:
        return self._loaded

    # ---------------------------
    # Notifications
    # ---------------------------
    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ---------------------------
    # Helpers
    # ---------------------------
    def _find(self, product_id: int) -> Optional[LineItem]:
        for it in self._items:
            if it.id == product_id:
                return it
        return None

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise CartNotLoadedError("CartStore.load() must run before any other operation")

    def _checkpoint(self) -> List[LineItem]:
        return [it.model_copy() for it in self._items]

    def _commit(self, previous: List[LineItem], event: CartEvent) -> None:
        try:
            self.save()
        except StorageUnavailableError:
            self._items = previous
            logger.error("Cart change '%s' rolled back, snapshot could not be saved", event.kind)
            raise
        logger.debug("Cart %s (product=%s), %d item(s)", event.kind, event.product_id, self.get_item_count())
        self._notify(event)

    def _notify(self, event: CartEvent) -> None:
        for listener in list(self._listeners):
            listener(event)
