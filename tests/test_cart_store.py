# tests/test_cart_store.py
from decimal import Decimal

import pytest

from shopcart.database import MemoryStorage
from shopcart.errors import CartNotLoadedError
from shopcart.models import Product
from shopcart.store import TAX_RATE, CartStore

TEN = Product(id=1, name="Mug", description="Ceramic", price=Decimal("10.00"), image="mug.jpg")
PEN = Product(id=2, name="Pen", description="Blue ink", price=Decimal("1.99"), image="pen.jpg")
LAMP = Product(id=3, name="Lamp", description="Desk lamp", price=Decimal("24.50"), image="lamp.jpg")


def new_store():
    return CartStore.open(MemoryStorage())


def test_add_same_product_n_times_keeps_one_line():
    store = new_store()
    for _ in range(5):
        store.add_item(TEN)
    assert len(store.items) == 1
    assert store.items[0].quantity == 5


def test_scenario_add_twice_totals():
    store = new_store()
    store.add_item(TEN)
    store.add_item(TEN)
    assert store.get_item_count() == 2
    assert store.get_subtotal() == Decimal("20.00")
    assert store.get_tax_amount() == Decimal("2.00")
    assert store.get_total() == Decimal("22.00")


def test_scenario_add_then_remove_is_empty():
    store = new_store()
    store.add_item(TEN)
    store.remove_item(1)
    assert store.items == ()
    assert store.get_total() == Decimal("0.00")


def test_update_quantity_zero_removes_without_error():
    store = new_store()
    store.add_item(TEN)
    store.update_quantity(1, 0)
    assert not store.contains(1)
    assert store.is_empty()


@pytest.mark.parametrize("qty", [0, -1, -10])
def test_update_quantity_non_positive_matches_remove(qty):
    a, b = new_store(), new_store()
    for s in (a, b):
        s.add_item(TEN)
        s.add_item(PEN)
        s.add_item(PEN)
    a.update_quantity(2, qty)
    b.remove_item(2)
    assert a.items == b.items


def test_update_quantity_sets_value():
    store = new_store()
    store.add_item(PEN)
    store.update_quantity(2, 7)
    assert store.get_item(2).quantity == 7
    assert store.get_subtotal() == Decimal("13.93")


def test_unknown_ids_are_noops():
    store = new_store()
    store.add_item(TEN)
    events = []
    store.subscribe(events.append)
    store.remove_item(99)
    store.update_quantity(99, 3)
    store.update_quantity(99, 0)
    assert [it.id for it in store.items] == [1]
    assert events == []


def test_total_is_subtotal_plus_tax_exactly():
    store = new_store()
    store.add_item(PEN)
    store.add_item(LAMP)
    store.add_item(PEN)
    subtotal = store.get_subtotal()
    assert store.get_total() == subtotal + subtotal * TAX_RATE
    assert store.get_total() == Decimal("28.48") + Decimal("28.48") * Decimal("0.10")


def test_insertion_order_preserved():
    store = new_store()
    store.add_item(LAMP)
    store.add_item(TEN)
    store.add_item(PEN)
    store.add_item(LAMP)
    assert [it.id for it in store.items] == [3, 1, 2]


def test_clear_empties_and_saves():
    storage = MemoryStorage()
    store = CartStore.open(storage)
    store.add_item(TEN)
    store.clear()
    assert store.is_empty()
    assert storage.get("cart") == "[]"


def test_items_are_read_only_copies():
    store = new_store()
    store.add_item(TEN)
    snapshot = store.items
    snapshot[0].quantity = 40
    assert store.get_item(1).quantity == 1


def test_operations_before_load_raise():
    store = CartStore(MemoryStorage())
    with pytest.raises(CartNotLoadedError):
        store.add_item(TEN)
    with pytest.raises(CartNotLoadedError):
        store.save()


def test_listeners_get_events_after_each_change():
    store = new_store()
    events = []
    store.subscribe(events.append)
    store.add_item(TEN)
    store.update_quantity(1, 3)
    store.update_quantity(1, 0)
    store.add_item(PEN)
    store.clear()
    assert [(e.kind, e.product_id) for e in events] == [
        ("added", 1),
        ("updated", 1),
        ("removed", 1),
        ("added", 2),
        ("cleared", None),
    ]

    store.unsubscribe(events.append)
    store.add_item(TEN)
    assert len(events) == 5
