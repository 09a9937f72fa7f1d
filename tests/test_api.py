# tests/test_api.py
import asyncio
import inspect

import httpx
from fastapi.testclient import TestClient

from shopcart.catalog import Catalog, DEFAULT_PRODUCTS
from shopcart.controller import CartController
from shopcart.database import MemoryStorage
from shopcart.errors import StorageUnavailableError
from shopcart.main import app, get_controller
from shopcart.store import CartStore

client = TestClient(app)


class FlakyStorage(MemoryStorage):
    broken = False

    def set(self, key, value):
        if self.broken:
            raise StorageUnavailableError(key, "disk full")
        super().set(key, value)


def reset(storage=None):
    storage = storage or MemoryStorage()
    ctl = CartController(CartStore.open(storage), Catalog(DEFAULT_PRODUCTS))
    app.dependency_overrides[get_controller] = lambda: ctl
    return ctl


def test_products_listing_and_lookup():
    reset()
    r = client.get("/products")
    assert r.status_code == 200
    assert len(r.json()) == len(DEFAULT_PRODUCTS)
    assert r.json()[0]["button_label"] == "Add to Cart"

    assert client.get("/products/1").json()["name"] == DEFAULT_PRODUCTS[0].name
    assert client.get("/products/999").status_code == 404
    assert client.get("/products/search", params={"name": "watch"}).json()[0]["id"] == 2


def test_add_twice_and_totals():
    reset()
    client.post("/cart/add", json={"product_id": 1})
    body = client.post("/cart/add", json={"product_id": 1}).json()
    assert body["item_count"] == 2
    assert body["subtotal"] == "199.98"
    assert body["tax"] == "20.00"
    assert body["total"] == "219.98"
    assert len(body["items"]) == 1


def test_add_unknown_product_404():
    reset()
    r = client.post("/cart/add", json={"product_id": 999})
    assert r.status_code == 404
    assert client.get("/cart").json()["item_count"] == 0


def test_quantity_intents():
    reset()
    client.post("/cart/add", json={"product_id": 3})
    assert client.post("/cart/increment", json={"product_id": 3}).json()["item_count"] == 2
    assert client.post("/cart/quantity", json={"product_id": 3, "quantity": 5}).json()["item_count"] == 5
    assert client.post("/cart/decrement", json={"product_id": 3}).json()["item_count"] == 4
    body = client.post("/cart/quantity", json={"product_id": 3, "quantity": 0}).json()
    assert body["items"] == []
    # unknown id: no-op, still 200
    assert client.post("/cart/remove", json={"product_id": 3}).status_code == 200


def test_checkout():
    ctl = reset()
    r = client.post("/cart/checkout")
    assert r.status_code == 400
    assert r.json()["detail"] == "cart empty"

    client.post("/cart/add", json={"product_id": 5})
    r = client.post("/cart/checkout")
    assert r.status_code == 200
    assert r.json()["status"] == "placed"
    assert r.json()["receipt"]["total"] == "37.95"
    assert ctl.store.is_empty()


def test_storage_failure_is_503():
    storage = FlakyStorage()
    ctl = reset(storage)
    client.post("/cart/add", json={"product_id": 1})
    storage.broken = True
    r = client.post("/cart/add", json={"product_id": 2})
    assert r.status_code == 503
    assert "disk full" in r.json()["detail"]
    assert [it.id for it in ctl.store.items] == [1]


async def _checkout_async():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        await ac.post("/cart/add", json={"product_id": 4})
        first = await ac.post("/cart/checkout")
        second = await ac.post("/cart/checkout")
        return first, second


def test_async_checkout_then_empty():
    reset()
    first, second = asyncio.run(_checkout_async())
    assert first.status_code == 200
    assert second.status_code == 400


def test_handlers_run_on_event_loop():
    # sync handlers would go to the threadpool and mutate the cart concurrently
    assert inspect.iscoroutinefunction(get_controller)
    for route in app.routes:
        if getattr(route, "path", "").startswith(("/cart", "/products")):
            assert inspect.iscoroutinefunction(route.endpoint), route.path
