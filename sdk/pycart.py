# sdk/pycart.py
import os
from typing import Optional

import httpx
import requests


class CartClient:
    def __init__(self, base_url: Optional[str] = None, timeout: int = 10):
        base_url = base_url or os.environ.get("PYCART_BASE_URL", "http://127.0.0.1:8085")
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    # Products
    def list_products(self):
        r = self.session.get(f"{self.base_url}/products", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def search_products(self, name: str):
        r = self.session.get(f"{self.base_url}/products/search", params={"name": name}, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_product(self, product_id: int):
        r = self.session.get(f"{self.base_url}/products/{product_id}", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Cart
    def view_cart(self):
        r = self.session.get(f"{self.base_url}/cart", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def _cart_intent(self, intent: str, product_id: int):
        r = self.session.post(f"{self.base_url}/cart/{intent}", json={"product_id": int(product_id)}, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def add_to_cart(self, product_id: int):
        return self._cart_intent("add", product_id)

    def increment(self, product_id: int):
        return self._cart_intent("increment", product_id)

    def decrement(self, product_id: int):
        return self._cart_intent("decrement", product_id)

    def remove_from_cart(self, product_id: int):
        return self._cart_intent("remove", product_id)

    def set_quantity(self, product_id: int, quantity: int):
        r = self.session.post(
            f"{self.base_url}/cart/quantity",
            json={"product_id": int(product_id), "quantity": int(quantity)},
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json()

    # Checkout
    def checkout(self):
        r = self.session.post(f"{self.base_url}/cart/checkout", timeout=self.timeout)
        # 400 "cart empty" is a normal outcome, hand the body back
        if r.status_code == 400:
            return r.json()
        r.raise_for_status()
        return r.json()

    async def checkout_async(self):
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.post(f"{self.base_url}/cart/checkout")
            return r


if __name__ == "__main__":
    import argparse
    from rich import print

    parser = argparse.ArgumentParser(description="pycart client")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-products", help="List the catalog")

    sp = subparsers.add_parser("search", help="Search products by name")
    sp.add_argument("--name", required=True, help="Product name to search")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", type=int, required=True)

    subparsers.add_parser("view-cart", help="View cart contents and totals")

    for intent in ("add", "increment", "decrement", "remove"):
        p = subparsers.add_parser(intent, help=f"{intent.capitalize()} a product in the cart")
        p.add_argument("--product-id", type=int, required=True)

    q = subparsers.add_parser("set-quantity", help="Set the quantity of a cart line")
    q.add_argument("--product-id", type=int, required=True)
    q.add_argument("--qty", type=int, required=True, help="0 or less removes the line")

    subparsers.add_parser("checkout", help="Confirm checkout")

    args = parser.parse_args()
    c = CartClient()

    if args.command == "list-products":
        print(c.list_products())
    elif args.command == "search":
        print(c.search_products(args.name))
    elif args.command == "get-product":
        print(c.get_product(args.product_id))
    elif args.command == "view-cart":
        print(c.view_cart())
    elif args.command == "add":
        print(c.add_to_cart(args.product_id))
    elif args.command == "increment":
        print(c.increment(args.product_id))
    elif args.command == "decrement":
        print(c.decrement(args.product_id))
    elif args.command == "remove":
        print(c.remove_from_cart(args.product_id))
    elif args.command == "set-quantity":
        print(c.set_quantity(args.product_id, args.qty))
    elif args.command == "checkout":
        print(c.checkout())
