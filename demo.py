#!/usr/bin/env python
import asyncio

from sdk.pycart import CartClient


def main():
    c = CartClient()

    # -----------------------------
    # Catalog
    # -----------------------------
    print("Listing products...")
    products = c.list_products()
    for p in products:
        print(f"  [{p['id']}] {p['name']} ${p['price']} - {p['button_label']}")

    # -----------------------------
    # Fill the cart
    # -----------------------------
    first, second = products[0]["id"], products[1]["id"]
    print(f"\nAdding product {first} twice and product {second} once...")
    c.add_to_cart(first)
    c.add_to_cart(first)
    cart = c.add_to_cart(second)
    print(f"Items: {cart['item_count']}, subtotal ${cart['subtotal']}, tax ${cart['tax']}, total ${cart['total']}")

    # -----------------------------
    # Adjust quantities
    # -----------------------------
    print(f"\nDecrementing product {second} (drops it from the cart)...")
    cart = c.decrement(second)
    print([(it["name"], it["quantity"]) for it in cart["items"]])

    print(f"\nSetting product {first} quantity to 3...")
    cart = c.set_quantity(first, 3)
    print(f"Total now ${cart['total']}")

    # -----------------------------
    # Checkout, twice
    # -----------------------------
    print("\nChecking out...")
    print(c.checkout())

    print("\nChecking out again (cart is empty now)...")
    r = asyncio.run(c.checkout_async())
    print(r.status_code, r.json())


if __name__ == "__main__":
    main()
