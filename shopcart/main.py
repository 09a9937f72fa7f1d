# shopcart/main.py
# Run with `python -m shopcart.main` or `uvicorn shopcart.main:app --port 8085`.
import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .catalog import load_catalog
from .config import configure_logging, get_settings
from .controller import CartController
from .core import ProductIdIn, UpdateQuantityIn, _make_product_dict
from .database import FileStorage
from .errors import StorageUnavailableError
from .store import CartStore

logger = logging.getLogger(__name__)

app = FastAPI(title="pycart")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# Cart instance (one per process)
# ---------------------------
# Endpoints stay async so every mutation runs on the event loop, one at a time.
# FileStorage I/O blocks the loop briefly; the cart has a single actor and no locks.
_controller: Optional[CartController] = None


async def get_controller() -> CartController:
    global _controller
    if _controller is None:
        settings = get_settings()
        store = CartStore.open(FileStorage(settings.storage_path), settings.storage_key)
        _controller = CartController(store, load_catalog(settings.catalog_path))
        logger.info("Cart loaded from %s", settings.storage_path)
    return _controller


@app.exception_handler(StorageUnavailableError)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
    return JSONResponse(status_code=503, content={"detail": f"storage unavailable: {exc.reason}"})


# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/products")
async def list_products(ctl: CartController = Depends(get_controller)):
    return ctl.render().products


@app.get("/products/search")
async def search_products(name: str = Query(..., min_length=1), ctl: CartController = Depends(get_controller)):
    return [_make_product_dict(p) for p in ctl.catalog.search(name)]


@app.get("/products/{product_id}")
async def get_product(product_id: int, ctl: CartController = Depends(get_controller)):
    p = ctl.catalog.get(product_id)
    if not p:
        raise HTTPException(status_code=404, detail="product not found")
    return _make_product_dict(p)


# ---------------------------
# Cart endpoints
# ---------------------------
@app.get("/cart")
async def view_cart(ctl: CartController = Depends(get_controller)):
    return ctl.render()


@app.post("/cart/add")
async def cart_add(payload: ProductIdIn, ctl: CartController = Depends(get_controller)):
    if payload.product_id not in ctl.catalog:
        raise HTTPException(status_code=404, detail="product not found")
    ctl.add(payload.product_id)
    return ctl.render()


@app.post("/cart/increment")
async def cart_increment(payload: ProductIdIn, ctl: CartController = Depends(get_controller)):
    ctl.increment(payload.product_id)
    return ctl.render()


@app.post("/cart/decrement")
async def cart_decrement(payload: ProductIdIn, ctl: CartController = Depends(get_controller)):
    ctl.decrement(payload.product_id)
    return ctl.render()


@app.post("/cart/remove")
async def cart_remove(payload: ProductIdIn, ctl: CartController = Depends(get_controller)):
    # unknown ids are a no-op, the current cart comes back either way
    ctl.remove(payload.product_id)
    return ctl.render()


@app.post("/cart/quantity")
async def cart_quantity(payload: UpdateQuantityIn, ctl: CartController = Depends(get_controller)):
    ctl.set_quantity(payload.product_id, payload.quantity)
    return ctl.render()


@app.post("/cart/checkout")
async def cart_checkout(ctl: CartController = Depends(get_controller)):
    result = ctl.confirm_checkout()
    if not result.placed:
        raise HTTPException(status_code=400, detail="cart empty")
    return result


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(app, host="0.0.0.0", port=8085)
