from fastapi import APIRouter, Depends, Query

from stockdash.core.constants import ENTRIES, OUTPUTS
from stockdash.dependencies import get_backend, require_auth
from stockdash.schemas.movement import MovementCommitted, MovementCreate, MovementListing
from stockdash.services.movement_service import (
    attach_product_names,
    list_movements,
    movement_stats,
    search_movements,
)
from stockdash.services.product_service import list_products, stock_level
from stockdash.services.stock_ledger import StockLedger

entries_router = APIRouter(prefix="/entries", tags=["Entries"])
outputs_router = APIRouter(prefix="/outputs", tags=["Outputs"])


def _listing(backend, collection, query):
    products = list_products(backend)
    rows = attach_product_names(list_movements(backend, collection), products, collection)
    results = search_movements(rows, query)
    return MovementListing(count=len(results), stats=movement_stats(rows), results=results)


def _committed(product):
    return MovementCommitted(
        status="ok",
        state="committed",
        product=product,
        low_stock=stock_level(product.stock) == "low",
    )


@entries_router.get("", response_model=MovementListing)
def read_entries(
    query: str | None = Query(None, description="Product name search"),
    backend=Depends(get_backend),
):
    return _listing(backend, ENTRIES, query)


@entries_router.post("", response_model=MovementCommitted, status_code=201)
def add_entry(
    payload: MovementCreate,
    backend=Depends(get_backend),
    _auth=Depends(require_auth),
):
    product = StockLedger(backend).record_entry(payload.product_id, payload.quantity, payload.date)
    return _committed(product)


@outputs_router.get("", response_model=MovementListing)
def read_outputs(
    query: str | None = Query(None, description="Product name search"),
    backend=Depends(get_backend),
):
    return _listing(backend, OUTPUTS, query)


@outputs_router.post("", response_model=MovementCommitted, status_code=201)
def add_output(
    payload: MovementCreate,
    backend=Depends(get_backend),
    _auth=Depends(require_auth),
):
    product = StockLedger(backend).record_output(payload.product_id, payload.quantity, payload.date)
    return _committed(product)


__all__ = ["entries_router", "outputs_router"]
