from datetime import date

from fastapi import APIRouter, Depends, Query, Response

from stockdash.dependencies import get_backend, get_today, require_auth
from stockdash.schemas.product import ProductCreate, ProductRead, ProductUpdate, ProductView
from stockdash.services.product_service import (
    create_product,
    delete_product,
    filter_products,
    get_product,
    list_products,
    product_view,
    update_product,
)

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=list[ProductView])
def read_products(
    query: str | None = Query(None, description="Product name search"),
    status: str | None = Query(None, description="expired | near_expiry | current"),
    stock_level: str | None = Query(None, description="low | mid | high"),
    backend=Depends(get_backend),
    today: date = Depends(get_today),
):
    return filter_products(
        list_products(backend),
        today,
        query=query,
        status=status,
        level=stock_level,
    )


@router.get("/{product_id}", response_model=ProductView)
def read_product(
    product_id: str,
    backend=Depends(get_backend),
    today: date = Depends(get_today),
):
    return product_view(get_product(backend, product_id), today)


@router.post("", response_model=ProductRead, status_code=201)
def add_product(
    payload: ProductCreate,
    backend=Depends(get_backend),
    today: date = Depends(get_today),
    _auth=Depends(require_auth),
):
    return create_product(backend, payload, today=today)


@router.patch("/{product_id}", response_model=ProductRead)
def edit_product(
    product_id: str,
    payload: ProductUpdate,
    backend=Depends(get_backend),
    today: date = Depends(get_today),
    _auth=Depends(require_auth),
):
    return update_product(backend, product_id, payload, today=today)


@router.delete("/{product_id}", status_code=204)
def remove_product(
    product_id: str,
    backend=Depends(get_backend),
    _auth=Depends(require_auth),
):
    delete_product(backend, product_id)
    return Response(status_code=204)


__all__ = ["router"]
