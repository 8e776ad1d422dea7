import logging
from datetime import date

from pydantic import ValidationError as SchemaError

from stockdash.backend.base import ResourceBackend
from stockdash.core.constants import (
    EXPIRATION_STATUSES,
    PRODUCTS,
    STOCK_LEVELS,
    STOCK_LOW_MAX_KG,
    STOCK_MID_MAX_KG,
)
from stockdash.core.errors import BackendUnavailable, ValidationError
from stockdash.core.expiration import classify_expiration, days_until
from stockdash.schemas.common import coerce_identifier
from stockdash.schemas.product import ProductCreate, ProductRead, ProductUpdate, ProductView

logger = logging.getLogger(__name__)


def parse_product(data) -> ProductRead:
    try:
        return ProductRead.model_validate(data)
    except SchemaError as exc:
        raise BackendUnavailable("Backend returned a malformed product: {}".format(data)) from exc


def list_products(backend: ResourceBackend) -> list[ProductRead]:
    return [parse_product(item) for item in backend.list(PRODUCTS)]


def get_product(backend: ResourceBackend, product_id) -> ProductRead:
    return parse_product(backend.get(PRODUCTS, product_id))


def next_product_id(products) -> int:
    numeric_ids = []
    for product in products:
        identifier = product.id if hasattr(product, "id") else product.get("id")
        identifier = coerce_identifier(identifier)
        if isinstance(identifier, int) and not isinstance(identifier, bool):
            numeric_ids.append(identifier)
    return max(numeric_ids) + 1 if numeric_ids else 1


def _check_not_past(expiration_date, today):
    if today is not None and expiration_date is not None and expiration_date < today:
        raise ValidationError("expirationDate", "must not be before {}".format(today.isoformat()))


def create_product(backend: ResourceBackend, payload: ProductCreate, today: date | None = None) -> ProductRead:
    """Create a product under the next integer id.

    With ``today`` set, an expiration date before it is rejected. Imports of
    historical stock pass ``None``.
    """
    _check_not_past(payload.expiration_date, today)
    # Client-assigned ids are race-prone under concurrent creation; kept for
    # compatibility with backends that already hold "next integer" ids.
    new_id = next_product_id(backend.list(PRODUCTS))
    body = payload.model_dump(mode="json", by_alias=True)
    body["id"] = str(new_id)
    product = parse_product(backend.create(PRODUCTS, body))
    logger.info("Created product %s (%s)", product.id, product.name)
    return product


def update_product(
    backend: ResourceBackend,
    product_id,
    changes: ProductUpdate,
    today: date | None = None,
) -> ProductRead:
    body = changes.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if not body:
        raise ValidationError("product", "no fields to update")
    for key, value in body.items():
        if value is None:
            raise ValidationError(key, "must not be null")
    _check_not_past(changes.expiration_date, today)
    return parse_product(backend.update(PRODUCTS, product_id, body))


def delete_product(backend: ResourceBackend, product_id) -> None:
    backend.delete(PRODUCTS, product_id)
    logger.info("Deleted product %s", product_id)


def stock_level(stock) -> str:
    stock = float(stock or 0)
    if stock <= STOCK_LOW_MAX_KG:
        return "low"
    if stock <= STOCK_MID_MAX_KG:
        return "mid"
    return "high"


def product_view(product: ProductRead, today: date) -> ProductView:
    return ProductView(
        **product.model_dump(),
        days_until=days_until(product.expiration_date, today),
        status=classify_expiration(product.expiration_date, today),
        stock_level=stock_level(product.stock),
    )


def _normalize_choice(value, choices, field):
    if value is None:
        return None
    key = str(value).strip().lower().replace("-", "_").replace(" ", "_")
    if not key or key == "all":
        return None
    if key not in choices:
        raise ValidationError(field, "expected one of {}".format(", ".join(choices)))
    return key


def filter_products(products, today: date, query=None, status=None, level=None) -> list[ProductView]:
    status = _normalize_choice(status, EXPIRATION_STATUSES, "status")
    level = _normalize_choice(level, STOCK_LEVELS, "stock_level")
    query_text = str(query).strip().lower() if query else ""

    results = []
    for product in products:
        view = product_view(product, today)
        if query_text and query_text not in view.name.lower():
            continue
        if status and view.status != status:
            continue
        if level and view.stock_level != level:
            continue
        results.append(view)
    return results


__all__ = [
    "create_product",
    "delete_product",
    "filter_products",
    "get_product",
    "list_products",
    "next_product_id",
    "parse_product",
    "product_view",
    "stock_level",
    "update_product",
]
