from datetime import datetime, timezone

from pydantic import ValidationError as SchemaError

from stockdash.backend.base import ResourceBackend
from stockdash.core.constants import ENTRIES, MISSING_PRODUCT_LABEL, OUTPUTS
from stockdash.core.dates import normalize_timestamp
from stockdash.core.errors import BackendUnavailable
from stockdash.schemas.movement import MovementRead, MovementRow, MovementStats

MOVEMENT_KINDS = {
    ENTRIES: "entry",
    OUTPUTS: "output",
}

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_movement(data) -> MovementRead:
    try:
        return MovementRead.model_validate(data)
    except SchemaError as exc:
        raise BackendUnavailable("Backend returned a malformed movement: {}".format(data)) from exc


def _sort_key(movement):
    return normalize_timestamp(movement.date) or _OLDEST


def list_movements(backend: ResourceBackend, collection: str) -> list[MovementRead]:
    if collection not in MOVEMENT_KINDS:
        raise ValueError("Unknown movement collection: {}".format(collection))
    movements = [parse_movement(item) for item in backend.list(collection)]
    return sorted(movements, key=_sort_key, reverse=True)


def list_entries(backend: ResourceBackend) -> list[MovementRead]:
    return list_movements(backend, ENTRIES)


def list_outputs(backend: ResourceBackend) -> list[MovementRead]:
    return list_movements(backend, OUTPUTS)


def product_name_index(products) -> dict:
    return {str(product.id): product.name for product in products}


def attach_product_names(movements, products, collection: str) -> list[MovementRow]:
    names = product_name_index(products)
    kind = MOVEMENT_KINDS[collection]
    rows = []
    for movement in movements:
        name = names.get(str(movement.product_id))
        rows.append(
            MovementRow(
                **movement.model_dump(),
                kind=kind,
                product_name=name if name is not None else MISSING_PRODUCT_LABEL.format(movement.product_id),
                product_missing=name is None,
            )
        )
    return rows


def search_movements(rows, query=None) -> list[MovementRow]:
    query_text = str(query).strip().lower() if query else ""
    if not query_text:
        return list(rows)
    return [row for row in rows if query_text in row.product_name.lower()]


def movement_stats(rows) -> MovementStats:
    return MovementStats(
        total_movements=len(rows),
        total_kg=sum(float(row.quantity or 0) for row in rows),
        unique_products=len({str(row.product_id) for row in rows}),
    )


__all__ = [
    "MOVEMENT_KINDS",
    "attach_product_names",
    "list_entries",
    "list_movements",
    "list_outputs",
    "movement_stats",
    "parse_movement",
    "product_name_index",
    "search_movements",
]
