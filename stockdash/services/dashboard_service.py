import logging
from datetime import date

from stockdash.backend.base import ResourceBackend
from stockdash.core.constants import (
    ENTRIES,
    EXPIRATION_STATUSES,
    LATEST_MOVEMENTS_LIMIT,
    OUTPUTS,
    STATUS_CURRENT,
    STATUS_EXPIRED,
    STATUS_NEAR_EXPIRY,
)
from stockdash.core.errors import ValidationError
from stockdash.services.movement_service import attach_product_names, list_entries, list_outputs
from stockdash.services.product_service import list_products, product_view

logger = logging.getLogger(__name__)

EXPIRATION_VIEW_ALIASES = {
    "all": None,
    "current": STATUS_CURRENT,
    "near_expiry": STATUS_NEAR_EXPIRY,
    "near": STATUS_NEAR_EXPIRY,
    "expiring": STATUS_NEAR_EXPIRY,
    "expired": STATUS_EXPIRED,
}


def _product_value(product) -> float:
    return float(product.price or 0) * float(product.stock or 0)


def _normalize_view(view):
    if view is None:
        return None
    key = str(view).strip().lower().replace("-", "_").replace(" ", "_")
    if not key:
        return None
    if key not in EXPIRATION_VIEW_ALIASES:
        raise ValidationError("view", "expected one of all, current, near_expiry, expired")
    return EXPIRATION_VIEW_ALIASES[key]


def dashboard_summary(backend: ResourceBackend, today: date) -> dict:
    # Any failed load raises; a partial snapshot is never returned.
    products = list_products(backend)
    entries = attach_product_names(list_entries(backend), products, ENTRIES)
    outputs = attach_product_names(list_outputs(backend), products, OUTPUTS)

    views = [product_view(product, today) for product in products]
    expired = [view for view in views if view.status == STATUS_EXPIRED]
    near_expiry = [view for view in views if view.status == STATUS_NEAR_EXPIRY]
    attention = sorted(expired + near_expiry, key=lambda view: view.days_until)

    return {
        "date": today,
        "product_count": len(products),
        "total_stock_kg": sum(float(product.stock or 0) for product in products),
        "total_value": sum(_product_value(product) for product in products),
        "expired": {
            "count": len(expired),
            "loss_value": sum(_product_value(view) for view in expired),
        },
        "near_expiry": {
            "count": len(near_expiry),
            "risk_value": sum(_product_value(view) for view in near_expiry),
        },
        "entry_count": len(entries),
        "output_count": len(outputs),
        "missing_product_movements": sum(1 for row in entries + outputs if row.product_missing),
        "latest_entries": entries[:LATEST_MOVEMENTS_LIMIT],
        "latest_outputs": outputs[:LATEST_MOVEMENTS_LIMIT],
        "attention": attention,
    }


def near_expiry_notice(count: int):
    if count <= 0:
        return None
    if count == 1:
        return "1 product is close to its expiration date."
    return "{} products are close to their expiration date.".format(count)


def expiration_report(backend: ResourceBackend, today: date, view=None, query=None) -> dict:
    status_filter = _normalize_view(view)
    query_text = str(query).strip().lower() if query else ""

    views = [product_view(product, today) for product in list_products(backend)]
    stats = {status: {"count": 0, "stock_kg": 0.0} for status in EXPIRATION_STATUSES}
    for item in views:
        stats[item.status]["count"] += 1
        stats[item.status]["stock_kg"] += float(item.stock or 0)

    filtered = [
        item
        for item in views
        if (not query_text or query_text in item.name.lower())
        and (status_filter is None or item.status == status_filter)
    ]
    notice = near_expiry_notice(stats[STATUS_NEAR_EXPIRY]["count"])
    if notice:
        logger.info(notice)

    return {
        "date": today,
        "total": len(views),
        "stats": stats,
        "count": len(filtered),
        "results": filtered,
        "notice": notice,
    }


__all__ = ["dashboard_summary", "expiration_report", "near_expiry_notice"]
