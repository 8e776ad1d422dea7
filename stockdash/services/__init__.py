from stockdash.services.dashboard_service import dashboard_summary, expiration_report
from stockdash.services.movement_service import attach_product_names, list_entries, list_outputs
from stockdash.services.product_service import create_product, list_products, next_product_id
from stockdash.services.stock_ledger import MovementState, StockLedger

__all__ = [
    "MovementState",
    "StockLedger",
    "attach_product_names",
    "create_product",
    "dashboard_summary",
    "expiration_report",
    "list_entries",
    "list_outputs",
    "list_products",
    "next_product_id",
]
