from stockdash.routers.dashboard import router as dashboard_router
from stockdash.routers.health import router as health_router
from stockdash.routers.movements import entries_router, outputs_router
from stockdash.routers.products import router as products_router

__all__ = [
    "dashboard_router",
    "entries_router",
    "health_router",
    "outputs_router",
    "products_router",
]
