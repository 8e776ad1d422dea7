import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from stockdash.config import Settings, get_settings
from stockdash.core.constants import DEFAULT_DASHBOARD_PATH
from stockdash.core.errors import (
    BackendUnavailable,
    InsufficientStock,
    NotFound,
    PartialFailure,
    StockDashError,
    ValidationError,
)
from stockdash.core.logging import setup_logging
from stockdash.routers import (
    dashboard_router,
    entries_router,
    health_router,
    outputs_router,
    products_router,
)

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    NotFound: 404,
    ValidationError: 422,
    InsufficientStock: 409,
    BackendUnavailable: 503,
    PartialFailure: 502,
}


def _status_for(exc: StockDashError) -> int:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


def _prepare_sql_backend():
    from stockdash.database import Base, engine
    from stockdash.models import import_all_models

    import_all_models()
    Base.metadata.create_all(bind=engine)


setup_logging()
settings: Settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.BACKEND_MODE.strip().lower() == "sql":
        _prepare_sql_backend()
    logger.info("Starting %s with %s backend", settings.APP_NAME, settings.BACKEND_MODE)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)


@app.exception_handler(StockDashError)
async def stockdash_error_handler(_request: Request, exc: StockDashError):
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.warning("Request failed with %s: %s", exc.code, exc.message)
    body = {"status": "error"}
    body.update(exc.to_dict())
    return JSONResponse(status_code=status_code, content=body)


app.include_router(health_router)
app.include_router(products_router)
app.include_router(entries_router)
app.include_router(outputs_router)
app.include_router(dashboard_router)


@app.get("/")
def root():
    return RedirectResponse(url=DEFAULT_DASHBOARD_PATH, status_code=302)


__all__ = ["app", "root"]
