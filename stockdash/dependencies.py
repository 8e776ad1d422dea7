from datetime import date
from typing import Optional

from fastapi import Header, Request

from stockdash.backend.base import ResourceBackend
from stockdash.config import get_settings
from stockdash.core.security import authenticate_request


def build_backend(settings=None) -> ResourceBackend:
    settings = settings or get_settings()
    mode = settings.BACKEND_MODE.strip().lower()
    if mode == "rest":
        from stockdash.backend.rest import RestBackend

        return RestBackend(settings.BACKEND_URL, timeout=settings.BACKEND_TIMEOUT_SECONDS)
    if mode == "sql":
        from stockdash.backend.sql import SqlBackend
        from stockdash.database.session import SessionLocal

        return SqlBackend(SessionLocal)
    raise RuntimeError("Unknown BACKEND_MODE: {}".format(settings.BACKEND_MODE))


def get_backend():
    backend = build_backend()
    try:
        yield backend
    finally:
        backend.close()


def get_today() -> date:
    return date.today()


def require_auth(
    request: Request,
    authorization: Optional[str] = Header(None),
):
    api_key = request.headers.get(get_settings().API_KEY_HEADER)
    return authenticate_request(api_key=api_key, authorization=authorization)


__all__ = ["build_backend", "get_backend", "get_today", "require_auth"]
