from datetime import date

from fastapi import APIRouter, Depends, Query

from stockdash.dependencies import get_backend, get_today
from stockdash.services.dashboard_service import dashboard_summary, expiration_report

router = APIRouter(tags=["Dashboard"])


@router.get("/dashboard/summary")
def read_dashboard_summary(
    backend=Depends(get_backend),
    today: date = Depends(get_today),
):
    return dashboard_summary(backend, today)


@router.get("/expiration")
def read_expiration_report(
    view: str | None = Query(None, description="all | current | near_expiry | expired"),
    query: str | None = Query(None, description="Product name search"),
    backend=Depends(get_backend),
    today: date = Depends(get_today),
):
    return expiration_report(backend, today, view=view, query=query)


__all__ = ["router"]
