# storefront/api/routers/admin.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import OrderNotFound
from storefront.domain.filters import ALL_STATUSES
from storefront.domain.schemas import AdminOrdersOut, OrderOut, StatusUpdateIn
from storefront.services.admin_order_service import AdminOrderService

router = APIRouter(prefix="/admin/orders", tags=["admin"])


def get_service(db: Session = Depends(get_db)):
    return AdminOrderService(db)


@router.get("", response_model=AdminOrdersOut)
def list_orders(
    page_token: Optional[str] = None,
    q: str = "",
    status: str = Query(ALL_STATUSES, pattern="^(all|pending|processing|shipped|delivered|cancelled)$"),
    day: Optional[date] = Query(None, alias="date"),
    svc: AdminOrderService = Depends(get_service),
):
    try:
        return svc.browse(page_token=page_token, search_text=q, status=status, day=day)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/{order_id}/status", response_model=OrderOut)
def set_status(order_id: str, payload: StatusUpdateIn, svc: AdminOrderService = Depends(get_service)):
    try:
        return svc.set_status(order_id, payload.status)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
