# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import OrderNotFound
from storefront.domain.schemas import OrderTrackingOut
from storefront.services.tracking_service import OrderTrackingService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session = Depends(get_db)):
    return OrderTrackingService(db)


@router.get("/tracking/{tracking_number}", response_model=OrderTrackingOut)
def track_by_number(tracking_number: str, svc: OrderTrackingService = Depends(get_service)):
    """
    Sledzenie po numerze TK-XXXXXXXX.
    """
    try:
        return svc.load_by_tracking_number(tracking_number)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{order_id}", response_model=OrderTrackingOut)
def get_order(order_id: str, svc: OrderTrackingService = Depends(get_service)):
    """
    Pobiera zamowienie i stan paska postepu.
    """
    try:
        return svc.load(order_id)
    except OrderNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
