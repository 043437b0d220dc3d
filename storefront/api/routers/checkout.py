# storefront/api/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from storefront.api.deps import (
    get_cart_store,
    get_discount_codes,
    get_lock_service,
    get_notification_service,
)
from storefront.data.database import get_db
from storefront.domain.errors import (
    InvalidDiscountCode,
    OrderPersistenceError,
    OrderValidationError,
    SubmissionInProgress,
)
from storefront.domain.pricing import lookup_discount
from storefront.domain.schemas import CheckoutIn, CheckoutOut, DiscountOut
from storefront.services.cart_store import CartStore
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

STORAGE_UNAVAILABLE = "Serwis chwilowo niedostepny, sprobuj ponownie za chwile"

router = APIRouter(tags=["checkout"])


def get_service(
    db: Session = Depends(get_db),
    store: CartStore = Depends(get_cart_store),
    lock_service: LockService = Depends(get_lock_service),
    notification_service: NotificationService = Depends(get_notification_service),
):
    return OrderService(
        db=db,
        cart_store=store,
        lock_service=lock_service,
        notification_service=notification_service,
    )


def resolve_discount(code: str | None, codes: dict) -> int:
    if not code:
        return 0
    percent = lookup_discount(code, codes)
    if percent is None:
        raise InvalidDiscountCode("Niepoprawny kod rabatowy")
    return percent


@router.get("/discounts/{code}", response_model=DiscountOut)
def check_discount(code: str, codes: dict = Depends(get_discount_codes)):
    try:
        return {"code": code, "percent": resolve_discount(code, codes)}
    except InvalidDiscountCode as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/checkout/{session_id}", response_model=CheckoutOut, status_code=201)
def checkout(
    session_id: str,
    payload: CheckoutIn,
    svc: OrderService = Depends(get_service),
    store: CartStore = Depends(get_cart_store),
    codes: dict = Depends(get_discount_codes),
):
    """
    Sklada zamowienie z aktualnego koszyka sesji.
    Mail wysylany asynchronicznie, jego blad nie cofa zamowienia.
    """
    try:
        percent = resolve_discount(payload.discount_code, codes)
        result = svc.submit(
            session_id=session_id,
            lines=store.get(session_id),
            shipping=payload.shipping,
            zone=payload.zone,
            discount_percent=percent,
            idempotency_key=payload.idempotency_key,
        )
    except OrderValidationError as e:
        raise HTTPException(status_code=400, detail={"message": "Niepoprawne dane zamowienia", "errors": e.errors})
    except InvalidDiscountCode as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SubmissionInProgress as e:
        raise HTTPException(status_code=409, detail=str(e))
    except OrderPersistenceError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except RedisError as e:
        logger.error(f"Checkout {session_id}: redis niedostepny: {e}")
        raise HTTPException(status_code=503, detail=STORAGE_UNAVAILABLE)

    return {
        "order_id": result.order_id,
        "tracking_number": result.tracking_number,
        "notification_queued": result.notification_queued,
        "replayed": result.replayed,
    }
