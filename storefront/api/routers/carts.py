#storefront/api/routers/carts.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from redis.exceptions import RedisError

from storefront.api.deps import get_cart_store, get_catalog, get_discount_codes
from storefront.domain.errors import NotFound
from storefront.domain.pricing import DeliveryZone, lookup_discount
from storefront.domain.schemas import (
    AddToCartIn,
    CartKeyIn,
    CartOut,
    QuantityChangeIn,
)
from storefront.services.cart_service import CartService
from storefront.services.cart_store import CartStore
from storefront.services.catalog_service import CatalogService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/carts", tags=["carts"])

CART_UNAVAILABLE = "Koszyk chwilowo niedostepny, sprobuj ponownie za chwile"


def get_service(
    store: CartStore = Depends(get_cart_store),
    catalog: CatalogService = Depends(get_catalog),
):
    return CartService(store=store, catalog=catalog)


def cart_unavailable(session_id: str, e: RedisError) -> HTTPException:
    logger.error(f"Koszyk {session_id}: redis niedostepny: {e}")
    return HTTPException(status_code=503, detail=CART_UNAVAILABLE)


@router.get("/{session_id}", response_model=CartOut)
def get_cart(
    session_id: str,
    zone: Optional[DeliveryZone] = Query(None),
    discount_code: Optional[str] = Query(None),
    svc: CartService = Depends(get_service),
    codes: dict = Depends(get_discount_codes),
):
    # nieznany kod w podgladzie = brak rabatu, blad zwraca /discounts/{code}
    percent = lookup_discount(discount_code, codes) or 0
    return svc.get_cart(session_id, zone, percent)


@router.post("/{session_id}/items", response_model=CartOut)
def add_item(
    session_id: str,
    payload: AddToCartIn,
    svc: CartService = Depends(get_service),
):
    try:
        return svc.add_product(
            session_id=session_id,
            product_id=payload.product_id,
            color=payload.color,
            size=payload.size,
            quantity=payload.quantity,
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RedisError as e:
        raise cart_unavailable(session_id, e)


@router.patch("/{session_id}/items", response_model=CartOut)
def update_quantity(
    session_id: str,
    payload: QuantityChangeIn,
    svc: CartService = Depends(get_service),
):
    try:
        return svc.update_quantity(session_id, payload.as_key(), payload.delta)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RedisError as e:
        raise cart_unavailable(session_id, e)


@router.delete("/{session_id}/items", response_model=CartOut)
def remove_item(
    session_id: str,
    payload: CartKeyIn,
    svc: CartService = Depends(get_service),
):
    try:
        return svc.remove(session_id, payload.as_key())
    except RedisError as e:
        raise cart_unavailable(session_id, e)


@router.delete("/{session_id}", status_code=204)
def clear_cart(session_id: str, svc: CartService = Depends(get_service)):
    try:
        svc.clear(session_id)
    except RedisError as e:
        raise cart_unavailable(session_id, e)
