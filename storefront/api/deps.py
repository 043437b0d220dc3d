# storefront/api/deps.py
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.services.cart_store import CartStore, RedisCartStorage
from storefront.services.catalog_service import CatalogService
from storefront.services.lock_service import LockService
from storefront.services.mailer import Mailer
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import DISCOUNT_CODES


#klienci redis wspoldzieleni miedzy requestami (pula polaczen)
@lru_cache
def get_cart_store() -> CartStore:
    return CartStore(RedisCartStorage())


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_mailer() -> Mailer:
    return Mailer()


def get_discount_codes() -> dict:
    return DISCOUNT_CODES


def get_catalog(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)
