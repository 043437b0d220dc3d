# storefront/services/order_service.py
import re
import secrets
import string
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain import pricing
from storefront.domain.errors import (
    OrderNotFound,
    OrderPersistenceError,
    OrderValidationError,
    SubmissionInProgress,
)
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import CartLine, OrderOut, ShippingInfo
from storefront.repos.order_repo import OrderRepo
from storefront.services.cart_store import CartStore
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import CHECKOUT_LOCK_TTL_SECONDS, EXPECTED_ARRIVAL_DAYS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PAYMENT_METHOD = "Cash on Delivery"

TRACKING_PREFIX = "TK-"
TRACKING_ALPHABET = string.ascii_uppercase + string.digits
TRACKING_LENGTH = 8


def generate_tracking_number() -> str:
    # bez sprawdzania kolizji z istniejacymi numerami
    return TRACKING_PREFIX + "".join(secrets.choice(TRACKING_ALPHABET) for _ in range(TRACKING_LENGTH))


def expected_arrival_label(created_at: datetime, days: int = EXPECTED_ARRIVAL_DAYS) -> str:
    return (created_at + timedelta(days=days)).date().isoformat()


def validate_submission(
    lines: List[CartLine],
    shipping: ShippingInfo,
    zone: Optional[pricing.DeliveryZone],
    discount_percent: int,
) -> None:
    errors: Dict[str, str] = {}

    if not lines:
        errors["cart"] = "Koszyk jest pusty"
    if not shipping.full_name.strip():
        errors["full_name"] = "Pole wymagane"
    if not EMAIL_PATTERN.match(shipping.email.strip()):
        errors["email"] = "Niepoprawny adres email"
    if not shipping.address.strip():
        errors["address"] = "Pole wymagane"
    if not shipping.phone.strip():
        errors["phone"] = "Pole wymagane"
    if zone is None:
        errors["zone"] = "Wybierz strefe dostawy"
    if not 0 <= discount_percent <= 100:
        errors["discount"] = "Rabat poza zakresem 0-100"

    if errors:
        raise OrderValidationError(errors)


@dataclass(frozen=True)
class SubmissionResult:
    order_id: str
    tracking_number: str
    notification_queued: bool
    replayed: bool = False


def order_to_dict(order: OrderModel) -> Dict[str, Any]:
    return OrderOut.model_validate(order).model_dump()


class OrderService:
    """
    Serwis odpowiedzialny za domene zamowien.
    Koszyk -> snapshot zamowienia -> zapis -> mail -> czyszczenie koszyka.
    """

    def __init__(
        self,
        db: Session,
        cart_store: CartStore,
        lock_service: LockService,
        notification_service: NotificationService | None = None,
    ):
        self.repo = OrderRepo(db)
        self.cart_store = cart_store
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    def submit(
        self,
        session_id: str,
        lines: List[CartLine],
        shipping: ShippingInfo,
        zone: Optional[pricing.DeliveryZone],
        discount_percent: int = 0,
        idempotency_key: Optional[str] = None,
    ) -> SubmissionResult:
        """
        Use Case: Zlozenie zamowienia z koszyka.

        1. Klucz idempotencji: powtorka zwraca istniejace zamowienie;
           koszyk jest czyszczony tylko gdy zamowienie pochodzi z tej samej sesji
        2. Walidacja (przed jakimkolwiek zapisem)
        3. Blokada: jedno skladanie naraz na sesje koszyka
        4. Zapis zamowienia
        5. Mail (blad nie cofa zamowienia)
        6. Czyszczenie koszyka
        """
        # kopia z chwili wywolania, pozniejsze zmiany koszyka nie wplywaja na zamowienie
        lines = list(lines)

        # powtorka po timeoucie: koszyk juz wyczyszczony, wiec przed walidacja
        replay = self._replay(session_id, idempotency_key)
        if replay:
            return replay

        validate_submission(lines, shipping, zone, discount_percent)

        token = self.lock_service.new_token()
        if not self.lock_service.acquire_checkout_lock(session_id, token, CHECKOUT_LOCK_TTL_SECONDS):
            raise SubmissionInProgress("Zamowienie dla tego koszyka jest juz skladane")

        try:
            # ponownie pod lockiem, rownolegly request mogl juz zapisac
            replay = self._replay(session_id, idempotency_key)
            if replay:
                return replay

            order = self._persist(session_id, lines, shipping, zone, discount_percent, idempotency_key)
            payload = OrderOut.model_validate(order).model_dump(mode="json")

            notification_queued = self._notify(payload, order.email)

            self._clear_cart(session_id)

            return SubmissionResult(
                order_id=order.id,
                tracking_number=order.tracking_number,
                notification_queued=notification_queued,
            )
        finally:
            self._release_lock(session_id, token)

    def _replay(self, session_id: str, idempotency_key: Optional[str]) -> Optional[SubmissionResult]:
        if not idempotency_key:
            return None

        existing = self.repo.get_by_idempotency_key(idempotency_key)
        if not existing:
            return None

        logger.info(f"Idempotency key {idempotency_key} -> existing order {existing.id}")
        # klucz z innej sesji nie moze wyczyscic cudzego, nowego koszyka
        if existing.session_id == session_id:
            self._clear_cart(session_id)
        return SubmissionResult(
            order_id=existing.id,
            tracking_number=existing.tracking_number,
            notification_queued=False,
            replayed=True,
        )

    def _persist(self, session_id, lines, shipping, zone, discount_percent, idempotency_key) -> OrderModel:
        summary = pricing.summarize(lines, zone, discount_percent)
        now = datetime.now(timezone.utc)

        order = OrderModel(
            full_name=shipping.full_name.strip(),
            email=shipping.email.strip(),
            shipping_address=shipping.address.strip(),
            phone_number=shipping.phone.strip(),
            payment_method=PAYMENT_METHOD,
            subtotal=summary.subtotal,
            delivery_fee=summary.delivery_fee,
            discount=summary.discount,
            total=summary.total,
            status=OrderStatus.PENDING.value,
            created_at=now,
            expected_arrival=expected_arrival_label(now),
            tracking_number=generate_tracking_number(),
            idempotency_key=idempotency_key,
            session_id=session_id,
            items=[
                OrderItemModel(
                    product_id=line.product_id,
                    name=line.name,
                    price=line.unit_price,
                    quantity=line.quantity,
                    color=line.color,
                    size=line.size,
                    image=line.image_url,
                )
                for line in lines
            ],
        )

        try:
            created = self.repo.create_order(order)
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Zapis zamowienia nie powiodl sie: {e}")
            raise OrderPersistenceError("Nie udalo sie zapisac zamowienia, sprobuj ponownie") from e

        logger.info(
            f"Order {created.id} ({created.tracking_number}) created, "
            f"{len(lines)} lines, total {created.total}"
        )
        return created

    def _notify(self, payload: Dict[str, Any], customer_email: str) -> bool:
        try:
            self.notification_service.send_order_confirmation(payload, customer_email)
        except Exception as e:
            # zamowienie zostaje, mail "best effort"
            logger.warning(f"Order {payload['id']}: confirmation email not queued: {e}")
            return False
        return True

    def _clear_cart(self, session_id: str):
        try:
            self.cart_store.clear(session_id)
        except RedisError as e:
            # zamowienie juz zapisane, koszyk zostanie nadpisany przy nastepnym zapisie
            logger.warning(f"Nie udalo sie wyczyscic koszyka {session_id}: {e}")

    def _release_lock(self, session_id: str, token: str):
        try:
            self.lock_service.release_checkout_lock(session_id, token)
        except RedisError as e:
            # lock i tak wygasnie po TTL
            logger.warning(f"Nie udalo sie zwolnic locka {session_id}: {e}")

    def get_order(self, order_id: str) -> Dict[str, Any]:
        """
        Use Case: Pobranie zamowienia (Query).
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise OrderNotFound("Zamowienie nie istnieje")

        return order_to_dict(order)
