# storefront/services/admin_order_service.py
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from storefront.domain.errors import OrderNotFound
from storefront.domain.filters import ALL_STATUSES, filter_orders, status_counts
from storefront.domain.order_status import OrderStatus
from storefront.domain.schemas import OrderOut
from storefront.repos.order_repo import OrderRepo
from storefront.services.order_service import order_to_dict
from storefront.utils.settings import ADMIN_PAGE_SIZE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class AdminOrderService:
    """
    Panel zamowien: stronicowana lista (najnowsze pierwsze) i zmiana statusu.
    Zmiana statusu nie sprawdza przejsc, kazdy status mozna ustawic z kazdego.
    """

    def __init__(self, db: Session, page_size: int = ADMIN_PAGE_SIZE):
        self.repo = OrderRepo(db)
        self.page_size = page_size

    def list(self, page_token: Optional[str] = None) -> Tuple[List[Dict[str, Any]], Optional[str]]:
        after = None
        if page_token:
            after = self.repo.get_order(page_token)
            if not after:
                raise ValueError("Niepoprawny token strony")

        # o jeden wiecej, zeby wiedziec czy jest nastepna strona
        orders = self.repo.list_orders(limit=self.page_size + 1, after=after)
        has_more = len(orders) > self.page_size
        orders = orders[: self.page_size]

        next_token = orders[-1].id if has_more else None
        return [order_to_dict(o) for o in orders], next_token

    def set_status(self, order_id: str, new_status: OrderStatus) -> Dict[str, Any]:
        status = OrderStatus(new_status)
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound("Zamowienie nie istnieje")

        previous = order.status
        order = self.repo.update_order_status(order_id, status.value)

        logger.info(f"Order {order_id}: status {previous} -> {status.value}")
        return order_to_dict(order)

    def browse(
        self,
        page_token: Optional[str] = None,
        search_text: str = "",
        status: str = ALL_STATUSES,
        day: Optional[date] = None,
    ) -> Dict[str, Any]:
        """Strona listy + filtr klienta + liczniki, jak w konsoli admina."""
        orders, next_token = self.list(page_token)

        models = [OrderOut.model_validate(o) for o in orders]
        filtered = filter_orders(models, search_text, status, day)
        counts = status_counts(models)

        return {
            "orders": [o.model_dump() for o in filtered],
            "next_page_token": next_token,
            "delivered_count": counts["delivered"],
            "shipped_count": counts["shipped"],
        }

