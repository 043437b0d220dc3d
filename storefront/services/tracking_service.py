# storefront/services/tracking_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.domain.errors import OrderNotFound
from storefront.domain.order_status import OrderStatus, progress_percentage, tracking_stages
from storefront.repos.order_repo import OrderRepo
from storefront.services.order_service import order_to_dict


class OrderTrackingService:
    """Strona sledzenia: zamowienie + pasek 4 etapow."""

    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def load(self, order_id: str) -> Dict[str, Any]:
        order = self.repo.get_order(order_id)
        if not order:
            raise OrderNotFound("Zamowienie nie istnieje")
        return self._view(order)

    def load_by_tracking_number(self, tracking_number: str) -> Dict[str, Any]:
        order = self.repo.get_by_tracking_number(tracking_number.strip().upper())
        if not order:
            raise OrderNotFound("Zamowienie nie istnieje")
        return self._view(order)

    @staticmethod
    def _view(order: OrderModel) -> Dict[str, Any]:
        return {
            "order": order_to_dict(order),
            "stages": tracking_stages(order.status),
            "progress": progress_percentage(order.status),
            "cancelled": order.status == OrderStatus.CANCELLED.value,
        }
