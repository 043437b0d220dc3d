# storefront/repos/order_repo.py
from typing import List, Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel


class OrderRepo:
    """
    Dostep do zamowien. Poza statusem zamowienie jest tylko do zapisu raz,
    wiec jedyna aktualizacja to update_order_status.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def rollback(self):
        self.db.rollback()

    def get_order(self, order_id: str) -> OrderModel | None:
        return self.db.get(OrderModel, order_id)

    def get_by_tracking_number(self, tracking_number: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.tracking_number == tracking_number)
        ).scalars().first()

    def get_by_idempotency_key(self, key: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).where(OrderModel.idempotency_key == key)
        ).scalar_one_or_none()

    def list_orders(self, limit: int, after: Optional[OrderModel] = None) -> List[OrderModel]:
        # najnowsze pierwsze; id rozstrzyga remisy created_at
        stmt = select(OrderModel).order_by(OrderModel.created_at.desc(), OrderModel.id.desc())

        if after is not None:
            stmt = stmt.where(
                or_(
                    OrderModel.created_at < after.created_at,
                    and_(OrderModel.created_at == after.created_at, OrderModel.id < after.id),
                )
            )

        return list(self.db.execute(stmt.limit(limit)).scalars().all())

    def update_order_status(self, order_id: str, status: str) -> OrderModel | None:
        order = self.get_order(order_id)
        if order:
            order.status = status
            self.db.commit()
            self.db.refresh(order)
        return order
