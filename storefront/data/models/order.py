import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base


def _new_id() -> str:
    return uuid.uuid4().hex


class OrderModel(Base):
    __tablename__ = "orders"

    # publiczny link sledzenia zawiera id, wiec nie autoincrement
    id = Column(String(32), primary_key=True, default=_new_id)

    full_name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    shipping_address = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    payment_method = Column(String, nullable=False, default="Cash on Delivery")

    subtotal = Column(Numeric(10, 2), nullable=False)
    delivery_fee = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False)

    status = Column(String(20), nullable=False, default="pending")  # pending, processing, shipped, delivered, cancelled
    expected_arrival = Column(String(10), nullable=False)
    tracking_number = Column(String(16), nullable=False, index=True)
    idempotency_key = Column(String(64), nullable=True, unique=True)
    # sesja koszyka, z ktorej zlozono zamowienie
    session_id = Column(String(128), nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        index=True,
        default=lambda: datetime.now(timezone.utc),
    )

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
        lazy="selectin",
    )
