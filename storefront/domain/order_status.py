# storefront/domain/order_status.py
from enum import Enum
from typing import List


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# liniowy postep; cancelled jest poza paskiem
STATUS_RANK = {
    OrderStatus.PENDING: 1,
    OrderStatus.PROCESSING: 2,
    OrderStatus.SHIPPED: 3,
    OrderStatus.DELIVERED: 4,
}

TRACKING_STAGES = [
    ("submitted", "Order submitted"),
    ("processing", "Processing"),
    ("shipped", "Shipped"),
    ("delivered", "Delivered"),
]


def status_rank(status) -> int:
    return STATUS_RANK.get(OrderStatus(status), 0)


def progress_percentage(status) -> int:
    return status_rank(status) * 25


def tracking_stages(status) -> List[dict]:
    """Etap N jest zaliczony, gdy status jest na etapie N albo dalej."""
    rank = status_rank(status)
    return [
        {"key": key, "title": title, "completed": rank >= position}
        for position, (key, title) in enumerate(TRACKING_STAGES, start=1)
    ]
