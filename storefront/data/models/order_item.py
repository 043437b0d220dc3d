from sqlalchemy import Column, Integer, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(String(32), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String, nullable=False)

    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)  # cena faktycznie naliczona (promocyjna jesli byla)
    quantity = Column(Integer, nullable=False)
    color = Column(String, nullable=True)
    size = Column(String, nullable=True)
    image = Column(String, nullable=True)

    order = relationship("OrderModel", back_populates="items")
