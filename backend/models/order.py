from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base

# Known order states, seeded by init_db()
ORDER_STATES = {
    1: "new",
    2: "confirmed",
    3: "preparing",
    4: "sending",
    5: "delivered",
    6: "cancelled",
}
DEFAULT_STATE_ID = 1


class OrderState(Base):
    __tablename__ = "order_states"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(30), nullable=False, unique=True)


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    ordered_at = Column(DateTime, default=datetime.now, nullable=False, index=True)
    payment_type = Column(Integer, nullable=False)
    address = Column(String, nullable=False)
    state_id = Column(Integer, ForeignKey("order_states.id"), nullable=False, default=DEFAULT_STATE_ID)

    user = relationship("User", back_populates="orders")
    state = relationship("OrderState", lazy="joined")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan",
                         order_by="OrderItem.id")

class OrderItem(Base):
    __tablename__ = "order_items"
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False)
    dish_id = Column(Integer, ForeignKey("dishes.id"), nullable=False)
    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False)

    order = relationship("Order", back_populates="items")
    dish = relationship("Dish")
