from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload

from database import fits_db_integer
from models.order import Order, OrderItem, OrderState, DEFAULT_STATE_ID
from schemas.order import OrderDraft, OrderTimeFilter


def _day_bounds(day: str):
    # [00:00 of the day, 00:00 of the next day)
    start = datetime.combine(date.fromisoformat(day), datetime.min.time())
    return start, start + timedelta(days=1)


class OrderStore:
    """SQLAlchemy access to orders, their lines and the order states."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Order).options(
            joinedload(Order.items).joinedload(OrderItem.dish),
            joinedload(Order.state),
        )

    def list_filtered(self, filters: OrderTimeFilter) -> List[Order]:
        """
        Orders matching the time filters.

        `at` selects a single day, `before`/`after` are inclusive bounds ANDed
        together, and `at` is ORed with the bounded range when both are given.
        Without any filter the orders of the current date are returned.
        """
        at, before, after = filters.at, filters.before, filters.after
        if not (at or before or after):
            at = date.today().isoformat()

        bounds = []
        if after:
            bounds.append(Order.ordered_at >= _day_bounds(after)[0])
        if before:
            bounds.append(Order.ordered_at < _day_bounds(before)[1])

        day = None
        if at:
            start, end = _day_bounds(at)
            day = and_(Order.ordered_at >= start, Order.ordered_at < end)

        if day is not None and bounds:
            condition = or_(day, and_(*bounds))
        elif day is not None:
            condition = day
        else:
            condition = and_(*bounds)

        return self._query().filter(condition).order_by(Order.ordered_at, Order.id).all()

    def get(self, order_id: int) -> Optional[Order]:
        if not fits_db_integer(order_id):
            return None
        return self._query().filter(Order.id == order_id).first()

    def create(self, draft: OrderDraft) -> Order:
        order = Order(
            user_id=draft.user_id,
            payment_type=draft.payment_type,
            address=draft.address,
            state_id=DEFAULT_STATE_ID,
        )
        order.items = [OrderItem(dish_id=line.id, quantity=line.quantity) for line in draft.dishes]
        self.db.add(order)
        self.db.commit()
        return self.get(order.id)

    def update_state(self, order_id: int, state_id: int) -> Order:
        order = self.db.query(Order).filter(Order.id == order_id).one()
        order.state_id = state_id
        self.db.commit()
        return self.get(order_id)

    def list_states(self) -> List[OrderState]:
        return self.db.query(OrderState).order_by(OrderState.id).all()

    def check_order_exists(self, order_id: int) -> bool:
        if not fits_db_integer(order_id):
            return False
        return self.db.query(Order.id).filter(Order.id == order_id).first() is not None

    def check_order_belongs_to_user(self, order_id: int, user_id: int) -> bool:
        if not (fits_db_integer(order_id) and fits_db_integer(user_id)):
            return False
        return self.db.query(Order.id).filter(
            Order.id == order_id, Order.user_id == user_id
        ).first() is not None

    def check_state_id(self, state_id: int) -> bool:
        if not fits_db_integer(state_id):
            return False
        return self.db.query(OrderState.id).filter(OrderState.id == state_id).first() is not None
