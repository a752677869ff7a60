from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from database import fits_db_integer
from models.users import User
from models.dish import Dish
from models.order import Order, OrderItem
from schemas.user import UserCreate


class UserStore:
    """SQLAlchemy access to user accounts."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        if not fits_db_integer(user_id):
            return None
        return self.db.query(User).filter(User.id == user_id).first()

    def get_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def list_all(self) -> List[User]:
        return self.db.query(User).order_by(User.id).all()

    def create(self, data: UserCreate) -> User:
        user = User(**data.model_dump())
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user: User) -> User:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.commit()

    def favourite_dishes(self, user: User) -> List[Tuple[Dish, int]]:
        """Dishes ordered by the user with the summed quantity, most ordered first."""
        total = func.sum(OrderItem.quantity)
        rows = (
            self.db.query(Dish, total.label("times_ordered"))
            .join(OrderItem, OrderItem.dish_id == Dish.id)
            .join(Order, Order.id == OrderItem.order_id)
            .filter(Order.user_id == user.id)
            .group_by(Dish.id)
            .order_by(total.desc(), Dish.id)
            .all()
        )
        return [(dish, int(times_ordered)) for dish, times_ordered in rows]
