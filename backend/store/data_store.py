from sqlalchemy.orm import Session

from store.users import UserStore
from store.dishes import DishStore
from store.orders import OrderStore


class DataStore:
    """Per-request facade over the entity stores, sharing one session."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserStore(db)
        self.dishes = DishStore(db)
        self.orders = OrderStore(db)

    def rollback(self) -> None:
        self.db.rollback()
