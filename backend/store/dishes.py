from typing import List, Optional

from sqlalchemy.orm import Session

from database import fits_db_integer
from models.dish import Dish


class DishStore:
    """Read access to the menu."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, dish_id: int) -> Optional[Dish]:
        if not fits_db_integer(dish_id):
            return None
        return self.db.query(Dish).filter(Dish.id == dish_id).first()

    def list_all(self) -> List[Dish]:
        return self.db.query(Dish).order_by(Dish.id).all()
