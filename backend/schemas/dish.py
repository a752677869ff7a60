from pydantic import BaseModel, ConfigDict
from typing import Optional


class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# Menu position as shown to clients
class DishOut(ORMBase):
    id: int
    name: str
    short_name: Optional[str] = None
    price: float
    image_url: Optional[str] = None


# Dish of the favourites view with the quantity the user ordered so far
class FavouriteDishOut(DishOut):
    times_ordered: int
