# backend/models/dish.py
from sqlalchemy import Column, Integer, String, Float, CheckConstraint
from database import Base

# Model Dish
# A single position of the menu that can be ordered.
class Dish(Base):
    __tablename__ = "dishes"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    short_name = Column(String, nullable=True)

    price = Column(Float, CheckConstraint("price >= 0"), nullable=False)

    # Optional picture shown by the frontend.
    image_url = Column(String, nullable=True)
