from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import datetime


# A single validated order line
class OrderLine(BaseModel):
    id: int
    quantity: int


# Normalized order payload handed to the store
class OrderDraft(BaseModel):
    user_id: int
    dishes: List[OrderLine]
    payment_type: int
    address: str


# Query filters for the admin order listing, dates as YYYY-MM-DD
class OrderTimeFilter(BaseModel):
    at: Optional[str] = None
    before: Optional[str] = None
    after: Optional[str] = None


class OrderStateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


# Output schema for an individual order line
class OrderItemOut(BaseModel):
    id: int
    name: str
    price: float
    quantity: int


# Output schema representing the full order details
class OrderResponse(BaseModel):
    id: int
    user_id: int
    ordered_at: datetime
    payment_type: int
    address: str
    state: OrderStateOut
    dishes: List[OrderItemOut]
    total: float
