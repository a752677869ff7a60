# backend/routes/orders.py
import logging
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.order import Order
from schemas.order import OrderItemOut, OrderResponse, OrderStateOut
from utils.audit import client_ip, write_log
from utils.guards import require_admin, require_owner_or_admin
from utils.pipeline import Pipeline, RequestContext, build_context, json_response, read_json_body
from utils.tokenJWT import authenticate
from validators.orders import (
    caller_owns_order, order_id_param, order_post_body, order_state_query, time_filters,
)

router = APIRouter(prefix="/orders", tags=["Orders"])
logger = logging.getLogger(__name__)

# Map Order model to OrderResponse schema
def _order_to_out(order: Order) -> OrderResponse:
    items: List[OrderItemOut] = []
    for it in order.items:
        items.append(OrderItemOut(
            id=it.dish_id,
            name=it.dish.name,
            price=it.dish.price,
            quantity=it.quantity,
        ))
    return OrderResponse(
        id=order.id,
        user_id=order.user_id,
        ordered_at=order.ordered_at,
        payment_type=order.payment_type,
        address=order.address,
        state=OrderStateOut.model_validate(order.state),
        dishes=items,
        total=round(sum(it.price * it.quantity for it in items), 2),
    )

def _list_orders(ctx: RequestContext):
    orders = ctx.store.orders.list_filtered(ctx.time_filters)
    # Admin listings answer 201, existing clients rely on it
    return json_response([_order_to_out(o) for o in orders], status.HTTP_201_CREATED)

def _create_order(ctx: RequestContext):
    order = ctx.store.orders.create(ctx.order_draft)
    write_log(
        ctx.store.db, user_id=ctx.caller.id, action="ORDER_CREATE", resource="orders",
        ip=client_ip(ctx.request),
        meta={"order_id": order.id, "dishes": len(order.items)},
    )
    logger.info("Order %s created by user %s", order.id, ctx.caller.id)
    return json_response(_order_to_out(order))

def _get_order(ctx: RequestContext):
    return json_response(_order_to_out(ctx.store.orders.get(ctx.order_id)))

def _update_order_state(ctx: RequestContext):
    old_state = ctx.store.orders.get(ctx.order_id).state_id
    order = ctx.store.orders.update_state(ctx.order_id, ctx.order_state_id)
    write_log(
        ctx.store.db, user_id=ctx.caller.id, action="ORDER_STATE_CHANGE", resource="orders",
        ip=client_ip(ctx.request),
        meta={"order_id": order.id, "old": old_state, "new": order.state_id},
    )
    return json_response(_order_to_out(order))

def _list_states(ctx: RequestContext):
    return json_response([OrderStateOut.model_validate(s) for s in ctx.store.orders.list_states()])


list_orders_pipeline = Pipeline(
    authenticate, require_admin, time_filters,
    handler=_list_orders,
)
create_order_pipeline = Pipeline(
    authenticate, read_json_body, order_post_body,
    handler=_create_order,
)
get_order_pipeline = Pipeline(
    authenticate, order_id_param, require_owner_or_admin(caller_owns_order),
    handler=_get_order,
)
update_order_state_pipeline = Pipeline(
    authenticate, require_admin, order_id_param, order_state_query,
    handler=_update_order_state,
)
list_states_pipeline = Pipeline(authenticate, handler=_list_states)


# List orders of a day or date range (Admin only)
@router.get("")
async def list_orders(request: Request, db: Session = Depends(get_db)):
    return await list_orders_pipeline(build_context(request, db))

# Place a new order for the caller
@router.post("")
async def create_order(request: Request, db: Session = Depends(get_db)):
    return await create_order_pipeline(build_context(request, db))

# Known order states, declared before /{order_id} so it is not shadowed
@router.get("/states")
async def list_order_states(request: Request, db: Session = Depends(get_db)):
    return await list_states_pipeline(build_context(request, db))

# Order details for its owner or an admin
@router.get("/{order_id}")
async def get_order(order_id: str, request: Request, db: Session = Depends(get_db)):
    return await get_order_pipeline(build_context(request, db))

# Move an order to another state (Admin only), e.g. PUT /orders/3?state=2
@router.put("/{order_id}")
async def update_order_state(order_id: str, request: Request, db: Session = Depends(get_db)):
    return await update_order_state_pipeline(build_context(request, db))
