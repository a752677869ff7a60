# validators/orders.py
"""Validation rules and pipeline steps for /orders."""
import re
from datetime import datetime
from typing import List, Optional

from database import DB_INTEGER_MAX, fits_db_integer
from schemas.order import OrderDraft, OrderLine, OrderTimeFilter
from store.data_store import DataStore
from utils.errors import NotFound, ValidationFailed
from utils.pipeline import Continue, Fail, Outcome, RequestContext, parse_int

TIME_FILTERS = ("at", "before", "after")

# Plain decimal numbers such as "12", "-3.5" or "1e3"
NUMERIC = re.compile(r"\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*")

LINE_SHAPE_REASON = "Every ordered dish must contain two properties: id -> integer and quantity -> integer>0"


def dishes(value, store: DataStore) -> Optional[str]:
    if not isinstance(value, list):
        return "dishes should be an array!"
    if not value:
        return "No dishes were ordered!"

    for dish in value:
        if (
            not isinstance(dish, dict)
            or parse_int(dish.get("id")) is None
            or not 0 < (parse_int(dish.get("quantity")) or 0) <= DB_INTEGER_MAX
        ):
            return LINE_SHAPE_REASON

    # One lookup per line, orders are small
    for dish in value:
        dish_id = parse_int(dish["id"])
        if store.dishes.get(dish_id) is None:
            return f"The ordered dish id {dish_id} is not available."


def payment_type(value) -> Optional[str]:
    parsed = parse_int(value)
    if parsed is None or not fits_db_integer(parsed):
        return "payment_type should be numeric!"


def _is_numeric(text: str) -> bool:
    return NUMERIC.fullmatch(text) is not None


def address(value) -> Optional[str]:
    if not value:
        return "Empty address."
    if not isinstance(value, str) or _is_numeric(value):
        return "Address must be a string!"
    if len(value) < 4:
        return "Address is too short..."


def merge_order_lines(lines: List[OrderLine]) -> List[OrderLine]:
    """Collapse lines sharing a dish id into one, summing quantities, keeping first-seen order."""
    merged = {}
    for line in lines:
        if line.id in merged:
            merged[line.id].quantity += line.quantity
        else:
            merged[line.id] = OrderLine(id=line.id, quantity=line.quantity)
    return list(merged.values())


def normalize_date(value: str) -> str:
    """
    Parse an ISO-8601 date or datetime and return its calendar date as YYYY-MM-DD.

    Datetimes carrying an offset are converted to the server's local time
    first, the clock orders are stamped with. Raises ValueError for anything
    that is not a valid calendar date.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.date().isoformat()


# Pipeline steps

def time_filters(ctx: RequestContext) -> Outcome:
    filters = {}
    for name in TIME_FILTERS:
        raw = ctx.request.query_params.get(name)
        if not raw:
            continue
        try:
            filters[name] = normalize_date(raw)
        except ValueError:
            return Fail(ValidationFailed("Invalid date inserted, please use ISO notation YYYY-MM-DD."))
    return Continue(ctx.extend(time_filters=OrderTimeFilter(**filters)))


def order_post_body(ctx: RequestContext) -> Outcome:
    body = ctx.body
    checks = (
        dishes(body.get("dishes"), ctx.store),
        payment_type(body.get("payment_type")),
        address(body.get("address")),
    )
    for reason in checks:
        if reason:
            return Fail(ValidationFailed(reason))

    lines = [
        OrderLine(id=parse_int(dish["id"]), quantity=parse_int(dish["quantity"]))
        for dish in body["dishes"]
    ]
    merged = merge_order_lines(lines)
    if any(line.quantity > DB_INTEGER_MAX for line in merged):
        return Fail(ValidationFailed(LINE_SHAPE_REASON))
    draft = OrderDraft(
        user_id=ctx.caller.id,
        dishes=merged,
        payment_type=parse_int(body["payment_type"]),
        address=body["address"],
    )
    return Continue(ctx.extend(order_draft=draft))


def order_id_param(ctx: RequestContext) -> Outcome:
    order_id = parse_int(ctx.request.path_params.get("order_id"))
    if order_id is None:
        return Fail(ValidationFailed("Invalid order ID."))

    if not ctx.store.orders.check_order_exists(order_id):
        return Fail(NotFound("The order ID doesn't exists."))
    return Continue(ctx.extend(order_id=order_id))


def order_state_query(ctx: RequestContext) -> Outcome:
    state = parse_int(ctx.request.query_params.get("state"))
    if state is None:
        return Fail(ValidationFailed("state query param should be a number."))

    if not ctx.store.orders.check_state_id(state):
        return Fail(ValidationFailed("Invalid state ID."))
    return Continue(ctx.extend(order_state_id=state))


def caller_owns_order(ctx: RequestContext) -> bool:
    return ctx.store.orders.check_order_belongs_to_user(ctx.order_id, ctx.caller.id)
