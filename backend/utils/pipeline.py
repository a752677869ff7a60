# utils/pipeline.py
"""
Sequential request pipelines.

A route is described as an ordered list of steps followed by a handler. Every
step receives the per-request ``RequestContext`` and returns either
``Continue(context)``, carrying the (possibly extended) context to the next
step, or ``Fail(error)``, which ends the request with that error's response.
The handler runs only when every step continued and produces the response.

Steps and handlers may be plain functions or coroutines. Plain functions do
blocking store work, so they run in the threadpool, keeping the event loop free
for other requests. Steps of one request never overlap: each one finishes
before the next starts.

Anything raised that is not an ``ApiError`` is logged, the session is rolled
back and the client gets a bare 500.
"""
import inspect
import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Optional, Union

from fastapi import Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from models.users import User
from schemas.order import OrderDraft, OrderTimeFilter
from schemas.user import UserCreate, UserUpdate
from store.data_store import DataStore
from utils.errors import ApiError, InternalFailure, ValidationFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    id: int
    is_admin: bool


@dataclass(frozen=True)
class RequestContext:
    request: Request
    store: DataStore

    # Filled in by the steps, in the order the pipeline runs them
    caller: Optional[Identity] = None
    body: Optional[dict] = None
    time_filters: Optional[OrderTimeFilter] = None
    order_id: Optional[int] = None
    order_state_id: Optional[int] = None
    order_draft: Optional[OrderDraft] = None
    user_id: Optional[int] = None
    searched_user: Optional[User] = None
    new_user: Optional[UserCreate] = None
    user_changes: Optional[UserUpdate] = None

    def extend(self, **changes: Any) -> "RequestContext":
        return replace(self, **changes)


@dataclass(frozen=True)
class Continue:
    context: RequestContext


@dataclass(frozen=True)
class Fail:
    error: ApiError


Outcome = Union[Continue, Fail]
Step = Callable[[RequestContext], Union[Outcome, Awaitable[Outcome]]]
Handler = Callable[[RequestContext], Union[Response, Awaitable[Response]]]


def build_context(request: Request, db: Session) -> RequestContext:
    return RequestContext(request=request, store=DataStore(db))


def json_response(payload, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))


def _name(fn) -> str:
    return getattr(fn, "__name__", repr(fn))


async def _run(fn, ctx: RequestContext):
    if inspect.iscoroutinefunction(fn):
        return await fn(ctx)
    return await run_in_threadpool(fn, ctx)


class Pipeline:
    def __init__(self, *steps: Step, handler: Handler):
        self.steps = steps
        self.handler = handler

    async def __call__(self, ctx: RequestContext) -> Response:
        for step in self.steps:
            try:
                outcome = await _run(step, ctx)
            except ApiError as error:
                outcome = Fail(error)
            except Exception:
                return self._internal_failure(ctx, step)

            if isinstance(outcome, Fail):
                logger.info(
                    "%s %s rejected by %s: %s",
                    ctx.request.method, ctx.request.url.path, _name(step), outcome.error,
                )
                return outcome.error.to_response()
            ctx = outcome.context

        try:
            return await _run(self.handler, ctx)
        except ApiError as error:
            return error.to_response()
        except Exception:
            return self._internal_failure(ctx, self.handler)

    def _internal_failure(self, ctx: RequestContext, fn) -> Response:
        logger.exception(
            "Unhandled error in %s for %s %s", _name(fn), ctx.request.method, ctx.request.url.path
        )
        ctx.store.rollback()
        return InternalFailure().to_response()


async def read_json_body(ctx: RequestContext) -> Outcome:
    # An empty body counts as an empty object
    raw = await ctx.request.body()
    if not raw.strip():
        return Continue(ctx.extend(body={}))
    try:
        body = json.loads(raw)
    except ValueError:
        return Fail(ValidationFailed("Invalid JSON body."))
    if not isinstance(body, dict):
        return Fail(ValidationFailed("Request body must be a JSON object."))
    return Continue(ctx.extend(body=body))


def parse_int(value) -> Optional[int]:
    """Integer value of a JSON number or numeric string, None otherwise. Booleans are not integers."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
