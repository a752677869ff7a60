# utils/guards.py
from typing import Callable

from utils.errors import Forbidden
from utils.pipeline import Continue, Fail, Identity, Outcome, RequestContext

# Authorization guards, run after `authenticate` has set ctx.caller


def is_admin(caller: Identity) -> bool:
    return bool(caller and caller.is_admin)


def owns(caller: Identity, owner_id: int) -> bool:
    return bool(caller) and caller.id == owner_id


def require_admin(ctx: RequestContext) -> Outcome:
    if not is_admin(ctx.caller):
        return Fail(Forbidden())
    return Continue(ctx)


def require_owner_or_admin(is_owner: Callable[[RequestContext], bool]):
    """Build a step letting through admins and callers for whom `is_owner(ctx)` holds."""

    def require_owner_or_admin(ctx: RequestContext) -> Outcome:
        if is_admin(ctx.caller) or is_owner(ctx):
            return Continue(ctx)
        return Fail(Forbidden())

    return require_owner_or_admin
