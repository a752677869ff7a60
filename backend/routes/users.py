# backend/routes/users.py
import logging

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from database import get_db
from schemas.dish import FavouriteDishOut
from schemas.user import UserResponse
from utils.audit import client_ip, write_log
from utils.guards import owns, require_admin, require_owner_or_admin
from utils.pipeline import Pipeline, RequestContext, build_context, json_response, read_json_body
from utils.tokenJWT import authenticate
from validators.users import searched_user, user_id_param, user_post_body, user_put_body

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger(__name__)

# Fields an update may overwrite; None in the update leaves the stored value
UPDATABLE_FIELDS = ("full_name", "username", "email", "password", "phone", "address")


def _caller_is_target(ctx: RequestContext) -> bool:
    return owns(ctx.caller, ctx.user_id)


def _list_users(ctx: RequestContext):
    users = ctx.store.users.list_all()
    # Admin listings answer 201, existing clients rely on it
    return json_response([UserResponse.model_validate(u) for u in users], status.HTTP_201_CREATED)

def _create_user(ctx: RequestContext):
    user = ctx.store.users.create(ctx.new_user)
    write_log(
        ctx.store.db, user_id=user.id, action="USER_CREATE", resource="users",
        ip=client_ip(ctx.request), meta={"username": user.username},
    )
    logger.info("Registered user %s (%s)", user.id, user.username)
    return json_response(UserResponse.model_validate(user), status.HTTP_201_CREATED)

def _get_user(ctx: RequestContext):
    return json_response(UserResponse.model_validate(ctx.searched_user))

def _update_user(ctx: RequestContext):
    user, changes = ctx.searched_user, ctx.user_changes

    changed = []
    for field in UPDATABLE_FIELDS:
        value = getattr(changes, field)
        if value is not None:
            setattr(user, field, value)
            changed.append(field)
    if ctx.caller.is_admin and changes.id_security_type is not None:
        user.id_security_type = changes.id_security_type
        changed.append("id_security_type")

    user = ctx.store.users.update(user)
    write_log(
        ctx.store.db, user_id=ctx.caller.id, action="USER_UPDATE", resource="users",
        ip=client_ip(ctx.request), meta={"target_id": user.id, "fields": changed},
    )
    return json_response(UserResponse.model_validate(user))

def _delete_user(ctx: RequestContext):
    user = ctx.searched_user
    meta = {"target_id": user.id, "username": user.username}
    ctx.store.users.delete(user)
    write_log(
        ctx.store.db, user_id=ctx.caller.id, action="USER_DELETE", resource="users",
        ip=client_ip(ctx.request), meta=meta,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)

def _favourite_dishes(ctx: RequestContext):
    favourites = ctx.store.users.favourite_dishes(ctx.searched_user)
    return json_response([
        FavouriteDishOut(
            id=dish.id, name=dish.name, short_name=dish.short_name, price=dish.price,
            image_url=dish.image_url, times_ordered=times_ordered,
        )
        for dish, times_ordered in favourites
    ])


list_users_pipeline = Pipeline(
    authenticate, require_admin,
    handler=_list_users,
)
# Registration is the only route reachable without a token
create_user_pipeline = Pipeline(
    read_json_body, user_post_body,
    handler=_create_user,
)
get_user_pipeline = Pipeline(
    authenticate, user_id_param, require_owner_or_admin(_caller_is_target), searched_user,
    handler=_get_user,
)
update_user_pipeline = Pipeline(
    authenticate, require_admin, user_id_param, searched_user, read_json_body, user_put_body,
    handler=_update_user,
)
delete_user_pipeline = Pipeline(
    authenticate, require_admin, user_id_param, searched_user,
    handler=_delete_user,
)
favourite_dishes_pipeline = Pipeline(
    authenticate, user_id_param, require_owner_or_admin(_caller_is_target), searched_user,
    handler=_favourite_dishes,
)


# Retrieve every account (Admin only)
@router.get("")
async def list_users(request: Request, db: Session = Depends(get_db)):
    return await list_users_pipeline(build_context(request, db))

# Register a new account
@router.post("")
async def create_user(request: Request, db: Session = Depends(get_db)):
    return await create_user_pipeline(build_context(request, db))

# Account details for the account owner or an admin
@router.get("/{user_id}")
async def get_user(user_id: str, request: Request, db: Session = Depends(get_db)):
    return await get_user_pipeline(build_context(request, db))

# Partial account update (Admin only)
@router.put("/{user_id}")
async def update_user(user_id: str, request: Request, db: Session = Depends(get_db)):
    return await update_user_pipeline(build_context(request, db))

# Delete an account (Admin only)
@router.delete("/{user_id}")
async def delete_user(user_id: str, request: Request, db: Session = Depends(get_db)):
    return await delete_user_pipeline(build_context(request, db))

# Dishes the user ordered most
@router.get("/{user_id}/dishes")
async def favourite_dishes(user_id: str, request: Request, db: Session = Depends(get_db)):
    return await favourite_dishes_pipeline(build_context(request, db))
