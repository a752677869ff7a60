# validators/users.py
"""
Validation rules and pipeline steps for /users.

Each rule takes a raw value from the request body and returns a
human-readable rejection reason, or None when the value is acceptable. Rules
needing the store (uniqueness checks) receive it explicitly.
"""
from typing import List, NamedTuple, Optional

from database import fits_db_integer
from schemas.user import UserCreate, UserUpdate
from store.data_store import DataStore
from utils.errors import NotFound, ValidationFailed
from utils.pipeline import Continue, Fail, Outcome, RequestContext, parse_int

# Body fields in the order they are validated
USER_FIELDS = ("full_name", "username", "email", "phone", "address", "password")


class FieldRejection(NamedTuple):
    field: str
    reason: str


def full_name(value) -> Optional[str]:
    if not value:
        return "Empty full_name."
    if not isinstance(value, str):
        return "full_name must be a string."
    if len(value) < 2:
        return "Full name is too short..."


def username(value, store: DataStore, current_id: int = None) -> Optional[str]:
    if not value:
        return "Empty username."
    if not isinstance(value, str):
        return "username must be a string."
    taken = store.users.get_by_username(value)
    if taken and taken.id != current_id:
        return "Username already exists."


def email(value, store: DataStore, current_id: int = None) -> Optional[str]:
    if not value:
        return "Empty email."
    if not isinstance(value, str):
        return "email must be a string."
    taken = store.users.get_by_email(value)
    if taken and taken.id != current_id:
        return "Email already exists."


def phone(value) -> Optional[str]:
    if not value:
        return "Empty phone."
    if not isinstance(value, str):
        return "phone must be a string."
    if len(value) < 4:
        return "Phone is too short..."


def address(value) -> Optional[str]:
    if not value:
        return "Empty address."
    if not isinstance(value, str):
        return "address must be a string."
    if len(value) < 4:
        return "Address is too short..."


def password(value) -> Optional[str]:
    if not value:
        return "Empty password."
    if not isinstance(value, str):
        return "password must be a string."
    if len(value) < 4:
        return "Password is too short..."


def id_security_type(value) -> Optional[str]:
    parsed = parse_int(value)
    if parsed is None or parsed <= 0 or not fits_db_integer(parsed):
        return "id_security_type invalid number."


def _rules(store: DataStore, current_id: int = None) -> List[tuple]:
    return [
        ("full_name", full_name),
        ("username", lambda value: username(value, store, current_id)),
        ("email", lambda value: email(value, store, current_id)),
        ("phone", phone),
        ("address", address),
        ("password", password),
    ]


def _collect(body: dict, rules, skip_missing: bool) -> List[FieldRejection]:
    rejections = []
    for field, rule in rules:
        value = body.get(field)
        if skip_missing and value is None:
            continue
        reason = rule(value)
        if reason:
            rejections.append(FieldRejection(field, reason))
    return rejections


def validate_new_user(body: dict, store: DataStore) -> List[FieldRejection]:
    """Every registration field is required."""
    return _collect(body, _rules(store), skip_missing=False)


def validate_user_changes(body: dict, store: DataStore, user_id: int, caller_is_admin: bool) -> List[FieldRejection]:
    """Only fields present and non-null in the body are checked; id_security_type only for admins."""
    rules = _rules(store, current_id=user_id)
    if caller_is_admin:
        rules.append(("id_security_type", id_security_type))
    return _collect(body, rules, skip_missing=True)


# Pipeline steps

def user_post_body(ctx: RequestContext) -> Outcome:
    rejections = validate_new_user(ctx.body, ctx.store)
    if rejections:
        return Fail(ValidationFailed(rejections[0].reason))
    new_user = UserCreate(**{field: ctx.body[field] for field in USER_FIELDS})
    return Continue(ctx.extend(new_user=new_user))


def user_id_param(ctx: RequestContext) -> Outcome:
    user_id = parse_int(ctx.request.path_params.get("user_id"))
    if user_id is None:
        return Fail(ValidationFailed("Invalid user ID number."))
    return Continue(ctx.extend(user_id=user_id))


def searched_user(ctx: RequestContext) -> Outcome:
    user = ctx.store.users.get_by_id(ctx.user_id)
    if user is None:
        return Fail(NotFound("The user was not found."))
    return Continue(ctx.extend(searched_user=user))


def user_put_body(ctx: RequestContext) -> Outcome:
    caller_is_admin = bool(ctx.caller and ctx.caller.is_admin)
    rejections = validate_user_changes(ctx.body, ctx.store, ctx.user_id, caller_is_admin)
    if rejections:
        return Fail(ValidationFailed(rejections[0].reason))

    # id_security_type from a non-admin caller is dropped silently
    security_type = parse_int(ctx.body.get("id_security_type")) if caller_is_admin else None
    changes = UserUpdate(
        **{field: ctx.body.get(field) for field in USER_FIELDS},
        id_security_type=security_type,
    )
    return Continue(ctx.extend(user_changes=changes))

