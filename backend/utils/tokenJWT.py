# utils/tokenJWT.py
import logging
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional

from config import settings
from store.data_store import DataStore
from utils.errors import Unauthenticated
from utils.pipeline import Continue, Fail, Identity, Outcome, RequestContext, parse_int

logger = logging.getLogger(__name__)

# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

# Resolve the caller behind an "Authorization: Bearer <token>" header
def resolve_identity(authorization: Optional[str], store: DataStore) -> Identity:
    if not authorization:
        raise Unauthenticated()

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Unauthenticated()

    try:
        payload = jwt.decode(token.strip(), settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        logger.debug("Rejected token: %s", exc)
        raise Unauthenticated()

    user_id = parse_int(payload.get("sub"))
    if user_id is None:
        raise Unauthenticated()

    # Admin rights come from the stored account, not from the token
    user = store.users.get_by_id(user_id)
    if user is None:
        raise Unauthenticated()
    return Identity(id=user.id, is_admin=bool(user.is_admin))

# Pipeline step: attach the resolved caller to the context
def authenticate(ctx: RequestContext) -> Outcome:
    try:
        caller = resolve_identity(ctx.request.headers.get("Authorization"), ctx.store)
    except Unauthenticated as error:
        return Fail(error)
    return Continue(ctx.extend(caller=caller))
