# backend/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from database import get_db
from schemas import user as schemas
from store.users import UserStore
from utils.audit import client_ip, write_log
from utils.tokenJWT import create_access_token

router = APIRouter(tags=["Auth"])


# Authenticate user by username or email and issue JWT token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    users = UserStore(db)
    db_user = None
    if payload.username:
        db_user = users.get_by_username(payload.username)
    elif payload.email:
        db_user = users.get_by_email(payload.email)

    # Validate credentials and log failure on error
    if not db_user or db_user.password != payload.password:
        write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request),
                  meta={"username": payload.username, "email": payload.email})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": str(db_user.id)})

    # Log successful login event
    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"username": db_user.username})

    return {"access_token": access_token, "token_type": "bearer"}
