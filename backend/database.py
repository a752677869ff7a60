# backend/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv

load_dotenv()

from config import settings

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# SQLAlchemy expects postgresql://, hosted providers still hand out postgres://
if SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgres://", "postgresql://", 1)

engine_kwargs = {}
if "sqlite" in SQLALCHEMY_DATABASE_URL:
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    # In-memory database must live on a single shared connection
    if SQLALCHEMY_DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool

engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Integer columns are signed 64-bit, larger values cannot be bound as parameters
DB_INTEGER_MIN = -2 ** 63
DB_INTEGER_MAX = 2 ** 63 - 1

def fits_db_integer(value: int) -> bool:
    return DB_INTEGER_MIN <= value <= DB_INTEGER_MAX

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    # Register every table on Base before creating them
    import models.users, models.dish, models.log  # noqa: F401
    from models.order import OrderState, ORDER_STATES

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        known = {state_id for (state_id,) in db.query(OrderState.id).all()}
        for state_id, name in ORDER_STATES.items():
            if state_id not in known:
                db.add(OrderState(id=state_id, name=name))
        db.commit()
    finally:
        db.close()
