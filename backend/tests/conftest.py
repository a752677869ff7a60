"""Shared fixtures: in-memory SQLite database, API client and account factories."""

import os

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"

from datetime import datetime
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from database import Base, SessionLocal, engine, init_db
from main import app
from models.dish import Dish
from models.order import Order, OrderItem
from models.users import User
from utils.tokenJWT import create_access_token


@pytest.fixture
def db():
    """Fresh schema with seeded order states for every test."""
    Base.metadata.drop_all(bind=engine)
    init_db()
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def make_user(db) -> Callable[..., User]:
    counter = {"n": 0}

    def _make(**overrides) -> User:
        counter["n"] += 1
        n = counter["n"]
        data = {
            "full_name": f"User Number{n}",
            "username": f"user{n}",
            "email": f"user{n}@example.com",
            "phone": "555-0100",
            "address": f"Street {n} 10",
            "password": "secret",
            "is_admin": False,
        }
        data.update(overrides)
        user = User(**data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user) -> User:
    return make_user(username="admin", email="admin@example.com", is_admin=True)


@pytest.fixture
def customer(make_user) -> User:
    return make_user(username="alice", email="alice@example.com", full_name="Alice Doe")


@pytest.fixture
def other_customer(make_user) -> User:
    return make_user(username="bob", email="bob@example.com", full_name="Bob Roe")


@pytest.fixture
def auth_headers() -> Callable[[User], dict]:
    def _headers(user: User) -> dict:
        token = create_access_token({"sub": str(user.id)})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def dishes(db):
    menu = [
        Dish(name="Bagel de salmón", short_name="BagSal", price=425.0),
        Dish(name="Hamburguesa clásica", short_name="HamClas", price=350.0),
        Dish(name="Focaccia", short_name="Focc", price=300.0),
    ]
    db.add_all(menu)
    db.commit()
    for dish in menu:
        db.refresh(dish)
    return menu


@pytest.fixture
def make_order(db) -> Callable[..., Order]:
    def _make(user: User, lines, ordered_at: datetime = None, state_id: int = 1) -> Order:
        order = Order(
            user_id=user.id,
            payment_type=1,
            address="Street 1 10",
            state_id=state_id,
            ordered_at=ordered_at or datetime.now(),
        )
        order.items = [OrderItem(dish_id=dish.id, quantity=qty) for dish, qty in lines]
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    return _make
