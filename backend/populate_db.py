import os
import sys

# Add 'backend' folder to Python path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from models.dish import Dish
from models.users import User

# Configuration
MENU = [
    # (name, short_name, price)
    ("Bagel de salmón", "BagSal", 425.0),
    ("Hamburguesa clásica", "HamClas", 350.0),
    ("Sandwich veggie", "SandVeg", 310.0),
    ("Ensalada veggie", "EnsVeg", 340.0),
    ("Focaccia", "Focc", 300.0),
    ("Sandwich Focaccia", "SandFoc", 440.0),
]
ADMIN = {
    "full_name": os.getenv("ADMIN_FULL_NAME", "Restaurant Admin"),
    "username": os.getenv("ADMIN_USERNAME", "admin"),
    "email": os.getenv("ADMIN_EMAIL", "admin@restaurant.local"),
    "phone": os.getenv("ADMIN_PHONE", "0000000"),
    "address": os.getenv("ADMIN_ADDRESS", "Main street 1"),
    "password": os.getenv("ADMIN_PASSWORD", "admin"),
}
# End Configuration

def populate():
    """Creates tables, order states, the demo menu and an admin account when missing."""
    init_db()
    session = SessionLocal()
    try:
        known_dishes = {name for (name,) in session.query(Dish.name).all()}
        added = 0
        for name, short_name, price in MENU:
            if name not in known_dishes:
                session.add(Dish(name=name, short_name=short_name, price=price))
                added += 1
        print(f"Dishes added: {added}")

        if not session.query(User).filter(User.username == ADMIN["username"]).first():
            session.add(User(**ADMIN, is_admin=True))
            print(f"Admin account created: {ADMIN['username']}")
        else:
            print("Admin account already exists.")

        session.commit()
    finally:
        session.close()

if __name__ == "__main__":
    populate()
