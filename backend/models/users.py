# backend/models/users.py
from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship
from database import Base

# Represents a customer or staff account of the restaurant
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    username = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)
    phone = Column(String, nullable=False)
    address = Column(String, nullable=False)
    password = Column(String, nullable=False)

    # Access level, only changed by administrators
    is_admin = Column(Boolean, nullable=False, default=False)
    id_security_type = Column(Integer, nullable=False, default=1)

    orders = relationship("Order", back_populates="user", cascade="all, delete-orphan")
