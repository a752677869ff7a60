from pydantic import BaseModel, ConfigDict
from typing import Optional

# Shared properties for user models
class UserBase(BaseModel):
    full_name: str
    username: str
    email: str
    phone: str
    address: str

# Validated registration payload
class UserCreate(UserBase):
    password: str

# Validated partial update, None means "leave unchanged"
class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    password: Optional[str] = None
    id_security_type: Optional[int] = None

# Output schema for user profile details, never exposes the password
class UserResponse(UserBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    is_admin: bool
    id_security_type: int

# Schema for user authentication credentials
class UserLogin(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: str

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
