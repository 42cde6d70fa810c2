# planning/schemas/user.py
from __future__ import annotations
from typing import Optional
from pydantic import EmailStr, Field

from planning.models.user import UserRole
from planning.schemas.common import CamelModel

class UserBase(CamelModel):
    first_name: str = Field(min_length=1, max_length=120)
    last_name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    phone: Optional[str] = None

class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=128)

class ProfileUpdate(CamelModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=8, max_length=128)

class UserUpdate(ProfileUpdate):
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

class UserBrief(CamelModel):
    id: int
    first_name: str
    last_name: str
    role: str

class UserOut(UserBrief):
    email: str
    phone: Optional[str] = None
    is_active: bool = True
