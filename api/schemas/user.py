# api/schemas/user.py
from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from core.sa.models import MembershipType, UserStatus


class UserBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=10, max_length=15)
    membership_type: MembershipType


class UserCreate(UserBase):
    pass


class UserUpdate(UserBase):
    status: UserStatus


class User(UserBase):
    id: int
    status: UserStatus
    join_date: datetime
    active_loans: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserList(BaseModel):
    items: List[User]
    total: int
    page: int
    size: int

    model_config = ConfigDict(from_attributes=True)
