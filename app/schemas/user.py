from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from app.models.user import UserRole


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)

    model_config = {
        "extra": "forbid"
    }


class AdminUserCreate(UserCreate):
    role: UserRole = UserRole.USER


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserBasic(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    role: UserRole

    model_config = {
        "from_attributes": True
    }


class UserOut(UserBasic):
    created_at: datetime
    updated_at: Optional[datetime] = None


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8)
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    role: Optional[UserRole] = None

    model_config = {
        "extra": "forbid"
    }
