from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from buildmarket.users.models import UserType


class UserRegister(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6)
    user_type: UserType = UserType.INDIVIDUAL
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    inn: Optional[str] = None
    website: Optional[str] = None


class UserLogin(BaseModel):
    # Either the username or the e-mail address
    username: str
    password: str


class UserUpdate(BaseModel):
    email: EmailStr = None
    user_type: UserType = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None
    inn: Optional[str] = None
    website: Optional[str] = None


class UserSummary(BaseModel):
    id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar: Optional[str] = None
    user_type: UserType
    rating: int = 0
    completed_projects: int = 0
    is_verified: bool = False
    is_top_specialist: bool = False

    class Config:
        from_attributes = True


class UserResponse(UserSummary):
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    inn: Optional[str] = None
    website: Optional[str] = None
    is_admin: bool = False
    wallet_balance: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    token: str


class PlatformStats(BaseModel):
    active_tenders: int
    users: int
    listings: int
    completed_projects: int
