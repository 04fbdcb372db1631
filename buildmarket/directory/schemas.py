from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from buildmarket.moderation import ModerationStatus
from buildmarket.users.schemas import UserSummary


class ProfileBase(BaseModel):
    title: str = Field(min_length=10, max_length=150)
    description: str = Field(min_length=50, max_length=5000)
    specialty: str = Field(min_length=2)
    experience: int = Field(ge=0, le=50)
    location: str = Field(min_length=3)
    specializations: List[str] = []
    images: List[str] = []


class ProfileUpdateBase(BaseModel):
    # Unset fields are left alone; null is rejected for required columns
    title: str = Field(default=None, min_length=10, max_length=150)
    description: str = Field(default=None, min_length=50, max_length=5000)
    specialty: str = Field(default=None, min_length=2)
    experience: int = Field(default=None, ge=0, le=50)
    location: str = Field(default=None, min_length=3)
    specializations: Optional[List[str]] = None
    images: Optional[List[str]] = None


class ProfileResponseBase(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    specialty: str
    experience: int
    location: str
    specializations: List[str] = []
    images: List[str] = []
    moderation_status: ModerationStatus
    moderation_comment: Optional[str] = None
    moderated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    owner: Optional[UserSummary] = None

    class Config:
        from_attributes = True


# ------- Specialists -------
class SpecialistCreate(ProfileBase):
    hourly_rate: int = Field(ge=100, le=50000)


class SpecialistUpdate(ProfileUpdateBase):
    hourly_rate: int = Field(default=None, ge=100, le=50000)


class SpecialistResponse(ProfileResponseBase):
    hourly_rate: int


# ------- Crews -------
class CrewCreate(ProfileBase):
    member_count: int = Field(ge=2, le=50)
    daily_rate: int = Field(ge=5000, le=500000)


class CrewUpdate(ProfileUpdateBase):
    member_count: int = Field(default=None, ge=2, le=50)
    daily_rate: int = Field(default=None, ge=5000, le=500000)


class CrewResponse(ProfileResponseBase):
    member_count: int
    daily_rate: int
