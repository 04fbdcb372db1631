from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from buildmarket.categories import Category, Subcategory
from buildmarket.marketplace.models import ListingType
from buildmarket.moderation import ModerationStatus
from buildmarket.users.schemas import UserSummary


class ListingCreate(BaseModel):
    title: str = Field(min_length=3, max_length=150)
    description: str = Field(min_length=10, max_length=5000)
    category: Category
    subcategory: Subcategory = None
    price: int = Field(ge=0)
    listing_type: ListingType = ListingType.SELL
    location: str = Field(min_length=2)
    condition: Optional[str] = None
    images: List[str] = []


class ListingUpdate(BaseModel):
    title: str = Field(default=None, min_length=3, max_length=150)
    description: str = Field(default=None, min_length=10, max_length=5000)
    category: Category = None
    subcategory: Subcategory = None
    price: int = Field(default=None, ge=0)
    listing_type: ListingType = None
    location: str = Field(default=None, min_length=2)
    condition: Optional[str] = None
    is_active: bool = None
    images: Optional[List[str]] = None


class ListingResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    category: Category
    subcategory: Optional[str] = None
    price: int
    listing_type: ListingType
    location: str
    condition: Optional[str] = None
    is_active: bool = True
    images: List[str] = []
    view_count: int = 0
    moderation_status: ModerationStatus
    moderation_comment: Optional[str] = None
    moderated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    owner: Optional[UserSummary] = None

    class Config:
        from_attributes = True
