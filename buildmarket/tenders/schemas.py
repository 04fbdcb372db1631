from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from buildmarket.categories import Category, Subcategory
from buildmarket.moderation import ModerationStatus
from buildmarket.tenders.models import TenderStatus, PersonType, BidStatus
from buildmarket.users.schemas import UserSummary


# ------- Tenders -------
class TenderCreate(BaseModel):
    title: str = Field(min_length=5, max_length=150)
    description: str = Field(min_length=20, max_length=2000)
    category: Category
    subcategory: Subcategory = None
    budget: Optional[int] = Field(default=None, ge=0)
    location: str = Field(min_length=2)
    deadline: Optional[datetime] = None
    person_type: PersonType = PersonType.INDIVIDUAL
    required_professions: List[str] = []
    images: List[str] = []


class TenderUpdate(BaseModel):
    # Omitted fields keep their value; null is only accepted for nullable columns
    title: str = Field(default=None, min_length=5, max_length=150)
    description: str = Field(default=None, min_length=20, max_length=2000)
    category: Category = None
    subcategory: Subcategory = None
    budget: Optional[int] = Field(default=None, ge=0)
    location: str = Field(default=None, min_length=2)
    deadline: Optional[datetime] = None
    status: TenderStatus = None
    person_type: PersonType = None
    required_professions: Optional[List[str]] = None
    images: Optional[List[str]] = None


class TenderResponse(BaseModel):
    id: int
    user_id: int
    title: str
    description: str
    category: Category
    subcategory: Optional[str] = None
    budget: Optional[int] = None
    location: str
    deadline: Optional[datetime] = None
    status: TenderStatus
    person_type: PersonType
    required_professions: List[str] = []
    images: List[str] = []
    view_count: int = 0
    moderation_status: ModerationStatus
    moderation_comment: Optional[str] = None
    moderated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    owner: Optional[UserSummary] = None
    bids_count: int = 0

    class Config:
        from_attributes = True


# ------- Bids -------
class BidCreate(BaseModel):
    amount: int = Field(gt=0)
    description: str = Field(min_length=1)
    timeframe: int = Field(gt=0)
    # Checked in the route so a missing list gets the same answer as an empty one
    documents: Optional[List[str]] = None


class BidRejectRequest(BaseModel):
    reason: Optional[str] = None


class BidResponse(BaseModel):
    id: int
    tender_id: int
    user_id: int
    amount: int
    description: str
    timeframe: int
    documents: List[str] = []
    status: BidStatus
    is_accepted: bool = False
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    bidder: Optional[UserSummary] = None

    class Config:
        from_attributes = True
