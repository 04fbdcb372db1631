from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from buildmarket.users.schemas import UserSummary


class ReviewCreate(BaseModel):
    reviewee_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)


class ReviewResponse(BaseModel):
    id: int
    reviewer_id: int
    reviewee_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    reviewer: Optional[UserSummary] = None

    class Config:
        from_attributes = True
