from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from buildmarket.users.schemas import UserSummary


class MessageCreate(BaseModel):
    receiver_id: int
    content: str = Field(min_length=1, max_length=5000)


class MessageResponse(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ConversationResponse(BaseModel):
    user: UserSummary
    last_message: MessageResponse
    unread_count: int = 0


class UnreadCountResponse(BaseModel):
    count: int
