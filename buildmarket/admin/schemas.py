from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import enum

from buildmarket.moderation import ModerationStatus
from buildmarket.users.schemas import UserResponse


class ModerationKind(str, enum.Enum):
    TENDERS = "tenders"
    MARKETPLACE = "marketplace"
    SPECIALISTS = "specialists"
    CREWS = "crews"


class AdminUserUpdate(BaseModel):
    is_admin: bool = None
    is_verified: bool = None
    wallet_balance: int = Field(default=None, ge=0)
    is_top_specialist: bool = None


class MakeAdminRequest(BaseModel):
    user_id: int


class MakeAdminResponse(BaseModel):
    message: str
    user: UserResponse


class ModerationDecision(BaseModel):
    comment: Optional[str] = None


class ModerationResult(BaseModel):
    message: str
    id: int
    moderation_status: ModerationStatus
    moderation_comment: Optional[str] = None
    moderated_by: Optional[int] = None
    moderated_at: Optional[datetime] = None


class AdminStatsBody(BaseModel):
    users: int
    tenders: int
    listings: int
    activeUsers: int


class AdminStats(BaseModel):
    stats: AdminStatsBody
