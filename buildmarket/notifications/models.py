from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
import enum

from buildmarket.column_types import EnumValue
from buildmarket.database import Base


class NotificationType(str, enum.Enum):
    TENDER_BID = "tender_bid"
    BID_APPROVED = "bid_approved"
    BID_REJECTED = "bid_rejected"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(EnumValue(NotificationType, length=30), nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    related_id = Column(Integer, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
