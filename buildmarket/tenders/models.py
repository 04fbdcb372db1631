from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from buildmarket.categories import Category
from buildmarket.column_types import EnumValue, JSONList
from buildmarket.database import Base
from buildmarket.moderation import ModerationMixin


class TenderStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELED = "canceled"


class PersonType(str, enum.Enum):
    INDIVIDUAL = "individual"
    LEGAL = "legal"


class BidStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Tender(ModerationMixin, Base):
    __tablename__ = "tenders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(EnumValue(Category, length=30), nullable=False, index=True)
    subcategory = Column(String, nullable=True)
    budget = Column(Integer, nullable=True)
    location = Column(String, nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=True)
    status = Column(EnumValue(TenderStatus, length=20), nullable=False, default=TenderStatus.OPEN)
    person_type = Column(EnumValue(PersonType, length=20), nullable=False, default=PersonType.INDIVIDUAL)
    required_professions = Column(JSONList, default=list)
    images = Column(JSONList, default=list)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("User", foreign_keys=[user_id])
    bids = relationship(
        "TenderBid",
        back_populates="tender",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TenderBid.created_at.desc()",
    )


class TenderBid(Base):
    __tablename__ = "tender_bids"

    id = Column(Integer, primary_key=True, index=True)
    tender_id = Column(Integer, ForeignKey("tenders.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
    timeframe = Column(Integer, nullable=False)  # days
    documents = Column(JSONList, default=list)
    status = Column(EnumValue(BidStatus, length=20), nullable=False, default=BidStatus.PENDING)
    is_accepted = Column(Boolean, nullable=False, default=False)
    rejection_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tender = relationship("Tender", back_populates="bids")
    bidder = relationship("User", foreign_keys=[user_id])
