from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from buildmarket.categories import Category
from buildmarket.column_types import EnumValue, JSONList
from buildmarket.database import Base
from buildmarket.moderation import ModerationMixin


class ListingType(str, enum.Enum):
    SELL = "sell"
    RENT = "rent"
    BUY = "buy"


class MarketplaceListing(ModerationMixin, Base):
    __tablename__ = "marketplace_listings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(EnumValue(Category, length=30), nullable=False, index=True)
    subcategory = Column(String, nullable=True)
    price = Column(Integer, nullable=False)
    listing_type = Column(EnumValue(ListingType, length=10), nullable=False, default=ListingType.SELL)
    location = Column(String, nullable=False)
    condition = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    images = Column(JSONList, default=list)
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    owner = relationship("User", foreign_keys=[user_id])
