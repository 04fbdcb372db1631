from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from buildmarket.column_types import JSONList
from buildmarket.database import Base
from buildmarket.moderation import ModerationMixin


class DirectoryProfileMixin(ModerationMixin):
    """Columns shared by specialist and crew profiles."""

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    specialty = Column(String, nullable=False, index=True)
    experience = Column(Integer, nullable=False, default=0)  # years
    location = Column(String, nullable=False)
    specializations = Column(JSONList, default=list)
    images = Column(JSONList, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class Specialist(DirectoryProfileMixin, Base):
    __tablename__ = "specialists"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    hourly_rate = Column(Integer, nullable=False)

    owner = relationship("User", foreign_keys=[user_id])


class Crew(DirectoryProfileMixin, Base):
    __tablename__ = "crews"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    member_count = Column(Integer, nullable=False)
    daily_rate = Column(Integer, nullable=False)

    owner = relationship("User", foreign_keys=[user_id])
