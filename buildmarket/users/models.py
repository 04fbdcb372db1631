from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from sqlalchemy.sql import func
import enum

from buildmarket.column_types import EnumValue
from buildmarket.database import Base


class UserType(str, enum.Enum):
    INDIVIDUAL = "individual"
    CONTRACTOR = "contractor"
    COMPANY = "company"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    user_type = Column(EnumValue(UserType, length=20), nullable=False, default=UserType.INDIVIDUAL)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    avatar = Column(String, nullable=True)
    inn = Column(String, nullable=True)
    website = Column(String, nullable=True)
    rating = Column(Integer, nullable=False, default=0)
    completed_projects = Column(Integer, nullable=False, default=0)
    is_verified = Column(Boolean, nullable=False, default=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    is_top_specialist = Column(Boolean, nullable=False, default=False)
    wallet_balance = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def full_name(self):
        parts = [self.first_name, self.last_name]
        return " ".join(p for p in parts if p) or self.username
