"""
Listing Shield User Profile Model
"""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from listing_shield.core.database import Base


class Profile(Base):
    """User profile (profiles table); id matches auth.users.id"""

    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), primary_key=True)
    role = Column(String(20), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Profile(id='{self.id}', role='{self.role}')>"
