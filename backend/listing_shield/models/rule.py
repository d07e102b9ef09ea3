"""
Listing Shield Compliance Rule Model
Trademark/policy terms flagged by the analyzer
"""

import enum

from sqlalchemy import Column, String, Text, Boolean, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from listing_shield.core.database import Base


class RiskLevel(str, enum.Enum):
    HIGH = "high"
    WARNING = "warning"


class ComplianceRule(Base):
    """Compliance rule (compliance_rules table), maintained by admins"""

    __tablename__ = "compliance_rules"

    id = Column(UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid())
    term = Column(Text, nullable=False)
    risk_level = Column(String(20), nullable=False, default=RiskLevel.WARNING.value)
    reason = Column(Text, nullable=False)
    category = Column(String(100), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<ComplianceRule(term='{self.term}', risk_level='{self.risk_level}')>"
